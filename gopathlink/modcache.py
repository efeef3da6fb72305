"""
Lookups in the module cache populated by go tools (GOPATH/pkg/mod).

The cache stores each module version extracted under
`<module path>@<version>/`, with uppercase letters escaped as `!lower`.
A package path inside a module (k8s.io/api/core/v1) is found as a
subdirectory of its module's versioned directory (k8s.io/api@v0.20.0/core/v1).
The cache is only read, never written.
"""

import glob
import logging
import re
from pathlib import Path
from typing import Iterator, Optional

from gopathlink.constants import TMP_MARKER
from gopathlink.model.repo import ModuleCacheHit
from gopathlink.model.request import strip_version_suffix

logger = logging.getLogger(__name__)


def escape_module_path(path: str) -> str:
    """
    Escape Go module paths by converting uppercase to !lowercase.
    Example: github.com/Sirupsen/logrus -> github.com/!sirupsen/logrus
    """
    return re.sub(r"([A-Z])", lambda m: "!" + m.group(1).lower(), path)


def version_from_dir(name: str) -> str:
    """api@v0.20.0 -> v0.20.0"""
    return strip_version_suffix(name.split("@", 1)[1]) if "@" in name else ""


def _strip_tmp_marker(entry: Path) -> Optional[Path]:
    """Map an in-progress extraction dir (x@v1.0.0.tmp-123) to its final name."""
    if TMP_MARKER not in entry.name:
        return entry
    final = entry.with_name(entry.name.split(TMP_MARKER, 1)[0])
    return final if final.is_dir() else None


def _versioned_dirs(parent: Path, base: str, version: str) -> Iterator[Path]:
    """Directories `<base>@*` in parent whose name mentions version, exact match first."""
    if not parent.is_dir():
        return
    exact = f"{base}@{version}"
    entries = sorted(
        parent.glob(f"{glob.escape(base)}@*"),
        key=lambda entry: (entry.name != exact, entry.name),
    )
    seen = set()
    for entry in entries:
        if version not in entry.name or not entry.is_dir():
            continue
        final = _strip_tmp_marker(entry)
        if final is None or final in seen:
            continue
        seen.add(final)
        yield final


def find_in_cache(
    module_path: str, version: str, modcache_dir: Path
) -> Optional[ModuleCacheHit]:
    """
    Find an extracted copy of module_path at version in the module cache.

    Search order:
        1. `<parent>/<basename>@<version>*` (the path is a module itself)
        2. `<ancestor>@*/<rest of the path>` for each ancestor, longest first,
           keeping versioned directories whose name contains version

    Args:
        module_path: Requested module or package path
        version: Requested version
        modcache_dir: Root of the module cache

    Returns:
        The matched directory and the version read from its name (which may
        be more specific than the request), or None
    """
    if not version or not modcache_dir.is_dir():
        return None

    segments = escape_module_path(module_path).split("/")
    parent = modcache_dir.joinpath(*segments[:-1])
    base = segments[-1]
    for entry in _versioned_dirs(parent, base, version):
        if entry.name.startswith(f"{base}@{version}"):
            logger.debug(f"Module cache hit for {module_path}@{version}: {entry}")
            return ModuleCacheHit(local_dir=entry, version=version_from_dir(entry.name))

    for split in range(len(segments) - 1, 0, -1):
        root_parent = modcache_dir.joinpath(*segments[: split - 1])
        root_base = segments[split - 1]
        rest = segments[split:]
        for entry in _versioned_dirs(root_parent, root_base, version):
            candidate = entry.joinpath(*rest)
            if candidate.is_dir():
                logger.debug(
                    f"Module cache hit for {module_path}@{version}: {candidate}"
                )
                return ModuleCacheHit(
                    local_dir=candidate, version=version_from_dir(entry.name)
                )
    return None
