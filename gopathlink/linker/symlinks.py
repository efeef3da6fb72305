import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from filelock import FileLock

from gopathlink.constants import LOCK_NAME, MODCACHE_MARKER, LinkResult
from gopathlink.exceptions import DestinationConflictError
from gopathlink.utils import is_broken_symlink, is_generated_tree

logger = logging.getLogger(__name__)


class SymlinkManager:
    """
    Manages the symbolic links gopathlink keeps in the flat source root.

    Module paths in the source root are either real checkouts or links to
    where their content actually lives:

        {source_root}/
            k8s.io/api/core/v1          # -> {modcache}/k8s.io/api@v0.20.0/core/v1
            cloud.google.com/go         # -> {source_root}/github.com/googleapis/google-cloud-go
            github.com/googleapis/google-cloud-go/
                .git/

    Replacing a destination follows the overwrite policy: links, broken
    links, empty directories and trees holding only links are always
    replaceable; a checkout already at the wanted version is left alone;
    anything else is only replaced in overwrite mode.

    Args:
        source_root: The flat source root (GOPATH/src)
        vcs: Git transport, used to tell whether a checkout matches a version

    Example:
        >>> manager = SymlinkManager(source_root, GitClient())
        >>> with manager.lock:
        ...     manager.link(dest, target, "v0.20.0")
    """

    def __init__(self, source_root: Path, vcs, overwrite: bool = False):
        self.source_root: Path = Path(source_root)
        self.vcs = vcs
        self.overwrite = overwrite
        self.lock = FileLock(self.source_root.parent / LOCK_NAME)

    def _clear(self, dest: Path, version: str) -> Optional[LinkResult]:
        """Remove dest if policy allows; SATISFIED when it must stay as is."""
        if dest.is_symlink():
            dest.unlink()
            return None
        if not dest.exists():
            return None
        if dest.is_dir():
            if is_generated_tree(dest):
                shutil.rmtree(dest)
                return None
            if self.overwrite:
                logger.debug(f"Overwrite mode: removing {dest}")
                shutil.rmtree(dest)
                return None
            if self.vcs.head_matches(dest, version):
                return LinkResult.SATISFIED
            raise DestinationConflictError(
                dest, "it holds content not at the requested version (use overwrite mode)"
            )
        if self.overwrite:
            dest.unlink()
            return None
        raise DestinationConflictError(dest, "it is a regular file")

    def link(self, dest: Path, target: Path, version: str) -> LinkResult:
        """
        Make dest a symbolic link to target.

        Returns:
            LINKED when the link was (re)created, SATISFIED when dest already
            holds a checkout at version and was left untouched

        Raises:
            DestinationConflictError: dest holds content that must not be replaced
        """
        if dest.is_symlink() and Path(os.path.realpath(dest)) == Path(
            os.path.realpath(target)
        ):
            return LinkResult.LINKED

        cleared = self._clear(dest, version)
        if cleared is not None:
            return cleared

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.symlink_to(target)
        return LinkResult.LINKED

    def iter_links(self) -> Iterator[Path]:
        """All symbolic links below the source root (links are not followed)."""
        if not self.source_root.is_dir():
            return
        for root, dirs, files in os.walk(self.source_root):
            for name in dirs + files:
                path = Path(root) / name
                if path.is_symlink():
                    yield path

    def purge_broken(self) -> int:
        """
        Remove broken links below the source root.

        Returns:
            The number of broken links that could not be removed
        """
        failures = 0
        for link in list(self.iter_links()):
            if not is_broken_symlink(link):
                continue
            try:
                link.unlink()
                logger.debug(f"Removed broken link {link}")
            except OSError as e:
                logger.warning(f"Could not remove broken link {link}: {e}")
                failures += 1
        return failures

    def clean_module_links(self, modcache_dir: Optional[Path] = None) -> int:
        """
        Remove links that point into the module cache.

        Returns:
            The number of links that could not be removed
        """
        modcache = os.path.realpath(modcache_dir) if modcache_dir else None
        failures = 0
        for link in list(self.iter_links()):
            resolved = os.path.realpath(link)
            in_cache = MODCACHE_MARKER in resolved or (
                modcache is not None and resolved.startswith(modcache + os.sep)
            )
            if not in_cache:
                continue
            try:
                link.unlink()
                logger.debug(f"Removed module link {link}")
            except OSError as e:
                logger.warning(f"Could not remove {link}: {e}")
                failures += 1
        return failures

    def describe_links(self) -> List[Tuple[str, str]]:
        """(link, target) pairs, both relative to the source root where possible."""
        root = os.path.realpath(self.source_root)
        pairs = []
        for link in sorted(self.iter_links()):
            resolved = os.path.realpath(link)
            if resolved.startswith(root + os.sep):
                resolved = os.path.relpath(resolved, root)
            pairs.append((link.relative_to(self.source_root).as_posix(), resolved))
        return pairs
