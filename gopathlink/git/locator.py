"""
Repository location for module paths.

A module path rarely names a repository directly: k8s.io/api/core/v1 lives in
the k8s.io/api repository, which is itself served from github.com. The
locator walks the path's ancestors, longest first, and for each candidate
reuses an existing checkout, clones https://<candidate>, or asks the alias
discoverer where the candidate really lives.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from gopathlink.constants import MAX_ANCESTOR_DROPS
from gopathlink.context import RunContext
from gopathlink.git.clone import clone_into
from gopathlink.git.discovery import discover
from gopathlink.git.urls import module_url
from gopathlink.model.repo import LocateResult, RepoRoot
from gopathlink.utils import is_repo

logger = logging.getLogger(__name__)


def candidate_paths(path: str) -> List[str]:
    """
    Repository root candidates for a module path, longest first.

    The path itself comes first, then its ancestors with up to four trailing
    segments dropped. Candidates without any "/" (bare hosts) are skipped.

    Example:
        k8s.io/api/core/v1 -> [k8s.io/api/core/v1, k8s.io/api/core, k8s.io/api]
    """
    segments = [segment for segment in path.strip("/").split("/") if segment]
    candidates: List[str] = []
    for drop in range(MAX_ANCESTOR_DROPS + 1):
        if drop >= len(segments):
            break
        candidate = "/".join(segments[: len(segments) - drop])
        if "/" not in candidate or candidate in candidates:
            continue
        candidates.append(candidate)
    return candidates


def _existing_checkout(candidate: str, ctx: RunContext) -> Optional[RepoRoot]:
    dest = ctx.destination(candidate)
    if not is_repo(dest):
        return None
    resolved = Path(os.path.realpath(dest))
    canonical = ctx.relative_to_root(resolved) or candidate
    return RepoRoot(
        canonical_path=canonical, local_dir=resolved, is_symlink=dest.is_symlink()
    )


def _find_root(candidate: str, ctx: RunContext) -> Optional[RepoRoot]:
    existing = _existing_checkout(candidate, ctx)
    if existing is not None:
        via = " through a symlink" if existing.is_symlink else ""
        logger.debug(f"Found existing checkout for {candidate} at {existing.local_dir}{via}")
        return existing

    url = module_url(candidate)
    dest = ctx.destination(candidate)
    if clone_into(url, dest, ctx):
        return RepoRoot(canonical_path=candidate, local_dir=dest)

    return discover(url, ctx)


def locate(path: str, ctx: RunContext) -> Optional[LocateResult]:
    """
    Find or create the checkout serving a module path.

    Args:
        path: Requested module path
        ctx: Run context

    Returns:
        LocateResult with the canonical path of the repository; alias_from is
        set to the requested path when the two differ. None if no candidate
        could be located.
    """
    candidates = candidate_paths(path)
    # deeper candidates lie inside the longest existing checkout
    enclosing = next((c for c in candidates if is_repo(ctx.destination(c))), None)
    if enclosing is not None:
        candidates = [enclosing]

    for candidate in candidates:
        root = _find_root(candidate, ctx)
        if root is None:
            continue
        alias_from = path if root.canonical_path != path else None
        return LocateResult(
            repo_root=root, canonical_path=root.canonical_path, alias_from=alias_from
        )
    return None


def reconcile_alias(
    requested_path: str, canonical_path: str, ctx: RunContext
) -> Optional[str]:
    """
    Module path the requested destination should link to, if any.

    No link is needed when the requested destination already exists (e.g. a
    package directory inside the located repository). A case-insensitive
    subpath match is tried first:

        googleapis/gnostic/OpenAPIv3 -> googleapis/gnostic/openapiv3

    otherwise the canonical repository itself is the target:

        Masterminds/semver/v3 -> Masterminds/semver
    """
    if requested_path == canonical_path:
        return None
    if ctx.destination(requested_path).exists():
        return None

    canonical_lower = canonical_path.lower()
    requested_lower = requested_path.lower()
    if canonical_lower in requested_lower:
        suffix = requested_lower.split(canonical_lower, 1)[1]
        if suffix:
            subpath = f"{canonical_path}{suffix}"
            if ctx.destination(subpath).is_dir():
                return subpath
    return canonical_path
