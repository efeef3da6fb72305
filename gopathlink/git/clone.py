import logging
import os
import shutil
from pathlib import Path

from gopathlink.context import RunContext
from gopathlink.model.repo import DiscoveryCacheEntry, DiscoveryOutcome
from gopathlink.utils import is_generated_tree

logger = logging.getLogger(__name__)


def prepare_clone_destination(dest: Path) -> None:
    """
    Make room for a fresh clone at dest.

    Symlinks, empty directories and trees holding nothing but
    directories and symlinks are removed; anything else is left for git to
    refuse.
    """
    if dest.is_symlink():
        dest.unlink()
    elif dest.is_dir() and is_generated_tree(dest):
        shutil.rmtree(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)


def clone_into(url: str, dest: Path, ctx: RunContext) -> bool:
    """
    Clone url into dest once per run.

    The outcome is memoized in the run's clone cache: a URL that failed to
    clone is never retried, one that succeeded is not cloned again.

    Returns:
        True if the repository is available at dest
    """
    cached = ctx.clones.get(url)
    if cached is not None:
        logger.debug(f"Using cached clone outcome for {url}: {cached.outcome.value}")
        return cached.ok

    prepare_clone_destination(dest)
    logger.debug(f"Cloning {url} to {dest}")
    ok = ctx.vcs.clone(url, dest)
    if not ok and dest.is_dir() and not os.listdir(dest):
        dest.rmdir()

    ctx.clones.record(
        DiscoveryCacheEntry(
            url=url,
            outcome=DiscoveryOutcome.SUCCESS if ok else DiscoveryOutcome.FAILURE,
        )
    )
    if ok:
        logger.info(f"Cloned {url} to {dest}")
    return ok
