"""
Version selection: check a repository out at the ref best matching a version.

Multi-package repositories tag releases as "<subpackage>/<semver>"
(cloud.google.com/go tags "bigquery/v1.2.3"), so qualified refs are tried
before the bare version. The candidates form an ordered list of strategies;
a single driver loop tries them in turn and reports which one won.
"""

import logging
from pathlib import Path
from typing import List, Optional

from gopathlink.constants import DEFAULT_VERSION
from gopathlink.context import RunContext
from gopathlink.git.vcs import commit_probe
from gopathlink.model.checkout import CheckoutResult, CheckoutStrategy

logger = logging.getLogger(__name__)


def is_default_version(version: str) -> bool:
    return not version or version == DEFAULT_VERSION


def minor_stripped(version: str) -> Optional[str]:
    """v1.2.3 -> v1.2"""
    if "." not in version:
        return None
    return version.rsplit(".", 1)[0]


def major_stripped(version: str) -> Optional[str]:
    """v1.2.3 -> v1 (needs at least two dot-separated segments to strip)"""
    if version.count(".") < 2:
        return None
    return version.rsplit(".", 2)[0]


def prefix_probe(version: str, remote_branches: List[str]) -> Optional[str]:
    """
    Best prefix-derived ref for version among the remote branches.

    The minor-stripped version is searched first, returning the branch text
    from the match onwards (origin/release-v1.2 -> v1.2 for v1.2.3;
    origin/v1.2-fixes -> v1.2-fixes). Failing that, the major-stripped version
    is returned if any remote branch mentions it.
    """
    minor = minor_stripped(version)
    if minor:
        for branch in remote_branches:
            index = branch.find(minor)
            if index >= 0:
                return branch[index:]
    major = major_stripped(version)
    if major and any(major in branch for branch in remote_branches):
        return major
    return None


def _ref_forms(version: str, basename: str, label: str) -> List[CheckoutStrategy]:
    forms = [
        (f"{label}-qualified-lower", f"{basename.lower()}/{version}"),
        (f"{label}-qualified", f"{basename}/{version}"),
        (label, version),
    ]
    strategies = []
    for name, ref in forms:
        for create_branch in (True, False):
            strategy = CheckoutStrategy(name=name, ref=ref, create_branch=create_branch)
            if any(
                s.ref == strategy.ref and s.create_branch == strategy.create_branch
                for s in strategies
            ):
                continue
            strategies.append(strategy)
    return strategies


def version_strategies(
    version: str,
    basename: str,
    default_branch: str,
    prefix: Optional[str] = None,
    commit: Optional[str] = None,
) -> List[CheckoutStrategy]:
    """
    Ordered checkout attempts for a version.

    Order: <basename lowercased>/<version> as a new branch then as an
    existing ref, <basename>/<version> likewise, <version> likewise, the
    commit probe, the same forms with the prefix probe, the default branch.
    """
    strategies = _ref_forms(version, basename, "exact")
    if commit:
        strategies.append(CheckoutStrategy(name="commit", ref=commit))
    if prefix and prefix != version:
        strategies.extend(_ref_forms(prefix, basename, "prefix"))
    strategies.append(CheckoutStrategy(name="default-branch", ref=default_branch))
    return strategies


def run_strategies(
    repo_dir: Path, strategies: List[CheckoutStrategy], vcs
) -> CheckoutResult:
    """Try each strategy in order; the first successful checkout wins."""
    for strategy in strategies:
        if vcs.checkout(repo_dir, strategy.ref, create_branch=strategy.create_branch):
            logger.debug(f"Checked out {repo_dir} via {strategy}")
            return CheckoutResult(ok=True, strategy=strategy)
    return CheckoutResult(ok=False)


def plan_checkout(repo_dir: Path, version: str, basename: str, vcs) -> List[CheckoutStrategy]:
    """
    Build the strategy list for a repository, querying refs as needed.

    Local tags are consulted first; a single remote update only runs when no
    local tag mentions the version or its prefix probe.
    """
    default_branch = vcs.default_branch(repo_dir)
    if is_default_version(version):
        return [CheckoutStrategy(name="default-branch", ref=default_branch)]

    prefix = prefix_probe(version, vcs.remote_branches(repo_dir))
    tags = vcs.tags(repo_dir)
    satisfied = any(version in tag or (prefix and prefix in tag) for tag in tags)
    if not satisfied:
        logger.debug(f"No local tag matches {version} in {repo_dir}, updating remotes")
        vcs.remote_update(repo_dir)
        prefix = prefix_probe(version, vcs.remote_branches(repo_dir))

    commit = commit_probe(version)
    if commit and not vcs.commit_exists(repo_dir, commit):
        commit = None

    return version_strategies(version, basename, default_branch, prefix, commit)


def checkout_version(
    repo_dir: Path, version: str, basename: str, ctx: RunContext
) -> CheckoutResult:
    """
    Check repo_dir out at the ref best matching version.

    WARNING: uncommitted changes in repo_dir are discarded first (stash, hard
    reset, clean). Callers must not rely on them surviving.

    Args:
        repo_dir: Repository working tree
        version: Requested version ("master" or empty for the default branch)
        basename: Last segment of the requested module path
        ctx: Run context providing the git transport

    Returns:
        CheckoutResult naming the winning strategy. A failed fast-forward
        pull afterwards does not change it.
    """
    vcs = ctx.vcs
    vcs.discard_changes(repo_dir)

    strategies = plan_checkout(repo_dir, version, basename, vcs)
    result = run_strategies(repo_dir, strategies, vcs)
    if not result.ok:
        logger.debug(f"No ref of {repo_dir} could be checked out for {version}")
        return result

    if not vcs.pull_ff_only(repo_dir):
        logger.debug(f"Fast-forward pull skipped in {repo_dir}")
    return result
