"""
Thin GitPython wrapper for the git operations the resolver decides to run.

Every public method reports success as a boolean (or returns an empty
listing) instead of raising: a failing clone or checkout only means "try the
next candidate" to the callers. Failures are logged at debug level.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gopathlink.exceptions import TransportError

logger = logging.getLogger(__name__)

# Never block on credential prompts for URLs that turn out not to be repositories
_GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class GitClient:
    """Git transport used by the locator and the version selector."""

    def _open(self, repo_dir: Path, search_parents: bool = False) -> Repo:
        try:
            return Repo(str(repo_dir), search_parent_directories=search_parents)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise TransportError("open", str(repo_dir), str(e))

    def _git(self, repo_dir: Path, operation: str, *args, **kwargs) -> str:
        repo = self._open(repo_dir)
        try:
            with repo.git.custom_environment(**_GIT_ENV):
                return getattr(repo.git, operation)(*args, **kwargs)
        except GitCommandError as e:
            raise TransportError(operation, str(repo_dir), e.stderr.strip())

    def clone(self, url: str, dest: Path) -> bool:
        try:
            Repo.clone_from(url, str(dest), env=_GIT_ENV)
        except GitCommandError as e:
            logger.debug(f"git clone {url} failed: {e.stderr.strip()}")
            return False
        return True

    def discard_changes(self, repo_dir: Path) -> None:
        """Stash local modifications, hard reset to HEAD and remove untracked files."""
        for operation, args in (
            ("stash", ()),
            ("reset", ("--hard", "HEAD")),
            ("clean", ("-fd",)),
        ):
            try:
                self._git(repo_dir, operation, *args)
            except TransportError as e:
                logger.debug(str(e))

    def tags(self, repo_dir: Path) -> List[str]:
        try:
            output = self._git(repo_dir, "tag")
        except TransportError as e:
            logger.debug(str(e))
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    def remote_branches(self, repo_dir: Path) -> List[str]:
        """Remote tracking branches, e.g. ["origin/master", "origin/release-1.2"]."""
        try:
            output = self._git(repo_dir, "branch", "-r")
        except TransportError as e:
            logger.debug(str(e))
            return []
        branches = []
        for line in output.splitlines():
            line = line.strip()
            # symbolic entries such as "origin/HEAD -> origin/master"
            if not line or "->" in line:
                continue
            branches.append(line)
        return branches

    def remote_update(self, repo_dir: Path) -> bool:
        try:
            self._git(repo_dir, "remote", "update")
        except TransportError as e:
            logger.debug(str(e))
            return False
        return True

    def commit_exists(self, repo_dir: Path, rev: str) -> bool:
        if not rev:
            return False
        try:
            self._git(repo_dir, "log", "-n1", "--oneline", rev, "--")
        except TransportError:
            return False
        return True

    def checkout(self, repo_dir: Path, ref: str, create_branch: bool = False) -> bool:
        try:
            if create_branch:
                self._git(repo_dir, "checkout", ref, b=ref)
            else:
                self._git(repo_dir, "checkout", ref)
        except TransportError as e:
            logger.debug(str(e))
            return False
        return True

    def pull_ff_only(self, repo_dir: Path) -> bool:
        try:
            self._git(repo_dir, "pull", "--ff-only")
        except TransportError as e:
            logger.debug(str(e))
            return False
        return True

    def default_branch(self, repo_dir: Path) -> str:
        """Branch origin/HEAD points to, else master, else main."""
        try:
            ref = self._git(
                repo_dir, "symbolic-ref", "--short", "refs/remotes/origin/HEAD"
            )
            return ref.strip().split("/", 1)[-1]
        except TransportError:
            pass
        try:
            heads = [head.name for head in self._open(repo_dir).heads]
        except TransportError:
            heads = []
        if "master" not in heads and "main" in heads:
            return "main"
        return "master"

    def head_refs(self, repo_dir: Path) -> Tuple[List[str], Optional[str]]:
        """Ref names pointing at HEAD (current branch, tags) and the HEAD sha."""
        try:
            repo = self._open(repo_dir, search_parents=True)
        except TransportError as e:
            logger.debug(str(e))
            return [], None
        names = []
        sha = None
        try:
            if not repo.head.is_detached:
                names.append(repo.active_branch.name)
            names.extend(
                line.strip()
                for line in repo.git.tag("--points-at", "HEAD").splitlines()
                if line.strip()
            )
            sha = repo.head.commit.hexsha
        except (GitCommandError, ValueError, TypeError) as e:
            logger.debug(f"Could not describe HEAD of {repo_dir}: {e}")
        return names, sha

    def head_matches(self, repo_dir: Path, version: str) -> bool:
        """Whether HEAD already corresponds to version (ref name or commit suffix)."""
        names, sha = self.head_refs(repo_dir)
        if any(name == version or name.endswith("/" + version) for name in names):
            return True
        sha_probe = commit_probe(version)
        return bool(sha and sha_probe) and sha.startswith(sha_probe)


def commit_probe(version: str) -> Optional[str]:
    """Trailing component of a pseudo-version, e.g. "abcdef123456"."""
    if "-" not in version:
        return None
    candidate = version.rsplit("-", 1)[-1]
    return candidate or None
