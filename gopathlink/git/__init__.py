"""
Git operations for gopathlink.

Architecture:
    - vcs: GitPython transport (clone, checkout, fetch, stash, log)
    - locator: finds the repository root serving a module path
    - discovery: follows vanity import metadata and redirects to a clonable URL
    - checkout: selects and checks out the ref matching a module version
"""

from .checkout import checkout_version, version_strategies
from .discovery import HttpSourceClient, discover
from .locator import candidate_paths, locate, reconcile_alias
from .urls import parse_repo_url
from .vcs import GitClient
from gopathlink.utils import is_repo

__all__ = [
    "checkout_version",
    "version_strategies",
    "HttpSourceClient",
    "discover",
    "candidate_paths",
    "locate",
    "reconcile_alias",
    "parse_repo_url",
    "GitClient",
    "is_repo",
]
