import re
from urllib.parse import urlparse

from gopathlink.constants import BROWSE_SEGMENTS, GIT_SUFFIX


def parse_repo_url(url: str) -> str:
    """
    Parse a repository URL into a Go-style module path.

    Examples:
        https://github.com/user/repo.git -> github.com/user/repo
        git@github.com:user/repo.git -> github.com/user/repo
        https://gitlab.com/group/subgroup/project -> gitlab.com/group/subgroup/project

    Args:
        url: Repository URL

    Returns:
        Path-like string (e.g., "github.com/user/repo")
    """
    url = url.rstrip("/")
    if url.endswith(GIT_SUFFIX):
        url = url[: -len(GIT_SUFFIX)]

    # Handle SSH URLs (git@host:path)
    ssh_match = re.match(r"^git@([^:]+):(.+)$", url)
    if ssh_match:
        host, path = ssh_match.groups()
        return f"{host}/{path}"

    parsed = urlparse(url)
    if parsed.netloc:
        path = parsed.path.strip("/")
        return f"{parsed.netloc}/{path}" if path else parsed.netloc

    # Fallback: treat as is
    return url.replace(":", "/")


def module_url(module_path: str) -> str:
    """The https URL a module path is assumed to be cloned from."""
    return f"https://{module_path}"


def same_target(url: str, other: str) -> bool:
    """Whether two URLs name the same host and path, ignoring scheme and .git."""
    return parse_repo_url(url) == parse_repo_url(other)


def strip_source_url(url: str) -> str:
    """
    Reduce a source-location URL to its repository root.

    Drops go-source templates ("{/dir}") and browse-view segments:
        https://github.com/kubernetes/api/tree/master{/dir} -> https://github.com/kubernetes/api
    """
    url = url.split("{", 1)[0]
    for segment in BROWSE_SEGMENTS:
        url = url.split(segment, 1)[0]
    return url.rstrip("/")
