"""
Alias discovery for module paths that are not clonable as-is.

Vanity import paths (k8s.io/api, cloud.google.com/go, ...) are served by a
landing page carrying source metadata:

    <meta name="go-source" content="k8s.io/api https://github.com/kubernetes/api
          https://github.com/kubernetes/api/tree/master{/dir} ...">
    <meta name="go-import" content="k8s.io/api git https://github.com/kubernetes/api">

The discoverer extracts the repository URL from those markers, follows HTTP
redirects of that URL (recursing when the redirect points elsewhere) and
clones the final target into the source root under its own canonical path.
Every URL looked up is memoized in the run's alias cache, failures included.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, NavigableString, Tag

from gopathlink import __version__
from gopathlink.config import get_http_timeout
from gopathlink.context import RunContext
from gopathlink.exceptions import DiscoveryError
from gopathlink.git.clone import clone_into
from gopathlink.git.urls import parse_repo_url, same_target, strip_source_url
from gopathlink.model.http import HeadResponse, SourceMeta
from gopathlink.model.repo import DiscoveryCacheEntry, DiscoveryOutcome, RepoRoot
from gopathlink.utils import is_repo

logger = logging.getLogger(__name__)

USER_AGENT = f"gopathlink/{__version__}"

_HTTPS_URL = re.compile(r"https://[^\s\"'<>{}]+")


class HttpSourceClient:
    """requests-based transport for landing pages and header-only probes."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else get_http_timeout()
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch_meta(self, url: str) -> SourceMeta:
        """GET url (following redirects) and extract its source markers."""
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise DiscoveryError(url, str(e))
        return parse_source_meta(response.text)

    def head(self, url: str) -> HeadResponse:
        try:
            response = self.session.head(
                url, timeout=self.timeout, allow_redirects=False
            )
        except requests.RequestException as e:
            raise DiscoveryError(url, str(e))
        return HeadResponse(
            status_code=response.status_code,
            location=response.headers.get("Location"),
        )


def _first_https_url_after(marker: Tag) -> Optional[str]:
    for element in [marker, *marker.next_elements]:
        if isinstance(element, Tag):
            values = element.attrs.values()
        elif isinstance(element, NavigableString):
            values = [str(element)]
        else:
            continue
        for value in values:
            if isinstance(value, list):
                value = " ".join(value)
            match = _HTTPS_URL.search(str(value))
            if match:
                return match.group(0)
    return None


def parse_source_meta(document: str) -> SourceMeta:
    """Extract go-source, go-import and pkg-files markers from an HTML page."""
    soup = BeautifulSoup(document, "html.parser")
    meta = SourceMeta()
    for tag in soup.find_all("meta"):
        name = tag.get("name")
        content = tag.get("content")
        if not content:
            continue
        if name == "go-source":
            meta.go_source.append(content)
        elif name == "go-import":
            meta.go_import.append(content)
    pkg_files = soup.find(id="pkg-files")
    if pkg_files is not None:
        meta.pkg_files = _first_https_url_after(pkg_files)
    return meta


def _matches_prefix(module_path: str, prefix: str) -> bool:
    return module_path == prefix or module_path.startswith(prefix + "/")


def _from_go_source(contents: list[str], module_path: str) -> Optional[str]:
    # content: "<prefix> <home> <directory-template> <file-template>"
    for content in _by_prefix(contents, module_path):
        urls = [field for field in content.split()[1:] if field.startswith("https://")]
        if urls:
            return urls[-1]
    return None


def _from_go_import(contents: list[str], module_path: str) -> Optional[str]:
    # content: "<prefix> <vcs> <repo-root>"; proxy ("mod") entries are not clonable
    for content in _by_prefix(contents, module_path):
        fields = content.split()
        if len(fields) >= 3 and fields[1] == "git":
            return fields[2]
    return None


def _by_prefix(contents: list[str], module_path: str) -> list[str]:
    """Markers whose prefix covers module_path, longest prefix first.

    Markers with a foreign prefix are kept at the end, as a page may be
    reached through a redirect from another name.
    """
    matching = []
    others = []
    for content in contents:
        fields = content.split()
        if not fields:
            continue
        if _matches_prefix(module_path, fields[0]):
            matching.append(content)
        else:
            others.append(content)
    matching.sort(key=lambda c: len(c.split()[0]), reverse=True)
    return matching + others


def extract_source_url(meta: SourceMeta, module_path: str = "") -> Optional[str]:
    """
    Pick the repository URL advertised by a landing page.

    Priority: go-source, then go-import, then the pkg-files marker. The
    result is reduced to the repository root (no templates, no /tree/ or
    /blob/ views).
    """
    url = (
        _from_go_source(meta.go_source, module_path)
        or _from_go_import(meta.go_import, module_path)
        or meta.pkg_files
    )
    if not url:
        return None
    url = strip_source_url(url)
    return url if url.startswith("https://") and parse_repo_url(url) else None


def _clone_target(url: str, module_path: str, ctx: RunContext) -> Optional[RepoRoot]:
    local_dir = ctx.destination(module_path)
    if clone_into(url, local_dir, ctx):
        return RepoRoot(canonical_path=module_path, local_dir=local_dir)
    return None


def _existing_root(module_path: str, ctx: RunContext) -> Optional[RepoRoot]:
    local_dir = ctx.destination(module_path)
    if not is_repo(local_dir):
        return None
    resolved = Path(os.path.realpath(local_dir))
    canonical = ctx.relative_to_root(resolved) or module_path
    return RepoRoot(
        canonical_path=canonical,
        local_dir=resolved,
        is_symlink=local_dir.is_symlink(),
    )


def discover(url: str, ctx: RunContext, depth: int = 0) -> Optional[RepoRoot]:
    """
    Find the repository serving url and make it available in the source root.

    Args:
        url: https URL of a module path (or of a redirect target)
        ctx: Run context holding the alias cache
        depth: Current redirect recursion depth

    Returns:
        The repository root, or None if discovery failed
    """
    cached = ctx.aliases.get(url)
    if cached is not None:
        if cached.ok:
            logger.debug(f"Using cached discovery of {cached.alias_path} for {url}")
            return cached.repo_root
        logger.debug(f"Using cached discovery failure for {url}")
        return None

    root = None
    try:
        root = _discover(url, ctx, depth)
    except DiscoveryError as e:
        logger.debug(str(e))

    ctx.aliases.record(
        DiscoveryCacheEntry(
            url=url,
            outcome=DiscoveryOutcome.SUCCESS if root else DiscoveryOutcome.FAILURE,
            repo_root=root,
            alias_path=root.canonical_path if root else None,
        )
    )
    if root is not None:
        logger.debug(f"Discovered {root.canonical_path} for {url}")
    return root


def _discover(url: str, ctx: RunContext, depth: int) -> Optional[RepoRoot]:
    if depth > ctx.max_redirects:
        raise DiscoveryError(url, f"more than {ctx.max_redirects} redirects")

    source_url = extract_source_url(ctx.http.fetch_meta(url), parse_repo_url(url))
    if not source_url:
        raise DiscoveryError(url, "no source location markers found")

    module_path = parse_repo_url(source_url)
    existing = _existing_root(module_path, ctx)
    if existing is not None:
        return existing

    head = ctx.http.head(source_url)
    if head.is_redirect:
        location = urljoin(source_url, head.location) if head.location else source_url
        if not same_target(location, url):
            logger.debug(f"{source_url} redirects to {location}")
            return discover(location, ctx, depth + 1)
        return _clone_target(location, module_path, ctx)
    if head.is_ok:
        return _clone_target(source_url, module_path, ctx)
    raise DiscoveryError(url, f"{source_url} answered HTTP {head.status_code}")
