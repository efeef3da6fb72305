from enum import Enum


class Outcome(Enum):
    """What happened to a single module request during a run."""

    LINKED_MODULE = "linked-module"
    LINKED_ALIAS = "linked-alias"
    CHECKED_OUT = "checked-out"
    ALREADY_PROCESSED = "already-processed"
    ALREADY_LINKED = "already-linked"
    ALREADY_SATISFIED = "already-satisfied"
    CONFLICT = "conflict"
    UNLOCATABLE = "unlocatable"


class LinkResult(Enum):
    LINKED = 1
    SATISFIED = 2


# Input lines emitted by go tools, e.g. "go: extracting k8s.io/api v0.20.0"
REQUEST_MARKERS = ("extracting", "downloading")

DEFAULT_VERSION = "master"

# Suffixes go tools attach to versions and module cache directories
INCOMPATIBLE_SUFFIX = "+incompatible"
TMP_MARKER = ".tmp"

# Browse-view path segments that follow the repository root in source URLs
BROWSE_SEGMENTS = ("/tree/", "/blob/")

GIT_SUFFIX = ".git"
GIT_DIR = ".git"

# Ancestor segments dropped while looking for a repository root
MAX_ANCESTOR_DROPS = 4

DEFAULT_MAX_REDIRECTS = 10
DEFAULT_HTTP_TIMEOUT = 30

REDIRECT_STATUSES = (301, 302, 303, 307, 308)

MODCACHE_MARKER = "/pkg/mod/"

LOCK_NAME = ".gopathlink.lock"
