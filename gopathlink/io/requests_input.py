"""Reading module requests from go tool output, files and arguments"""

import logging
import re
from typing import Callable, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from gopathlink.constants import DEFAULT_VERSION, REQUEST_MARKERS
from gopathlink.model.request import ModuleRequest

logger = logging.getLogger(__name__)

# "go: extracting k8s.io/api v0.20.0" and "go: extracting k8s.io/api: v0.20.0"
_REQUEST_LINE = re.compile(
    r"\b(?:%s)\s+([^\s:]+):?(?:\s+(\S+))?" % "|".join(REQUEST_MARKERS)
)

# Sorts after any path segment, so ancestors follow their descendants
_LAST = "\U0010ffff"


def parse_request_line(line: str) -> Optional[ModuleRequest]:
    """
    Parse one line of go tool output.

    Returns:
        The request announced by the line, or None for any other line
    """
    match = _REQUEST_LINE.search(line)
    if not match:
        return None
    path, version = match.groups()
    try:
        return ModuleRequest(path=path, version=version or DEFAULT_VERSION)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed request line {line!r}: {e}")
        return None


def parse_request_arg(token: str) -> ModuleRequest:
    """path[@version] as given on the command line; version defaults to master."""
    path, _, version = token.partition("@")
    return ModuleRequest(path=path, version=version or DEFAULT_VERSION)


def read_requests(
    lines: Iterable[str], echo: Optional[Callable[[str], None]] = None
) -> Iterator[ModuleRequest]:
    """
    Yield requests from lines as they arrive.

    Every line is handed to echo first, so go tool output piped through
    stays visible.
    """
    for line in lines:
        line = line.rstrip("\n")
        if echo is not None:
            echo(line)
        request = parse_request_line(line)
        if request is not None:
            yield request


def _order_key(request: ModuleRequest):
    return (tuple(request.path.split("/")) + (_LAST,), request.version)


def order_requests(requests: Iterable[ModuleRequest]) -> List[ModuleRequest]:
    """
    Order a batch so deeper paths come before their ancestors.

    cloud.google.com/go/storage and cloud.google.com/go/bigquery are handled
    before cloud.google.com/go, so the top-level module decides the final
    checkout of the shared repository. Unrelated paths keep lexical order.
    """
    return sorted(requests, key=_order_key)
