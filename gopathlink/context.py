"""
Run-scoped state shared by the resolver components.

A RunContext is created once per invocation and handed to every component
call; nothing here outlives the run or is written to disk.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Set, Tuple

from gopathlink.constants import DEFAULT_MAX_REDIRECTS
from gopathlink.model.repo import DiscoveryCacheEntry

logger = logging.getLogger(__name__)


class DiscoveryCache:
    """
    Append-only memo of lookup outcomes keyed by URL.

    The first entry recorded for a URL wins; later records for the same URL
    are ignored so a lookup never changes its answer within a run.
    """

    def __init__(self, name: str = "discovery"):
        self.name = name
        self._entries: Dict[str, DiscoveryCacheEntry] = {}

    def get(self, url: str) -> Optional[DiscoveryCacheEntry]:
        return self._entries.get(url)

    def record(self, entry: DiscoveryCacheEntry) -> DiscoveryCacheEntry:
        existing = self._entries.get(entry.url)
        if existing is not None:
            logger.debug(f"{self.name} cache already holds {entry.url}, keeping it")
            return existing
        self._entries[entry.url] = entry
        return entry

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DiscoveryCacheEntry]:
        return iter(self._entries.values())


class ProcessedSet:
    """(path, version) pairs already resolved during this run."""

    def __init__(self):
        self._seen: Set[Tuple[str, str]] = set()

    def add(self, path: str, version: str) -> None:
        self._seen.add((path, version))

    def __contains__(self, item: Tuple[str, str]) -> bool:
        return item in self._seen

    def __len__(self) -> int:
        return len(self._seen)


@dataclass
class RunContext:
    """Everything one resolution run needs.

    vcs and http are the transport collaborators (see gopathlink.git.vcs and
    gopathlink.git.discovery); tests swap them for fakes.
    """

    source_root: Path
    modcache_dir: Path
    vcs: object
    http: object
    overwrite: bool = False
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    clones: DiscoveryCache = field(default_factory=lambda: DiscoveryCache("clone"))
    aliases: DiscoveryCache = field(default_factory=lambda: DiscoveryCache("follow"))
    processed: ProcessedSet = field(default_factory=ProcessedSet)

    def destination(self, module_path: str) -> Path:
        return self.source_root / module_path

    def relative_to_root(self, path: Path) -> Optional[str]:
        """Module path of a directory under the source root, or None outside it."""
        try:
            return path.relative_to(self.source_root).as_posix()
        except ValueError:
            return None
