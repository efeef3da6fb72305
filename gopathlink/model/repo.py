from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RepoRoot(BaseModel):
    """A repository-bearing directory inside the source root."""

    model_config = ConfigDict(frozen=True)

    canonical_path: str
    local_dir: Path
    is_symlink: bool = False


class AliasMapping(BaseModel):
    """A requested path served by a checkout living under another path."""

    model_config = ConfigDict(frozen=True)

    requested_path: str
    discovered_path: str


class LocateResult(BaseModel):
    repo_root: RepoRoot
    canonical_path: str
    alias_from: Optional[str] = None

    @property
    def alias(self) -> Optional[AliasMapping]:
        if self.alias_from is None or self.alias_from == self.canonical_path:
            return None
        return AliasMapping(
            requested_path=self.alias_from, discovered_path=self.canonical_path
        )


class DiscoveryOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class DiscoveryCacheEntry(BaseModel):
    """Memoized outcome of a clone or alias lookup for one URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    outcome: DiscoveryOutcome
    repo_root: Optional[RepoRoot] = None
    alias_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is DiscoveryOutcome.SUCCESS


class ModuleCacheHit(BaseModel):
    """An extracted module copy found in the go module cache."""

    local_dir: Path
    version: str
