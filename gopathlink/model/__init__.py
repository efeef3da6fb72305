"""Pydantic models for gopathlink."""

from gopathlink.model.request import ModuleRequest, RequestReport
from gopathlink.model.repo import (
    AliasMapping,
    DiscoveryCacheEntry,
    DiscoveryOutcome,
    LocateResult,
    ModuleCacheHit,
    RepoRoot,
)
from gopathlink.model.checkout import CheckoutResult, CheckoutStrategy
from gopathlink.model.http import HeadResponse, SourceMeta

__all__ = [
    "ModuleRequest",
    "RequestReport",
    "AliasMapping",
    "DiscoveryCacheEntry",
    "DiscoveryOutcome",
    "LocateResult",
    "ModuleCacheHit",
    "RepoRoot",
    "CheckoutResult",
    "CheckoutStrategy",
    "HeadResponse",
    "SourceMeta",
]
