import pytest

from gopathlink.context import DiscoveryCache, ProcessedSet, RunContext
from gopathlink.model.repo import DiscoveryCacheEntry, DiscoveryOutcome


@pytest.mark.short
def test_discovery_cache_first_entry_wins():
    cache = DiscoveryCache("follow")
    first = DiscoveryCacheEntry(url="https://k8s.io/api", outcome=DiscoveryOutcome.FAILURE)
    second = DiscoveryCacheEntry(
        url="https://k8s.io/api",
        outcome=DiscoveryOutcome.SUCCESS,
        alias_path="github.com/kubernetes/api",
    )

    cache.record(first)
    kept = cache.record(second)

    assert kept is first
    assert cache.get("https://k8s.io/api").outcome is DiscoveryOutcome.FAILURE
    assert len(cache) == 1
    assert "https://k8s.io/api" in cache


@pytest.mark.short
def test_processed_set():
    processed = ProcessedSet()
    processed.add("k8s.io/api", "v0.20.0")

    assert ("k8s.io/api", "v0.20.0") in processed
    assert ("k8s.io/api", "v0.21.0") not in processed


@pytest.mark.short
def test_run_contexts_do_not_share_state(tmp_path):
    one = RunContext(source_root=tmp_path, modcache_dir=tmp_path, vcs=None, http=None)
    two = RunContext(source_root=tmp_path, modcache_dir=tmp_path, vcs=None, http=None)
    one.processed.add("a.com/b", "master")

    assert ("a.com/b", "master") not in two.processed
    assert one.clones is not two.clones
    assert one.aliases is not two.aliases


@pytest.mark.short
def test_relative_to_root(tmp_path):
    ctx = RunContext(source_root=tmp_path, modcache_dir=tmp_path, vcs=None, http=None)

    assert ctx.relative_to_root(tmp_path / "github.com" / "a" / "b") == "github.com/a/b"
    assert ctx.relative_to_root(tmp_path.parent) is None
