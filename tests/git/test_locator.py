"""Tests for repository location of module paths."""

import pytest

from gopathlink.git.locator import candidate_paths, locate, reconcile_alias
from gopathlink.model.http import HeadResponse

from tests.fakes import FakeRemote, go_import_page


class TestCandidatePaths:
    @pytest.mark.short
    def test_longest_first(self):
        assert candidate_paths("k8s.io/api/core/v1") == [
            "k8s.io/api/core/v1",
            "k8s.io/api/core",
            "k8s.io/api",
        ]

    @pytest.mark.short
    def test_at_most_four_segments_dropped(self):
        path = "k8s.io/apimachinery/pkg/apis/meta/v1beta1"
        assert candidate_paths(path) == [
            "k8s.io/apimachinery/pkg/apis/meta/v1beta1",
            "k8s.io/apimachinery/pkg/apis/meta",
            "k8s.io/apimachinery/pkg/apis",
            "k8s.io/apimachinery/pkg",
            "k8s.io/apimachinery",
        ]

    @pytest.mark.short
    def test_deep_path_stops_after_four_drops(self):
        candidates = candidate_paths("example.com/a/b/c/d/e/f")
        assert candidates[-1] == "example.com/a/b"
        assert len(candidates) == 5

    @pytest.mark.short
    def test_no_duplicates_and_strictly_shorter(self):
        for path in ["github.com/a/b", "github.com//a/b/", "a/b/c/d/e/f/g/h"]:
            candidates = candidate_paths(path)
            assert len(candidates) == len(set(candidates))
            lengths = [len(c) for c in candidates]
            assert lengths == sorted(lengths, reverse=True)
            assert len(set(lengths)) == len(lengths)

    @pytest.mark.short
    def test_bare_host_skipped(self):
        assert candidate_paths("github.com/user") == ["github.com/user"]
        assert candidate_paths("localhost") == []


class TestLocate:
    @pytest.mark.short
    def test_existing_checkout(self, ctx, fake_vcs, source_root):
        fake_vcs.add_checkout(source_root / "github.com/user/repo", FakeRemote())

        result = locate("github.com/user/repo/pkg/util", ctx)

        assert result.canonical_path == "github.com/user/repo"
        assert result.alias_from == "github.com/user/repo/pkg/util"
        assert fake_vcs.ops("clone") == []
        assert not (source_root / "github.com/user/repo/pkg").exists()

    @pytest.mark.short
    def test_symlinked_checkout_resolves_to_target(self, ctx, fake_vcs, source_root):
        repo = source_root / "github.com/googleapis/google-cloud-go"
        fake_vcs.add_checkout(repo, FakeRemote())
        alias = source_root / "cloud.google.com/go/storage"
        alias.parent.mkdir(parents=True)
        alias.symlink_to(repo)

        result = locate("cloud.google.com/go/storage/internal", ctx)

        assert result.canonical_path == "github.com/googleapis/google-cloud-go"
        assert result.repo_root.is_symlink
        assert fake_vcs.ops("clone") == []

    @pytest.mark.short
    def test_direct_clone(self, ctx, fake_vcs, source_root):
        fake_vcs.remotes["https://github.com/user/repo"] = FakeRemote()

        result = locate("github.com/user/repo", ctx)

        assert result.canonical_path == "github.com/user/repo"
        assert result.alias_from is None
        assert result.alias is None
        assert (source_root / "github.com/user/repo/.git").is_dir()

    @pytest.mark.short
    def test_alias_discovered(self, ctx, fake_vcs, fake_http, source_root):
        repo_url = "https://github.com/kubernetes/api"
        fake_http.pages["https://k8s.io/api/core/v1"] = go_import_page(
            "k8s.io/api", repo_url
        )
        fake_http.heads[repo_url] = HeadResponse(status_code=200)
        fake_vcs.remotes[repo_url] = FakeRemote()

        result = locate("k8s.io/api/core/v1", ctx)

        assert result.canonical_path == "github.com/kubernetes/api"
        assert result.alias.requested_path == "k8s.io/api/core/v1"
        assert result.alias.discovered_path == "github.com/kubernetes/api"
        assert result.repo_root.local_dir == source_root / "github.com/kubernetes/api"

    @pytest.mark.short
    def test_not_found(self, ctx, fake_vcs, fake_http):
        assert locate("example.invalid/nothing/here", ctx) is None
        assert len(fake_vcs.ops("clone")) == 2
        assert fake_http.fetched == [
            "https://example.invalid/nothing/here",
            "https://example.invalid/nothing",
        ]

    @pytest.mark.short
    def test_failures_memoized(self, ctx, fake_vcs, fake_http):
        locate("example.invalid/nothing", ctx)
        locate("example.invalid/nothing", ctx)

        assert len(fake_vcs.ops("clone")) == 1
        assert len(fake_http.fetched) == 1


class TestReconcileAlias:
    @pytest.mark.short
    def test_same_path(self, ctx):
        assert reconcile_alias("github.com/a/b", "github.com/a/b", ctx) is None

    @pytest.mark.short
    def test_existing_destination_needs_no_link(self, ctx, source_root):
        (source_root / "github.com/a/b/pkg").mkdir(parents=True)
        assert reconcile_alias("github.com/a/b/pkg", "github.com/a/b", ctx) is None

    @pytest.mark.short
    def test_major_version_suffix(self, ctx):
        target = reconcile_alias(
            "github.com/Masterminds/semver/v3", "github.com/Masterminds/semver", ctx
        )
        assert target == "github.com/Masterminds/semver"

    @pytest.mark.short
    def test_case_insensitive_subpath(self, ctx, source_root):
        (source_root / "github.com/googleapis/gnostic/openapiv3").mkdir(parents=True)
        target = reconcile_alias(
            "github.com/googleapis/gnostic/OpenAPIv3",
            "github.com/googleapis/gnostic",
            ctx,
        )
        assert target == "github.com/googleapis/gnostic/openapiv3"


@pytest.mark.short
def test_git_package_exports_repo_check(source_root):
    from gopathlink import git, utils

    assert git.is_repo is utils.is_repo
    assert not git.is_repo(source_root)
