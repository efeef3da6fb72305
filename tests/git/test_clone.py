"""Tests for making room before a clone."""

import pytest

from gopathlink.git.clone import clone_into, prepare_clone_destination

from tests.fakes import FakeRemote


class TestPrepareCloneDestination:
    @pytest.mark.short
    def test_live_symlink_removed(self, tmp_path):
        target = tmp_path / "mod" / "bar@v1.0.0"
        target.mkdir(parents=True)
        (target / "bar.go").write_text("package bar\n")
        dest = tmp_path / "src" / "bar"
        dest.parent.mkdir()
        dest.symlink_to(target)

        prepare_clone_destination(dest)

        assert not dest.exists()
        assert not dest.is_symlink()
        assert (target / "bar.go").is_file()

    @pytest.mark.short
    def test_real_content_kept(self, tmp_path):
        dest = tmp_path / "src" / "bar"
        dest.mkdir(parents=True)
        (dest / "bar.go").write_text("package bar\n")

        prepare_clone_destination(dest)

        assert (dest / "bar.go").is_file()


class TestCloneInto:
    @pytest.mark.short
    def test_clone_through_former_link(self, ctx, fake_vcs, source_root, tmp_path):
        target = tmp_path / "mod" / "bar@v1.0.0"
        target.mkdir(parents=True)
        (target / "bar.go").write_text("package bar\n")
        dest = source_root / "github.com" / "foo" / "bar"
        dest.parent.mkdir(parents=True)
        dest.symlink_to(target)
        fake_vcs.remotes["https://github.com/foo/bar"] = FakeRemote()

        assert clone_into("https://github.com/foo/bar", dest, ctx)
        assert (dest / ".git").is_dir()
        assert not (target / ".git").exists()
