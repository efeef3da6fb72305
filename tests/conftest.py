import io
import logging

import pytest

from gopathlink.context import RunContext

from tests.fakes import FakeHttp, FakeVcs


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gopathlink")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def source_root(tmp_path):
    root = tmp_path / "go" / "src"
    root.mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def modcache_dir(tmp_path):
    cache = tmp_path / "go" / "pkg" / "mod"
    cache.mkdir(parents=True)
    return cache.resolve()


@pytest.fixture
def fake_vcs():
    return FakeVcs()


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def ctx(source_root, modcache_dir, fake_vcs, fake_http):
    """A run context wired to the in-memory transports."""
    return RunContext(
        source_root=source_root,
        modcache_dir=modcache_dir,
        vcs=fake_vcs,
        http=fake_http,
    )
