"""Shared pytest fixtures for all test types."""

import logging

import pytest

from gitlfs.cli.main import PACKAGE_LOGGER, OutputHandler
from gitlfs.cli.registry import CommandRegistry

GIT_ENV_VARS = (
    "GIT_DIR",
    "GIT_INDEX_FILE",
    "GIT_OBJECT_DIRECTORY",
    "GIT_WORK_TREE",
    "GIT_COMMON_DIR",
    "GIT_LOG_STATS",
    "GIT_TRACE",
    "GIT_LFS_HTTP_TIMEOUT",
)


class FakeApiClient:
    """Records what the dispatcher does to the shared API client."""

    def __init__(self, settings=None):
        self.settings = settings
        self.sinks = []
        self.close_calls = 0

    def log_http_stats(self, stream) -> None:
        self.sinks.append(stream)

    def close(self) -> None:
        self.close_calls += 1
        for sink in self.sinks:
            sink.close()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's git environment out of the tests."""
    for name in GIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop the stderr handler a Runner installs, it points at a captured stream."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, OutputHandler):
            package_logger.removeHandler(handler)


@pytest.fixture
def git_dir(tmp_path, monkeypatch):
    """Point GIT_DIR at an empty directory under tmp_path."""
    path = tmp_path / "repo" / ".git"
    path.mkdir(parents=True)
    monkeypatch.setenv("GIT_DIR", str(path))
    return path


@pytest.fixture
def registry() -> CommandRegistry:
    """A fresh, unsealed registry."""
    return CommandRegistry()


@pytest.fixture
def api_client() -> FakeApiClient:
    return FakeApiClient()
