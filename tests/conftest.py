"""Shared test fixtures for Pulse Risk tests."""

import os
from pathlib import Path

import pytest

from pulse_risk.exceptions import HistoryError
from pulse_risk.temporal.models import Commit


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class StubHistory:
    """In-memory HistoryProvider.

    ``touches`` maps a path to how many separate commits touched it.
    """

    def __init__(self, touches=None, error=None):
        self.touches = dict(touches or {})
        self.error = error
        self.calls = 0

    def log_since(self, window_days):
        self.calls += 1
        if self.error is not None:
            raise self.error
        commits = []
        n = 0
        for path, count in self.touches.items():
            for _ in range(count):
                n += 1
                commits.append(Commit(hash=f"{n:040x}", files=(path,)))
        return commits


@pytest.fixture
def make_project(tmp_path):
    """Write a {relative_path: content} dict under a fresh project root.

    Returns the canonical root path as a string.
    """

    def _make(files):
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return os.path.realpath(root)

    return _make


@pytest.fixture
def stub_history():
    """Factory for StubHistory providers."""

    def _make(touches=None, error=None):
        return StubHistory(touches, error)

    return _make


@pytest.fixture
def broken_history():
    """A provider whose history query always fails."""
    return StubHistory(error=HistoryError("/nowhere", "not a git repository"))


@pytest.fixture
def isolated_config_env(tmp_path, monkeypatch):
    """Run with no discoverable config file and no PULSE_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("PULSE_"):
            monkeypatch.delenv(key, raising=False)
    return Path.cwd()
