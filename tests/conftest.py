"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from axon.persistence.repository import ProgressRepository  # noqa: E402
from axon.persistence.store import InMemoryKeyValueStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Manually advanced clock for session timing."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAdProvider:
    """Ad provider with scripted results. An Exception instance is raised."""

    def __init__(self, interstitial=True, rewarded=True):
        self.interstitial = interstitial
        self.rewarded = rewarded
        self.interstitial_calls = 0
        self.rewarded_calls = 0

    async def show_interstitial(self) -> bool:
        self.interstitial_calls += 1
        if isinstance(self.interstitial, Exception):
            raise self.interstitial
        return self.interstitial

    async def show_rewarded(self) -> bool:
        self.rewarded_calls += 1
        if isinstance(self.rewarded, Exception):
            raise self.rewarded
        return self.rewarded


class RecordingSoundPlayer:
    def __init__(self):
        self.played = []

    def play(self, kind) -> None:
        self.played.append(kind)


class BrokenHaptics:
    def trigger(self, kind) -> None:
        raise RuntimeError("haptics unavailable")


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repo(store):
    return ProgressRepository(store)


@pytest.fixture
def rich_repo(repo):
    """Repository whose player can afford XP purchases."""
    stats = repo.user_stats.model_copy()
    stats.total_xp = 5000
    repo.save_user_stats(stats)
    return repo


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def ad_provider():
    return FakeAdProvider()


@pytest.fixture
def sound():
    return RecordingSoundPlayer()


@pytest.fixture
def broken_haptics():
    return BrokenHaptics()


@pytest.fixture
def caplog_loguru():
    """Collect loguru messages emitted during the test."""
    from loguru import logger

    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
