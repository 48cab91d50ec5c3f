from datetime import datetime, timezone

import pytest

from wordmaster.domain.models import Word
from wordmaster.infrastructure.adapters.memory_store import (
    InMemoryStatsRepository,
    InMemoryWordRepository,
)
from wordmaster.infrastructure.clock import FixedClock

NOW = datetime(2024, 3, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def make_word():
    """Factory for words; scheduling fields default to a brand-new word due now."""
    counter = {"n": 0}

    def _make(term=None, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        kwargs.setdefault("id", f"w{n}")
        kwargs.setdefault("definition", f"definition {n}")
        kwargs.setdefault("next_review_date", NOW)
        return Word(term=term or f"word{n}", **kwargs)

    return _make


@pytest.fixture
def word_repo():
    return InMemoryWordRepository()


@pytest.fixture
def stats_repo():
    return InMemoryStatsRepository()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and data
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "WORDMASTER_DATA_DIR",
        "WORDMASTER_DAILY_GOAL",
        "WORDMASTER_FALLBACK_QUEUE_SIZE",
        "WORDMASTER_TIMEZONE",
        "WORDMASTER_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


