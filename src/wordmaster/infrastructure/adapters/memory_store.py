"""In-memory repositories for tests and throwaway sessions."""

from wordmaster.domain.models import UserStats, Word
from wordmaster.domain.ports import StatsRepository, WordRepository


class InMemoryWordRepository(WordRepository):
    def __init__(self, words: list[Word] | None = None):
        self._words = list(words or [])

    def load_words(self) -> list[Word]:
        # Copy so callers never hold the live list
        return list(self._words)

    def save_words(self, words: list[Word]) -> None:
        self._words = list(words)


class InMemoryStatsRepository(StatsRepository):
    def __init__(self, stats: UserStats | None = None):
        self._stats = stats or UserStats()

    def load_stats(self) -> UserStats:
        return self._stats

    def save_stats(self, stats: UserStats) -> None:
        self._stats = stats
