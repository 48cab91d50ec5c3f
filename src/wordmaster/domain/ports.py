"""
Ports (interfaces) for persistence and time.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .errors import WordNotFoundError
from .models import UserStats, Word


class WordRepository(ABC):
    """
    Port owning the word collection.

    Implementations:
        - JsonWordRepository: A JSON file on disk.
        - InMemoryWordRepository: A plain list, for tests and ephemeral runs.
    """

    @abstractmethod
    def load_words(self) -> list[Word]:
        """
        Return a snapshot of the whole collection, in stored order.
        """
        pass

    @abstractmethod
    def save_words(self, words: list[Word]) -> None:
        """
        Replace the whole collection with the given words.
        """
        pass

    def get(self, word_id: str) -> Word:
        for word in self.load_words():
            if word.id == word_id:
                return word
        raise WordNotFoundError(word_id)

    def replace(self, word: Word) -> None:
        """
        Replace the stored record that has the same id as ``word``.

        Raises:
            WordNotFoundError: If no stored record has that id.
        """
        words = self.load_words()
        for idx, existing in enumerate(words):
            if existing.id == word.id:
                words[idx] = word
                self.save_words(words)
                return
        raise WordNotFoundError(word.id)


class StatsRepository(ABC):
    """Port for the aggregate learning counters."""

    @abstractmethod
    def load_stats(self) -> UserStats:
        pass

    @abstractmethod
    def save_stats(self, stats: UserStats) -> None:
        pass


class Clock(ABC):
    """Source of the current time. Always returns timezone-aware datetimes."""

    @abstractmethod
    def now(self) -> datetime:
        pass
