"""
Review session driver.

Pulls a queue from the selector, feeds each answer through the scheduler,
and persists the result one word at a time.
"""

import logging
from dataclasses import dataclass

from wordmaster.application.queue_builder import QueueBuildResult, build_review_queue
from wordmaster.application.scheduler import schedule_review, validate_quality
from wordmaster.application.stats.service import StatsService
from wordmaster.domain.constants import DEFAULT_FALLBACK_QUEUE_SIZE, PASSING_QUALITY
from wordmaster.domain.errors import SessionFinishedError
from wordmaster.domain.models import ReviewEvent, Word
from wordmaster.domain.ports import Clock, WordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """One answered card, as shown in the end-of-session recap."""

    term: str
    quality: int


@dataclass
class SessionSummary:
    reviewed: int
    passed: int
    failed: int
    total_seconds: float


class ReviewSession:
    """
    A single pass over a review queue.

    The queue is a snapshot taken by start(); answers are written back
    to the repository immediately, so an abandoned session loses nothing.
    """

    def __init__(
        self,
        words: WordRepository,
        stats: StatsService,
        clock: Clock,
        fallback_size: int = DEFAULT_FALLBACK_QUEUE_SIZE,
    ):
        self._words = words
        self._stats = stats
        self._clock = clock
        self._fallback_size = fallback_size

        self.queue: list[Word] = []
        self.position = 0
        self.events: list[ReviewEvent] = []
        self.results: list[SessionResult] = []

    def start(self) -> QueueBuildResult:
        """Take a snapshot of the collection and build the queue."""
        result = build_review_queue(
            self._words.load_words(), self._clock.now(), self._fallback_size
        )
        self.queue = list(result.queue)
        self.position = 0
        self.events = []
        self.results = []
        logger.info(
            f"Session started: {len(self.queue)} words "
            f"({'fallback' if result.used_fallback else f'{result.due_count} due'})"
        )
        return result

    @property
    def current(self) -> Word | None:
        if self.is_finished:
            return None
        return self.queue[self.position]

    @property
    def is_finished(self) -> bool:
        return self.position >= len(self.queue)

    @property
    def remaining(self) -> int:
        return max(0, len(self.queue) - self.position)

    def answer(self, quality: int, duration_seconds: float = 0.0) -> Word:
        """
        Grade the current word and move to the next one.

        Returns:
            The updated word as persisted.

        Raises:
            SessionFinishedError: If the queue is exhausted.
            InvalidQualityError: If quality is not on the 0..5 scale.
        """
        word = self.current
        if word is None:
            raise SessionFinishedError("No words left in this session")
        quality = validate_quality(quality)
        if duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got {duration_seconds}")

        now = self._clock.now()
        updated = schedule_review(word, quality, now)
        self._words.replace(updated)
        self._stats.record_review(quality, duration_seconds, now)

        self.events.append(ReviewEvent(word.id, quality, duration_seconds, now))
        self.results.append(SessionResult(term=word.term, quality=quality))
        self.position += 1
        return updated

    def summary(self) -> SessionSummary:
        passed = sum(1 for r in self.results if r.quality >= PASSING_QUALITY)
        return SessionSummary(
            reviewed=len(self.results),
            passed=passed,
            failed=len(self.results) - passed,
            total_seconds=sum(e.duration_seconds for e in self.events),
        )
