"""
Domain models for vocabulary learning.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .constants import (
    DEFAULT_EASINESS_FACTOR,
    MASTERED_AFTER_REPETITIONS,
    MIN_EASINESS_FACTOR,
    REVIEW_AFTER_REPETITIONS,
)
from .errors import InvalidWordStateError


class Proficiency(str, Enum):
    """Display tier derived from a word's repetition streak."""

    NEW = "New"
    LEARNING = "Learning"
    REVIEW = "Review"
    MASTERED = "Mastered"


def proficiency_for(repetitions: int) -> Proficiency:
    """
    Map a repetition streak onto its proficiency tier.

    Only meaningful for words that have been reviewed at least once;
    unreviewed words are always NEW.
    """
    if repetitions > MASTERED_AFTER_REPETITIONS:
        return Proficiency.MASTERED
    if repetitions > REVIEW_AFTER_REPETITIONS:
        return Proficiency.REVIEW
    return Proficiency.LEARNING


@dataclass(frozen=True)
class Example:
    """An extra usage example attached to a word."""

    sentence: str
    translation: str = ""


@dataclass(frozen=True)
class Word:
    """
    A vocabulary item under spaced-repetition tracking.

    Content fields are carried through the scheduler untouched. The
    scheduling fields (easiness_factor, interval, repetitions and the two
    review dates) are only ever changed by producing a new record.

    Attributes:
        id: Opaque unique identifier.
        easiness_factor: SM-2 ease; never below 1.3.
        interval: Days between the last review and the next one.
        repetitions: Consecutive passing reviews since the last lapse.
        next_review_date: When the word becomes due (timezone-aware).
        last_review_date: When the word was last reviewed, None if never.
        extra: Unknown persisted keys, preserved verbatim.
    """

    id: str
    term: str
    definition: str
    next_review_date: datetime

    example: str = ""
    example_translation: str = ""
    phonetic: str = ""
    part_of_speech: str = ""
    tags: tuple[str, ...] = ()
    is_favorite: bool = False
    additional_examples: tuple[Example, ...] = ()

    # SRS state
    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    interval: int = 0
    repetitions: int = 0
    last_review_date: datetime | None = None

    created_at: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.interval < 0:
            raise InvalidWordStateError(f"interval must be >= 0, got {self.interval}")
        if self.repetitions < 0:
            raise InvalidWordStateError(f"repetitions must be >= 0, got {self.repetitions}")
        if self.easiness_factor < MIN_EASINESS_FACTOR:
            raise InvalidWordStateError(
                f"easiness_factor must be >= {MIN_EASINESS_FACTOR}, got {self.easiness_factor}"
            )
        # Lists are accepted from callers but stored as tuples
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "additional_examples", tuple(self.additional_examples))

    @property
    def proficiency(self) -> Proficiency:
        if self.last_review_date is None:
            return Proficiency.NEW
        return proficiency_for(self.repetitions)

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date <= now


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single answer given during a review session.

    Attributes:
        word_id: The word that was reviewed.
        quality: Self-assessed recall on the 0..5 scale.
        duration_seconds: Time spent on the card before answering.
        reviewed_at: When the answer was given.
    """

    word_id: str
    quality: int
    duration_seconds: float
    reviewed_at: datetime


@dataclass(frozen=True)
class UserStats:
    """Aggregate learning counters kept across sessions."""

    total_learned: int = 0
    study_time_seconds: float = 0.0
    streak_days: int = 0
    last_study_date: datetime | None = None
