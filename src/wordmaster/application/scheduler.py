"""
Review scheduler: a simplified SuperMemo-2.

Maps a word and a review quality onto the word's next memory state.
This is a pure computation module with no I/O; the current time is
always passed in.
"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from wordmaster.domain.constants import (
    FIRST_INTERVAL_DAYS,
    LAPSE_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_EASINESS_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    QUALITY_EASY,
    QUALITY_FAIL,
    QUALITY_HARD,
    SECOND_INTERVAL_DAYS,
)
from wordmaster.domain.errors import InvalidQualityError
from wordmaster.domain.models import Word

logger = logging.getLogger(__name__)


def validate_quality(quality: object) -> int:
    """
    Return ``quality`` if it is an integer on the 0..5 scale.

    Raises:
        InvalidQualityError: For bools, non-integers and out-of-range values.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQualityError(quality)
    return quality


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positive input.

    Python's round() is banker's rounding (round(12.5) == 12); intervals
    must round 12.5 up to 13.
    """
    return int(math.floor(value + 0.5))


def adjust_easiness(easiness_factor: float, quality: int) -> float:
    """SM-2 ease update for a passing answer, before the 1.3 floor is applied."""
    miss = MAX_QUALITY - quality
    return easiness_factor + (0.1 - miss * (0.08 + miss * 0.02))


def add_calendar_days(now: datetime, days: int) -> datetime:
    """
    Move ``now`` forward by whole calendar days, keeping the wall-clock time.

    Aware arithmetic does this already for IANA zones. A bare offset that
    equals the system local offset (what ``datetime.astimezone()`` returns)
    stands for system local time, so the offset is recomputed for the
    target day through the local DST rules.
    """
    tz = now.tzinfo
    if (
        isinstance(tz, timezone)
        and tz is not timezone.utc
        and now.utcoffset() == now.astimezone().utcoffset()
    ):
        return (now.replace(tzinfo=None) + timedelta(days=days)).astimezone()
    return now + timedelta(days=days)


def schedule_review(word: Word, quality: int, now: datetime) -> Word:
    """
    Compute the word's state after a review.

    Args:
        word: The word as it was before the review.
        quality: Recall quality, 0..5. Below 3 is a lapse.
        now: Time of the review (timezone-aware).

    Returns:
        A new Word with updated easiness_factor, interval, repetitions,
        last_review_date and next_review_date. Content fields are unchanged.
    """
    quality = validate_quality(quality)

    easiness_factor = word.easiness_factor
    repetitions = word.repetitions
    interval = word.interval

    if quality >= PASSING_QUALITY:
        if repetitions == 0:
            interval = FIRST_INTERVAL_DAYS
        elif repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            # Grows with the ease the word had before this review
            interval = round_half_up(interval * easiness_factor)
        repetitions += 1
        easiness_factor = adjust_easiness(easiness_factor, quality)
    else:
        logger.debug(f"Lapse on {word.id} ({word.term!r}), streak {repetitions} reset")
        repetitions = 0
        interval = LAPSE_INTERVAL_DAYS

    easiness_factor = max(easiness_factor, MIN_EASINESS_FACTOR)

    next_review_date = add_calendar_days(now, interval)

    logger.debug(
        f"Scheduled {word.id}: q={quality} ef={easiness_factor:.2f} "
        f"reps={repetitions} interval={interval}d next={next_review_date.isoformat()}"
    )

    return replace(
        word,
        easiness_factor=easiness_factor,
        repetitions=repetitions,
        interval=interval,
        last_review_date=now,
        next_review_date=next_review_date,
        extra=dict(word.extra),
    )


@dataclass(frozen=True)
class IntervalPreview:
    """Interval (days) each answer button would schedule."""

    fail: int
    hard: int
    easy: int


def preview_intervals(word: Word, now: datetime) -> IntervalPreview:
    """
    Show what each of the three answer buttons would do to ``word``.
    """
    return IntervalPreview(
        fail=schedule_review(word, QUALITY_FAIL, now).interval,
        hard=schedule_review(word, QUALITY_HARD, now).interval,
        easy=schedule_review(word, QUALITY_EASY, now).interval,
    )
