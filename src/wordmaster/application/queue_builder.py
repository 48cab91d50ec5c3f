"""
Queue builder for review sessions.

Builds ordered study queues by:
1. Taking every word whose next review date has passed, most overdue first
2. Falling back to the least recently reviewed words when nothing is due
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from wordmaster.domain.constants import DEFAULT_FALLBACK_QUEUE_SIZE
from wordmaster.domain.models import Word

logger = logging.getLogger(__name__)


@dataclass
class QueueBuildResult:
    """Result of queue building operation."""

    queue: list[Word] = field(default_factory=list)
    due_count: int = 0  # Words strictly due at build time
    used_fallback: bool = False  # Queue holds oldest-reviewed words, not due ones

    def __len__(self) -> int:
        return len(self.queue)


def select_due_words(words: Iterable[Word], now: datetime) -> list[Word]:
    """
    Return the words with ``next_review_date <= now``, most overdue first.

    Ties keep their collection order.
    """
    due = [w for w in words if w.is_due(now)]
    due.sort(key=lambda w: w.next_review_date)
    return due


def _last_review_key(word: Word) -> tuple:
    # Never-reviewed words sort before every real timestamp
    if word.last_review_date is None:
        return (0,)
    return (1, word.last_review_date)


def select_oldest_reviewed(
    words: Iterable[Word], limit: int = DEFAULT_FALLBACK_QUEUE_SIZE
) -> list[Word]:
    """
    Return up to ``limit`` words, least recently reviewed first.
    """
    if limit <= 0:
        return []
    ordered = sorted(words, key=_last_review_key)
    return ordered[:limit]


def build_review_queue(
    words: Iterable[Word],
    now: datetime,
    fallback_size: int = DEFAULT_FALLBACK_QUEUE_SIZE,
) -> QueueBuildResult:
    """
    Build the queue for a review session.

    Args:
        words: Snapshot of the whole collection.
        now: Current time (timezone-aware).
        fallback_size: How many words to offer when nothing is due.

    Returns:
        QueueBuildResult with the ordered queue. Empty collections give an
        empty queue without triggering the fallback.
    """
    snapshot = list(words)
    if not snapshot:
        return QueueBuildResult()

    due = select_due_words(snapshot, now)
    if due:
        return QueueBuildResult(queue=due, due_count=len(due))

    fallback = select_oldest_reviewed(snapshot, fallback_size)
    logger.info(f"No words due; offering {len(fallback)} least recently reviewed")
    return QueueBuildResult(queue=fallback, due_count=0, used_fallback=True)
