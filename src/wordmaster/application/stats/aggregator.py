"""
Stats aggregator for review events.

This is a pure computation module with no I/O.
"""

from dataclasses import replace
from datetime import datetime

from wordmaster.domain.constants import PASSING_QUALITY
from wordmaster.domain.models import UserStats


def _calendar_day(moment: datetime, reference: datetime):
    # Compare days in the zone of the current review
    if moment.tzinfo is not None and reference.tzinfo is not None:
        moment = moment.astimezone(reference.tzinfo)
    return moment.date()


class StatsAggregator:
    """
    Folds review events into the running UserStats.

    Stateless and side-effect free.
    """

    def next_streak(self, stats: UserStats, now: datetime) -> int:
        """
        Streak after studying at ``now``.

        Same day keeps the streak, the following day extends it and any
        longer gap starts over at 1.
        """
        streak = stats.streak_days
        if stats.last_study_date is None:
            return 1

        today = _calendar_day(now, now)
        last_day = _calendar_day(stats.last_study_date, now)
        if today > last_day:
            if (today - last_day).days == 1:
                streak += 1
            else:
                streak = 1

        return streak if streak > 0 else 1

    def record_review(
        self, stats: UserStats, quality: int, duration_seconds: float, now: datetime
    ) -> UserStats:
        """
        Return ``stats`` updated with one answered card.
        """
        if duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got {duration_seconds}")

        return replace(
            stats,
            total_learned=stats.total_learned + (1 if quality >= PASSING_QUALITY else 0),
            study_time_seconds=stats.study_time_seconds + duration_seconds,
            streak_days=self.next_streak(stats, now),
            last_study_date=now,
        )
