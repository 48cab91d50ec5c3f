from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from wordmaster.application.stats.aggregator import StatsAggregator
from wordmaster.domain.models import UserStats


@pytest.fixture
def aggregator():
    return StatsAggregator()


def test_first_review_ever(aggregator, now):
    stats = aggregator.record_review(UserStats(), 5, 12.5, now)

    assert stats.total_learned == 1
    assert stats.study_time_seconds == 12.5
    assert stats.streak_days == 1
    assert stats.last_study_date == now


def test_failed_review_counts_time_not_learned(aggregator, now):
    stats = aggregator.record_review(UserStats(total_learned=3), 1, 4.0, now)

    assert stats.total_learned == 3
    assert stats.study_time_seconds == 4.0


def test_same_day_keeps_streak(aggregator, now):
    before = UserStats(streak_days=4, last_study_date=now - timedelta(hours=2))

    assert aggregator.record_review(before, 5, 1, now).streak_days == 4


def test_next_day_extends_streak(aggregator, now):
    before = UserStats(streak_days=4, last_study_date=now - timedelta(days=1, hours=3))

    assert aggregator.record_review(before, 3, 1, now).streak_days == 5


def test_gap_resets_streak(aggregator, now):
    before = UserStats(streak_days=9, last_study_date=now - timedelta(days=3))

    assert aggregator.record_review(before, 5, 1, now).streak_days == 1


def test_zero_streak_becomes_one(aggregator, now):
    before = UserStats(streak_days=0, last_study_date=now - timedelta(minutes=5))

    assert aggregator.record_review(before, 5, 1, now).streak_days == 1


def test_streak_uses_calendar_days_not_24_hours(aggregator):
    late = datetime(2024, 5, 1, 23, 50, tzinfo=timezone.utc)
    early = datetime(2024, 5, 2, 0, 10, tzinfo=timezone.utc)
    before = UserStats(streak_days=2, last_study_date=late)

    assert aggregator.record_review(before, 5, 1, early).streak_days == 3


def test_streak_days_compared_in_review_zone(aggregator):
    tokyo = ZoneInfo("Asia/Tokyo")
    # 2024-05-01 20:00 UTC is already 2024-05-02 in Tokyo
    last = datetime(2024, 5, 1, 20, 0, tzinfo=timezone.utc)
    now = datetime(2024, 5, 2, 21, 0, tzinfo=tokyo)
    before = UserStats(streak_days=6, last_study_date=last)

    assert aggregator.record_review(before, 5, 1, now).streak_days == 6


def test_negative_duration_rejected(aggregator, now):
    with pytest.raises(ValueError):
        aggregator.record_review(UserStats(), 5, -1, now)
