"""
Stats Service — Application layer orchestrator.

Coordinates the word and stats repositories to build the dashboard view.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from wordmaster.application.queue_builder import select_due_words
from wordmaster.domain.constants import DEFAULT_DAILY_GOAL
from wordmaster.domain.models import Proficiency, UserStats
from wordmaster.domain.ports import StatsRepository, WordRepository

from .aggregator import StatsAggregator

logger = logging.getLogger(__name__)


@dataclass
class DashboardSummary:
    """
    Everything the home screen shows about the learner's progress.
    """

    total_words: int
    due_count: int
    favorites: int
    # Only tiers with at least one word are listed
    proficiency_breakdown: dict[Proficiency, int] = field(default_factory=dict)

    total_learned: int = 0
    daily_goal: int = DEFAULT_DAILY_GOAL
    goal_progress: int = 0  # Learned today toward the goal
    goal_progress_percent: int = 0
    study_minutes: int = 0
    streak_days: int = 0


def goal_progress(total_learned: int, daily_goal: int) -> tuple[int, int]:
    """
    Return (learned toward the current goal, percent of goal reached).
    """
    if daily_goal <= 0:
        return 0, 0
    learned = total_learned % daily_goal
    percent = min(100, int(learned * 100 / daily_goal + 0.5))
    return learned, percent


class StatsService:
    """
    Application service for recording reviews and summarizing progress.

    Depends on the repository ports, not on concrete adapters.
    """

    def __init__(
        self,
        words: WordRepository,
        stats_repo: StatsRepository,
        aggregator: StatsAggregator | None = None,
        daily_goal: int = DEFAULT_DAILY_GOAL,
    ):
        self._words = words
        self._repo = stats_repo
        self._agg = aggregator or StatsAggregator()
        self.daily_goal = daily_goal

    def record_review(self, quality: int, duration_seconds: float, now: datetime) -> UserStats:
        stats = self._agg.record_review(self._repo.load_stats(), quality, duration_seconds, now)
        self._repo.save_stats(stats)
        return stats

    def get_stats(self) -> UserStats:
        return self._repo.load_stats()

    def dashboard(self, now: datetime) -> DashboardSummary:
        """
        Build the progress summary for the current collection.
        """
        words = self._words.load_words()
        stats = self._repo.load_stats()

        counts = {tier: 0 for tier in Proficiency}
        for word in words:
            counts[word.proficiency] += 1

        learned, percent = goal_progress(stats.total_learned, self.daily_goal)

        return DashboardSummary(
            total_words=len(words),
            due_count=len(select_due_words(words, now)),
            favorites=sum(1 for w in words if w.is_favorite),
            proficiency_breakdown={tier: n for tier, n in counts.items() if n > 0},
            total_learned=stats.total_learned,
            daily_goal=self.daily_goal,
            goal_progress=learned,
            goal_progress_percent=percent,
            study_minutes=int(stats.study_time_seconds / 60 + 0.5),
            streak_days=stats.streak_days,
        )
