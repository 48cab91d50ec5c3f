"""
Service Factory
Centralizes wiring of repositories, clock and services from the resolved config.
"""

from dataclasses import dataclass

from wordmaster.application.config import AppConfig
from wordmaster.application.library_service import LibraryService
from wordmaster.application.session import ReviewSession
from wordmaster.application.stats.service import StatsService
from wordmaster.domain.ports import Clock, StatsRepository, WordRepository
from wordmaster.infrastructure.adapters.json_store import JsonStatsRepository, JsonWordRepository
from wordmaster.infrastructure.clock import SystemClock


def get_word_repository(config: AppConfig) -> WordRepository:
    return JsonWordRepository(config.words_path)


def get_stats_repository(config: AppConfig) -> StatsRepository:
    return JsonStatsRepository(config.stats_path)


def get_clock(config: AppConfig) -> Clock:
    return SystemClock(config.timezone)


@dataclass
class Services:
    """Everything an outer surface (CLI, server) needs, sharing one set of repositories."""

    config: AppConfig
    words: WordRepository
    clock: Clock
    library: LibraryService
    stats: StatsService

    def new_session(self) -> ReviewSession:
        return ReviewSession(
            self.words,
            self.stats,
            self.clock,
            fallback_size=self.config.fallback_queue_size,
        )


def build_services(
    config: AppConfig,
    words: WordRepository | None = None,
    stats_repo: StatsRepository | None = None,
    clock: Clock | None = None,
) -> Services:
    """
    Returns the wired services. Any collaborator can be swapped, which is how
    tests run against in-memory repositories and a fixed clock.
    """
    words = words or get_word_repository(config)
    stats_repo = stats_repo or get_stats_repository(config)
    clock = clock or get_clock(config)

    return Services(
        config=config,
        words=words,
        clock=clock,
        library=LibraryService(words, clock),
        stats=StatsService(words, stats_repo, daily_goal=config.daily_goal),
    )
