# Application Stats Package
from .aggregator import StatsAggregator
from .service import DashboardSummary, StatsService

__all__ = ["StatsAggregator", "StatsService", "DashboardSummary"]
