# Infrastructure Adapters Package
from .json_store import JsonStatsRepository, JsonWordRepository
from .memory_store import InMemoryStatsRepository, InMemoryWordRepository

__all__ = [
    "JsonWordRepository",
    "JsonStatsRepository",
    "InMemoryWordRepository",
    "InMemoryStatsRepository",
]
