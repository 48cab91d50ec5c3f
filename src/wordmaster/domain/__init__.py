# Domain Package
from .errors import (
    InvalidQualityError,
    InvalidWordStateError,
    SessionFinishedError,
    StorageError,
    WordmasterError,
    WordNotFoundError,
)
from .models import Example, Proficiency, ReviewEvent, UserStats, Word, proficiency_for
from .ports import Clock, StatsRepository, WordRepository

__all__ = [
    "Word",
    "Example",
    "Proficiency",
    "ReviewEvent",
    "UserStats",
    "proficiency_for",
    "WordRepository",
    "StatsRepository",
    "Clock",
    "WordmasterError",
    "InvalidQualityError",
    "InvalidWordStateError",
    "WordNotFoundError",
    "SessionFinishedError",
    "StorageError",
]
