"""
JSON file repositories — Infrastructure adapters for local persistence.

Implements WordRepository and StatsRepository on top of plain JSON files.
Every save rewrites the whole file through a temp file and os.replace.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from wordmaster.domain.errors import StorageError
from wordmaster.domain.models import UserStats, Word
from wordmaster.domain.ports import StatsRepository, WordRepository

from .serialization import stats_from_dict, stats_to_dict, word_from_dict, word_to_dict

logger = logging.getLogger(__name__)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        raise StorageError(f"Could not read {path}: {e}") from e


def _write_json(path: Path, data: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error(f"Could not write {path}: {e}")
        raise StorageError(f"Could not write {path}: {e}") from e


class JsonWordRepository(WordRepository):
    """
    Stores the collection as a JSON array of word objects.

    A missing file is an empty collection.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_words(self) -> list[Word]:
        raw = _read_json(self.path, [])
        if not isinstance(raw, list):
            raise StorageError(f"{self.path} must contain a JSON array of words")
        try:
            return [word_from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Malformed word record in {self.path}: {e}") from e

    def save_words(self, words: list[Word]) -> None:
        _write_json(self.path, [word_to_dict(w) for w in words])
        logger.debug(f"Saved {len(words)} words to {self.path}")


class JsonStatsRepository(StatsRepository):
    """Stores UserStats as a single JSON object."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_stats(self) -> UserStats:
        raw = _read_json(self.path, {})
        if not isinstance(raw, dict):
            raise StorageError(f"{self.path} must contain a JSON object")
        try:
            return stats_from_dict(raw)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Malformed stats in {self.path}: {e}") from e

    def save_stats(self, stats: UserStats) -> None:
        _write_json(self.path, stats_to_dict(stats))
