"""Service for managing the word library: adding, editing and removing words."""

import csv
import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import IO, Any

from ulid import ULID

from wordmaster.domain.constants import CSV_HEADERS
from wordmaster.domain.errors import WordNotFoundError
from wordmaster.domain.models import Example, Word
from wordmaster.domain.ports import Clock, WordRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "term",
        "definition",
        "example",
        "example_translation",
        "phonetic",
        "part_of_speech",
        "tags",
        "is_favorite",
        "additional_examples",
    }
)


def generate_word_id() -> str:
    """Generate a stable word ID using ULID."""
    return str(ULID())


def normalize_term(term: str) -> str:
    return term.strip().casefold()


def clean_examples(examples: Iterable[Example | dict[str, Any]]) -> tuple[Example, ...]:
    """Drop examples whose sentence is blank."""
    cleaned = []
    for ex in examples:
        if isinstance(ex, dict):
            ex = Example(sentence=ex.get("sentence", ""), translation=ex.get("translation", ""))
        if ex.sentence.strip():
            cleaned.append(ex)
    return tuple(cleaned)


def create_word(
    term: str,
    definition: str,
    now: datetime,
    example: str = "",
    example_translation: str = "",
    phonetic: str = "",
    part_of_speech: str = "",
    tags: Sequence[str] = (),
    additional_examples: Iterable[Example | dict[str, Any]] = (),
) -> Word:
    """
    Create a fresh, never-reviewed word that is due immediately.
    """
    return Word(
        id=generate_word_id(),
        term=term.strip(),
        definition=definition.strip(),
        example=example,
        example_translation=example_translation,
        phonetic=phonetic,
        part_of_speech=part_of_speech,
        tags=tuple(tags),
        additional_examples=clean_examples(additional_examples),
        next_review_date=now,
        created_at=now,
    )


@dataclass
class AddWordsResult:
    added: list[Word] = field(default_factory=list)
    duplicates: list[Word] = field(default_factory=list)


class LibraryService:
    """
    Read/replace operations on the word collection.

    Scheduling state is never touched here; only the review session
    changes it.
    """

    def __init__(self, repo: WordRepository, clock: Clock):
        self._repo = repo
        self._clock = clock

    def list_words(self) -> list[Word]:
        return self._repo.load_words()

    def get_word(self, word_id: str) -> Word:
        return self._repo.get(word_id)

    def add_words(
        self,
        new_words: Sequence[Word],
        shuffle: bool = False,
        rng: random.Random | None = None,
    ) -> AddWordsResult:
        """
        Append words whose term is not already in the library.

        Terms are compared case-insensitively after trimming, both against
        the library and within the batch itself.
        """
        words = self._repo.load_words()
        seen = {normalize_term(w.term) for w in words}

        result = AddWordsResult()
        for word in new_words:
            key = normalize_term(word.term)
            if key in seen:
                result.duplicates.append(word)
                continue
            seen.add(key)
            result.added.append(word)

        if shuffle:
            (rng or random.Random()).shuffle(result.added)

        if result.duplicates:
            logger.info(f"Skipped {len(result.duplicates)} duplicate word(s)")

        if result.added:
            self._repo.save_words(words + result.added)
            logger.info(f"Added {len(result.added)} word(s) to the library")

        return result

    def add_word(self, term: str, definition: str, **content: Any) -> AddWordsResult:
        """Create and add a single word, tagged ``manual`` unless tags are given."""
        content.setdefault("tags", ("manual",))
        word = create_word(term, definition, self._clock.now(), **content)
        return self.add_words([word])

    def edit_word(self, word_id: str, **changes: Any) -> Word:
        """
        Update content fields of a word.

        Raises:
            ValueError: If a scheduling or unknown field is passed.
            WordNotFoundError: If no word has ``word_id``.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        if "additional_examples" in changes:
            changes["additional_examples"] = clean_examples(changes["additional_examples"])
        if "tags" in changes:
            changes["tags"] = tuple(changes["tags"])

        updated = replace(self._repo.get(word_id), **changes)
        self._repo.replace(updated)
        return updated

    def toggle_favorite(self, word_id: str) -> Word:
        word = self._repo.get(word_id)
        updated = replace(word, is_favorite=not word.is_favorite)
        self._repo.replace(updated)
        return updated

    def delete_word(self, word_id: str) -> None:
        words = self._repo.load_words()
        remaining = [w for w in words if w.id != word_id]
        if len(remaining) == len(words):
            raise WordNotFoundError(word_id)
        self._repo.save_words(remaining)
        logger.info(f"Deleted word {word_id}")

    def delete_all(self) -> int:
        count = len(self._repo.load_words())
        self._repo.save_words([])
        logger.warning(f"Cleared library ({count} words)")
        return count

    def search(self, query: str) -> list[Word]:
        """Case-insensitive substring match on term or definition."""
        needle = query.casefold()
        return [
            w
            for w in self._repo.load_words()
            if needle in w.term.casefold() or needle in w.definition.casefold()
        ]

    def favorites(self) -> list[Word]:
        return [w for w in self._repo.load_words() if w.is_favorite]


def export_csv(words: Iterable[Word], stream: IO[str]) -> int:
    """
    Write words as CSV with the Term/Definition/Example/Translation/Phonetic columns.

    Returns the number of rows written (header excluded).
    """
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    rows = 0
    for w in words:
        writer.writerow([w.term, w.definition, w.example, w.example_translation, w.phonetic])
        rows += 1
    return rows
