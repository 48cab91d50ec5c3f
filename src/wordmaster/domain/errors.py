"""Exception hierarchy shared by every layer."""


class WordmasterError(Exception):
    """Base class for all wordmaster errors."""


class InvalidQualityError(WordmasterError, ValueError):
    """Review quality outside the 0..5 integer scale."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Review quality must be an integer in 0..5, got {quality!r}")


class InvalidWordStateError(WordmasterError, ValueError):
    """A word record whose scheduling fields break the model invariants."""


class WordNotFoundError(WordmasterError, KeyError):
    """No word with the requested id exists in the repository."""

    def __init__(self, word_id: str):
        self.word_id = word_id
        super().__init__(word_id)

    def __str__(self) -> str:
        return f"Word not found: {self.word_id}"


class SessionFinishedError(WordmasterError):
    """An answer was submitted after the review queue ran out."""


class StorageError(WordmasterError):
    """The persisted collection could not be read or written."""
