"""
Record <-> JSON object mapping.

Keys are camelCase to stay compatible with word lists exported by the
browser version of the app. Timestamps are written as ISO-8601 strings;
epoch-millisecond integers are accepted on read.
"""

from datetime import datetime, timezone
from typing import Any

from wordmaster.domain.constants import DEFAULT_EASINESS_FACTOR
from wordmaster.domain.models import Example, UserStats, Word

WORD_KEYS = frozenset(
    {
        "id",
        "term",
        "definition",
        "phonetic",
        "example",
        "exampleTranslation",
        "partOfSpeech",
        "tags",
        "isFavorite",
        "additionalExamples",
        "easinessFactor",
        "interval",
        "repetitions",
        "nextReviewDate",
        "lastReviewDate",
        "createdAt",
        "proficiency",
    }
)


def dump_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def load_datetime(value: Any) -> datetime | None:
    """
    Parse an ISO string or epoch milliseconds into an aware datetime.

    Naive ISO strings are taken as UTC. 0 and None mean "never".
    """
    if value is None or value == "" or value == 0:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"Not a timestamp: {value!r}")


def word_to_dict(word: Word) -> dict[str, Any]:
    data: dict[str, Any] = dict(word.extra)
    data.update(
        {
            "id": word.id,
            "term": word.term,
            "definition": word.definition,
            "phonetic": word.phonetic,
            "example": word.example,
            "exampleTranslation": word.example_translation,
            "partOfSpeech": word.part_of_speech,
            "tags": list(word.tags),
            "isFavorite": word.is_favorite,
            "additionalExamples": [
                {"sentence": ex.sentence, "translation": ex.translation}
                for ex in word.additional_examples
            ],
            "easinessFactor": word.easiness_factor,
            "interval": word.interval,
            "repetitions": word.repetitions,
            "nextReviewDate": dump_datetime(word.next_review_date),
            "lastReviewDate": dump_datetime(word.last_review_date),
            "createdAt": dump_datetime(word.created_at),
            # Written for other readers; recomputed on load
            "proficiency": word.proficiency.value,
        }
    )
    return data


def _example_from_dict(data: Any) -> Example:
    if not isinstance(data, dict):
        raise ValueError(f"Example must be an object, got {data!r}")
    return Example(sentence=data.get("sentence", ""), translation=data.get("translation", ""))


def word_from_dict(data: dict[str, Any]) -> Word:
    if not isinstance(data, dict):
        raise ValueError(f"Word record must be an object, got {data!r}")
    next_review = load_datetime(data.get("nextReviewDate"))
    if next_review is None:
        raise ValueError(f"Word {data.get('id')!r} has no nextReviewDate")

    return Word(
        id=str(data["id"]),
        term=data.get("term", ""),
        definition=data.get("definition", ""),
        phonetic=data.get("phonetic") or "",
        example=data.get("example") or "",
        example_translation=data.get("exampleTranslation") or "",
        part_of_speech=data.get("partOfSpeech") or "",
        tags=tuple(data.get("tags") or ()),
        is_favorite=bool(data.get("isFavorite", False)),
        additional_examples=tuple(
            _example_from_dict(ex) for ex in data.get("additionalExamples") or ()
        ),
        easiness_factor=float(data.get("easinessFactor", DEFAULT_EASINESS_FACTOR)),
        interval=int(data.get("interval", 0)),
        repetitions=int(data.get("repetitions", 0)),
        next_review_date=next_review,
        last_review_date=load_datetime(data.get("lastReviewDate")),
        created_at=load_datetime(data.get("createdAt")),
        extra={k: v for k, v in data.items() if k not in WORD_KEYS},
    )


def stats_to_dict(stats: UserStats) -> dict[str, Any]:
    return {
        "totalLearned": stats.total_learned,
        "studyTimeSeconds": stats.study_time_seconds,
        "streakDays": stats.streak_days,
        "lastStudyDate": dump_datetime(stats.last_study_date),
    }


def stats_from_dict(data: dict[str, Any]) -> UserStats:
    # Missing keys fall back to the initial counters
    return UserStats(
        total_learned=int(data.get("totalLearned", 0)),
        study_time_seconds=float(data.get("studyTimeSeconds", 0.0)),
        streak_days=int(data.get("streakDays", 0)),
        last_study_date=load_datetime(data.get("lastStudyDate")),
    )
