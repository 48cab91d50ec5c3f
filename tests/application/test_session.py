"""Tests for the review session driver."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from wordmaster.application.session import ReviewSession
from wordmaster.application.stats.service import StatsService
from wordmaster.domain.errors import InvalidQualityError, SessionFinishedError


@pytest.fixture
def session_for(word_repo, stats_repo, clock):
    def _build(words, fallback_size=10):
        word_repo.save_words(words)
        stats = StatsService(word_repo, stats_repo)
        return ReviewSession(word_repo, stats, clock, fallback_size=fallback_size)

    return _build


def test_start_builds_queue_from_repository(session_for, make_word, now):
    overdue = make_word("overdue", next_review_date=now - timedelta(days=2))
    due = make_word("due", next_review_date=now - timedelta(hours=1))
    later = make_word("later", next_review_date=now + timedelta(days=1))
    session = session_for([due, later, overdue])

    result = session.start()

    assert result.due_count == 2
    assert [w.term for w in session.queue] == ["overdue", "due"]
    assert session.current.term == "overdue"
    assert session.remaining == 2


def test_answer_persists_by_id(session_for, word_repo, make_word, now):
    a = make_word("alpha")
    b = make_word("beta")
    session = session_for([a, b])
    session.start()

    updated = session.answer(5, duration_seconds=4.0)

    stored = word_repo.get(a.id)
    assert stored == updated
    assert stored.repetitions == 1
    assert stored.last_review_date == now
    # Untouched neighbour
    assert word_repo.get(b.id) == b
    assert [w.id for w in word_repo.load_words()] == [a.id, b.id]


def test_answer_updates_stats(session_for, stats_repo, make_word, now):
    session = session_for([make_word(), make_word()])
    session.start()

    session.answer(5, 3.0)
    session.answer(1, 2.5)

    stats = stats_repo.load_stats()
    assert stats.total_learned == 1
    assert stats.study_time_seconds == pytest.approx(5.5)
    assert stats.streak_days == 1
    assert stats.last_study_date == now


def test_session_runs_to_completion(session_for, make_word):
    session = session_for([make_word("a"), make_word("b"), make_word("c")])
    session.start()

    for quality in (5, 3, 1):
        session.answer(quality, 1.0)

    assert session.is_finished
    assert session.current is None
    assert [(r.term, r.quality) for r in session.results] == [("a", 5), ("b", 3), ("c", 1)]

    summary = session.summary()
    assert summary.reviewed == 3
    assert summary.passed == 2
    assert summary.failed == 1
    assert summary.total_seconds == pytest.approx(3.0)

    with pytest.raises(SessionFinishedError):
        session.answer(5)


def test_invalid_quality_does_not_advance(session_for, word_repo, make_word):
    word = make_word()
    session = session_for([word])
    session.start()

    with pytest.raises(InvalidQualityError):
        session.answer(7)

    assert session.position == 0
    assert word_repo.get(word.id) == word


def test_empty_library(session_for):
    session = session_for([])

    result = session.start()

    assert result.queue == []
    assert session.is_finished


def test_fallback_session(session_for, make_word, now):
    words = [make_word(next_review_date=now + timedelta(days=3)) for _ in range(12)]
    session = session_for(words, fallback_size=5)

    result = session.start()

    assert result.used_fallback
    assert session.remaining == 5


def test_uses_injected_clock_for_each_answer(session_for, clock, make_word, now):
    session = session_for([make_word(), make_word()])
    session.start()

    session.answer(5)
    clock.advance(minutes=2)
    second = session.answer(5)

    assert second.last_review_date == now + timedelta(minutes=2)
    assert [e.reviewed_at for e in session.events] == [now, now + timedelta(minutes=2)]


def test_session_works_against_stats_mock(word_repo, clock, make_word):
    word_repo.save_words([make_word()])
    stats = MagicMock(spec=StatsService)
    session = ReviewSession(word_repo, stats, clock)
    session.start()

    session.answer(3, 1.5)

    stats.record_review.assert_called_once_with(3, 1.5, clock.now())
