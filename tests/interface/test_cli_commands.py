"""Tests for CLI commands: library management, review, stats, export and config."""

import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from wordmaster.infrastructure.adapters.json_store import JsonStatsRepository, JsonWordRepository
from wordmaster.interface.cli import app

runner = CliRunner()


@pytest.fixture
def data_dir(mock_home, tmp_path):
    return tmp_path / "data"


def invoke(data_dir, *args, **kwargs):
    return runner.invoke(app, ["--data-dir", str(data_dir), *args], **kwargs)


def stored_words(data_dir):
    return JsonWordRepository(data_dir / "words.json").load_words()


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "vocabulary trainer" in result.stdout
    assert "review" in result.stdout
    assert "stats" in result.stdout


# --- Library ---


def test_add_and_list(data_dir):
    result = invoke(data_dir, "add", "candid", "truthful and straightforward", "-e", "A candid talk.")
    assert result.exit_code == 0
    assert "Added 'candid'" in result.stdout

    words = stored_words(data_dir)
    assert len(words) == 1
    assert words[0].example == "A candid talk."
    assert words[0].tags == ("manual",)

    result = invoke(data_dir, "list")
    assert result.exit_code == 0
    assert "candid" in result.stdout
    assert "New" in result.stdout


def test_add_duplicate(data_dir):
    invoke(data_dir, "add", "candid", "truthful")

    result = invoke(data_dir, "add", "Candid", "again")

    assert result.exit_code == 1
    assert "already in your library" in result.stdout
    assert len(stored_words(data_dir)) == 1


def test_list_empty(data_dir):
    result = invoke(data_dir, "list")
    assert result.exit_code == 0
    assert "No words yet" in result.stdout


def test_search(data_dir):
    invoke(data_dir, "add", "verbose", "using more words than needed")
    invoke(data_dir, "add", "laconic", "using very few words")
    invoke(data_dir, "add", "zeal", "great energy")

    result = invoke(data_dir, "search", "WORDS")

    assert "verbose" in result.stdout
    assert "laconic" in result.stdout
    assert "zeal" not in result.stdout


def test_favorite_and_delete(data_dir):
    invoke(data_dir, "add", "tenacious", "persistent")
    word_id = stored_words(data_dir)[0].id

    result = invoke(data_dir, "favorite", word_id)
    assert "added to favorites" in result.stdout
    assert stored_words(data_dir)[0].is_favorite

    result = invoke(data_dir, "list", "--favorites")
    assert "tenacious" in result.stdout

    result = invoke(data_dir, "delete", word_id, "--force")
    assert result.exit_code == 0
    assert stored_words(data_dir) == []


def test_delete_asks_for_confirmation(data_dir):
    invoke(data_dir, "add", "tenacious", "persistent")
    word_id = stored_words(data_dir)[0].id

    result = invoke(data_dir, "delete", word_id, input="n\n")

    assert result.exit_code == 1
    assert len(stored_words(data_dir)) == 1


def test_unknown_word_id(data_dir):
    result = invoke(data_dir, "favorite", "missing")

    assert result.exit_code == 1
    assert "Word not found: missing" in result.stdout


def test_clear(data_dir):
    invoke(data_dir, "add", "a", "first")
    invoke(data_dir, "add", "b", "second")

    result = invoke(data_dir, "clear", "--force")

    assert result.exit_code == 0
    assert "2 words removed" in result.stdout
    assert stored_words(data_dir) == []


def test_export_to_file(data_dir, tmp_path):
    invoke(data_dir, "add", "quip", "a witty remark", "-p", "kwɪp")
    out = tmp_path / "export.csv"

    result = invoke(data_dir, "export", str(out))

    assert result.exit_code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith('"Term"')
    assert '"quip","a witty remark"' in lines[1]


# --- Review ---


def test_due_on_empty_library(data_dir):
    result = invoke(data_dir, "due")
    assert "library is empty" in result.stdout


def test_due_lists_new_words(data_dir):
    invoke(data_dir, "add", "astute", "clever")

    result = invoke(data_dir, "due")

    assert "Due now: 1" in result.stdout
    assert "astute" in result.stdout


def test_review_session(data_dir):
    invoke(data_dir, "add", "astute", "clever", "-e", "An astute observer.")
    invoke(data_dir, "add", "brusque", "abrupt")

    result = invoke(data_dir, "review", input="\n5\n\n1\n")

    assert result.exit_code == 0, result.stdout
    assert "clever" in result.stdout
    assert "An astute observer." in result.stdout
    assert "Session complete: 2 reviewed, 1 remembered, 1 to relearn." in result.stdout

    words = {w.term: w for w in stored_words(data_dir)}
    assert words["astute"].repetitions == 1
    assert words["astute"].interval == 1
    assert words["brusque"].repetitions == 0
    assert words["brusque"].last_review_date is not None

    stats = JsonStatsRepository(data_dir / "stats.json").load_stats()
    assert stats.total_learned == 1
    assert stats.streak_days == 1


def test_review_rejects_other_keys(data_dir):
    invoke(data_dir, "add", "astute", "clever")

    result = invoke(data_dir, "review", input="\n4\n3\n")

    assert result.exit_code == 0
    assert "Answer 1, 3, 5." in result.stdout
    assert stored_words(data_dir)[0].repetitions == 1
    assert stored_words(data_dir)[0].easiness_factor == pytest.approx(2.36)


def test_review_empty_library(data_dir):
    result = invoke(data_dir, "review")
    assert result.exit_code == 0
    assert "library is empty" in result.stdout


def test_nothing_due_without_fallback(data_dir, monkeypatch):
    invoke(data_dir, "add", "astute", "clever")
    invoke(data_dir, "review", input="\n5\n")
    monkeypatch.setenv("WORDMASTER_FALLBACK_QUEUE_SIZE", "0")

    due = invoke(data_dir, "due")
    review = invoke(data_dir, "review")

    assert due.exit_code == 0
    assert review.exit_code == 0
    assert "Nothing is due" in due.stdout
    assert "Nothing is due" in review.stdout
    assert "library is empty" not in due.stdout + review.stdout


# --- Stats ---


def test_stats_json(data_dir):
    invoke(data_dir, "add", "astute", "clever")
    invoke(data_dir, "review", input="\n5\n")

    result = invoke(data_dir, "stats", "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["total_words"] == 1
    assert data["due_count"] == 0
    assert data["proficiency"] == {"Learning": 1}
    assert data["total_learned"] == 1
    assert data["goal_progress_percent"] == 5


def test_stats_text(data_dir):
    result = invoke(data_dir, "stats")
    assert result.exit_code == 0
    assert "Daily goal: 0/20 (0%)" in result.stdout


def test_corrupt_storage_reported(data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / "words.json").write_text("garbage", encoding="utf-8")

    result = invoke(data_dir, "stats")

    assert result.exit_code == 1
    assert "Could not read" in result.stdout


# --- Config / server ---


def test_config_show(data_dir):
    result = invoke(data_dir, "config", "show")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["data_dir"] == str(data_dir.resolve())
    assert data["daily_goal"] == 20
    assert set(data) == {"data_dir", "daily_goal", "fallback_queue_size", "timezone", "verbose"}


@patch("uvicorn.run")
def test_server_command(mock_run):
    result = runner.invoke(app, ["server", "--port", "9000"])
    assert result.exit_code == 0
    mock_run.assert_called_with("wordmaster.server:app", host="127.0.0.1", port=9000, reload=False)


# --- Logging ---


@pytest.mark.parametrize(
    "flags,level",
    [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
)
def test_verbosity_flags(data_dir, flags, level):
    root = logging.getLogger()
    previous = root.level
    try:
        result = runner.invoke(app, [*flags, "--data-dir", str(data_dir), "list"])
        assert result.exit_code == 0
        assert root.level == level
    finally:
        root.setLevel(previous)
