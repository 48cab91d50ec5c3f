"""wordmaster CLI — library management, review sessions and stats."""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Annotated

import typer

from wordmaster.application.config import AppConfig, resolve_config
from wordmaster.application.factory import Services, build_services
from wordmaster.application.library_service import export_csv
from wordmaster.application.queue_builder import build_review_queue
from wordmaster.application.scheduler import preview_intervals
from wordmaster.domain.constants import QUALITY_EASY, QUALITY_FAIL, QUALITY_HARD
from wordmaster.domain.errors import WordmasterError
from wordmaster.domain.models import Word

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="wordmaster: vocabulary trainer with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage wordmaster configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}

ANSWERS = {
    str(QUALITY_FAIL): "don't know",
    str(QUALITY_HARD): "blurry",
    str(QUALITY_EASY): "know",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve(ctx: typer.Context) -> AppConfig:
    obj = ctx.ensure_object(dict)
    try:
        return resolve_config({"data_dir": obj.get("data_dir"), "verbose": obj.get("verbose")})
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red")
        raise typer.Exit(2) from e


def _services(ctx: typer.Context) -> Services:
    return build_services(_resolve(ctx))


def _fail(e: WordmasterError) -> typer.Exit:
    logger.debug("Command failed", exc_info=True)
    typer.secho(str(e), fg="red")
    return typer.Exit(1)


def _format_row(word: Word) -> str:
    star = "*" if word.is_favorite else " "
    due = word.next_review_date.strftime("%Y-%m-%d")
    return f"{star} {word.id}  {word.term:<20} {word.proficiency.value:<9} due {due}  {word.definition}"


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Directory holding words.json and stats.json.")
    ] = None,
):
    """Global settings for wordmaster."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["data_dir"] = data_dir
    logging.getLogger().setLevel(LOG_LEVELS.get(verbose, logging.DEBUG))


# ---------------------------------------------------------------------------
# Library commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="The word or phrase.")],
    definition: Annotated[str, typer.Argument(help="Its meaning.")],
    example: Annotated[str, typer.Option("--example", "-e", help="Example sentence.")] = "",
    translation: Annotated[
        str, typer.Option("--translation", "-t", help="Translation of the example.")
    ] = "",
    phonetic: Annotated[str, typer.Option("--phonetic", "-p", help="Pronunciation.")] = "",
):
    """[bold green]Add[/bold green] a word to the library."""
    services = _services(ctx)
    try:
        result = services.library.add_word(
            term,
            definition,
            example=example,
            example_translation=translation,
            phonetic=phonetic,
        )
    except WordmasterError as e:
        raise _fail(e) from e
    if result.duplicates:
        typer.secho(f"'{term}' is already in your library.", fg="yellow")
        raise typer.Exit(1)
    typer.secho(f"Added '{result.added[0].term}' ({result.added[0].id}).", fg="green")


@app.command("list")
def list_words(
    ctx: typer.Context,
    favorites: Annotated[bool, typer.Option("--favorites", help="Only favorite words.")] = False,
):
    """List the words in the library."""
    services = _services(ctx)
    try:
        words = services.library.favorites() if favorites else services.library.list_words()
    except WordmasterError as e:
        raise _fail(e) from e

    if not words:
        typer.secho("No words yet.", fg="yellow")
        return
    for word in words:
        typer.echo(_format_row(word))


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text to look for in terms and definitions.")],
):
    """Search the library."""
    services = _services(ctx)
    try:
        words = services.library.search(query)
    except WordmasterError as e:
        raise _fail(e) from e
    if not words:
        typer.secho(f"No words match '{query}'.", fg="yellow")
        return
    for word in words:
        typer.echo(_format_row(word))


@app.command()
def favorite(
    ctx: typer.Context,
    word_id: Annotated[str, typer.Argument(help="ID of the word.")],
):
    """Toggle a word's favorite flag."""
    services = _services(ctx)
    try:
        word = services.library.toggle_favorite(word_id)
    except WordmasterError as e:
        raise _fail(e) from e
    state = "added to" if word.is_favorite else "removed from"
    typer.echo(f"'{word.term}' {state} favorites.")


@app.command()
def delete(
    ctx: typer.Context,
    word_id: Annotated[str, typer.Argument(help="ID of the word.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a word from the library."""
    services = _services(ctx)
    try:
        word = services.library.get_word(word_id)
        if not force:
            typer.confirm(f"Delete '{word.term}'?", abort=True)
        services.library.delete_word(word_id)
    except WordmasterError as e:
        raise _fail(e) from e
    typer.secho(f"Deleted '{word.term}'.", fg="green")


@app.command()
def clear(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Delete [bold red]every[/bold red] word in the library."""
    services = _services(ctx)
    if not force:
        typer.confirm("Delete ALL words? This cannot be undone.", abort=True)
    try:
        count = services.library.delete_all()
    except WordmasterError as e:
        raise _fail(e) from e
    typer.secho(f"Library cleared ({count} words removed).", fg="green")


@app.command()
def export(
    ctx: typer.Context,
    output: Annotated[
        Path | None, typer.Argument(help="CSV file to write. Defaults to stdout.")
    ] = None,
    favorites: Annotated[bool, typer.Option("--favorites", help="Only favorite words.")] = False,
):
    """Export words as CSV."""
    services = _services(ctx)
    try:
        words = services.library.favorites() if favorites else services.library.list_words()
    except WordmasterError as e:
        raise _fail(e) from e
    if output is None:
        export_csv(words, sys.stdout)
        return
    with output.open("w", encoding="utf-8", newline="") as f:
        rows = export_csv(words, f)
    typer.secho(f"Exported {rows} words to {output}.", fg="green")


# ---------------------------------------------------------------------------
# Review commands
# ---------------------------------------------------------------------------


@app.command()
def due(ctx: typer.Context):
    """Show what the next review session would contain."""
    services = _services(ctx)
    try:
        words = services.words.load_words()
    except WordmasterError as e:
        raise _fail(e) from e
    result = build_review_queue(words, services.clock.now(), services.config.fallback_queue_size)
    if not result.queue:
        if result.used_fallback:
            typer.secho("Nothing is due.", fg="yellow")
        else:
            typer.secho("Your library is empty.", fg="yellow")
        return
    if result.used_fallback:
        typer.echo(f"Nothing due. Oldest reviewed: {len(result.queue)}")
    else:
        typer.echo(f"Due now: {result.due_count}")
    for word in result.queue:
        typer.echo(_format_row(word))


def _show_back(word: Word) -> None:
    pos = f"({word.part_of_speech}) " if word.part_of_speech else ""
    typer.secho(f"  {pos}{word.definition}", bold=True)
    if word.example:
        typer.echo(f'  "{word.example}"')
        if word.example_translation:
            typer.echo(f"  {word.example_translation}")
    for ex in word.additional_examples:
        typer.echo(f'  "{ex.sentence}"  {ex.translation}')


@app.command()
def review(ctx: typer.Context):
    """[bold green]Review[/bold green] due words (1 = don't know, 3 = blurry, 5 = know)."""
    services = _services(ctx)
    session = services.new_session()

    try:
        result = session.start()
    except WordmasterError as e:
        raise _fail(e) from e

    if not result.queue:
        if result.used_fallback:
            typer.secho("Nothing is due. Come back later.", fg="yellow")
        else:
            typer.secho("Your library is empty. Add words first.", fg="yellow")
        return
    if result.used_fallback:
        typer.secho("Nothing is due; reviewing the words you saw longest ago.", fg="cyan")

    total = len(session.queue)
    while not session.is_finished:
        word = session.current
        started = time.monotonic()

        typer.echo("")
        typer.secho(f"[{session.position + 1}/{total}] {word.term}", bold=True)
        if word.phonetic:
            typer.echo(f"  [{word.phonetic}]")
        typer.prompt("  Press Enter to reveal", default="", show_default=False)
        _show_back(word)

        preview = preview_intervals(word, services.clock.now())
        question = (
            f"  1 {ANSWERS['1']} ({preview.fail}d) / "
            f"3 {ANSWERS['3']} ({preview.hard}d) / "
            f"5 {ANSWERS['5']} ({preview.easy}d)"
        )
        choice = typer.prompt(question).strip()
        while choice not in ANSWERS:
            typer.secho(f"  Answer {', '.join(ANSWERS)}.", fg="yellow")
            choice = typer.prompt(question).strip()

        try:
            updated = session.answer(int(choice), time.monotonic() - started)
        except WordmasterError as e:
            raise _fail(e) from e
        typer.echo(f"  next review in {updated.interval} day(s)")

    summary = session.summary()
    typer.echo("")
    typer.secho(
        f"Session complete: {summary.reviewed} reviewed, "
        f"{summary.passed} remembered, {summary.failed} to relearn.",
        fg="green",
    )


@app.command()
def stats(
    ctx: typer.Context,
    as_json: Annotated[bool, typer.Option("--json", help="Machine-readable output.")] = False,
):
    """Show learning progress."""
    services = _services(ctx)
    try:
        summary = services.stats.dashboard(services.clock.now())
    except WordmasterError as e:
        raise _fail(e) from e

    if as_json:
        data = {
            "total_words": summary.total_words,
            "due_count": summary.due_count,
            "favorites": summary.favorites,
            "proficiency": {k.value: v for k, v in summary.proficiency_breakdown.items()},
            "total_learned": summary.total_learned,
            "daily_goal": summary.daily_goal,
            "goal_progress": summary.goal_progress,
            "goal_progress_percent": summary.goal_progress_percent,
            "study_minutes": summary.study_minutes,
            "streak_days": summary.streak_days,
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"Words: {summary.total_words} ({summary.due_count} due, {summary.favorites} favorite)")
    for tier, count in summary.proficiency_breakdown.items():
        typer.echo(f"  {tier.value:<9} {count}")
    typer.echo(
        f"Daily goal: {summary.goal_progress}/{summary.daily_goal} "
        f"({summary.goal_progress_percent}%)"
    )
    typer.echo(f"Streak: {summary.streak_days} day(s)")
    typer.echo(f"Study time: {summary.study_minutes} min")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def server(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8777,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("wordmaster.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
