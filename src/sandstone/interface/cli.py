"""Sandstone CLI — spaced-repetition study commands."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from sandstone.application.config import resolve_config
from sandstone.application.scheduling import (
    classify_status,
    create_study_session,
    default_study_mode_config,
    difficulty_label,
    end_study_session,
    format_interval,
    rating_label,
    session_accuracy,
    session_average_rating,
)
from sandstone.application.study_service import StudyService
from sandstone.domain.flashcards.models import Card, StudySession
from sandstone.interface._common import (
    _deck_path,
    _resolve_with_overrides,
    _run,
    _service,
    humanize_error,  # noqa: F401
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="sandstone: Spaced-repetition flashcard scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage sandstone configuration.")
app.add_typer(config_app, name="config")

DeckArg = Annotated[
    Path | None,
    typer.Argument(help="Path to the YAML deck file. Defaults to 'deck_path' in config."),
]


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
):
    """Global settings for sandstone."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger("sandstone").setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger("sandstone").setLevel(logging.INFO)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    front: Annotated[str, typer.Option(help="Prompt side of the card.")],
    back: Annotated[str, typer.Option(help="Answer side of the card.")],
    deck: DeckArg = None,
):
    """Add a new card to a deck, creating the deck file if needed."""
    from sandstone.application.utils.dates import utcnow
    from sandstone.infrastructure.adapters.yaml_deck import YamlDeckRepository, generate_card_id

    config = _resolve_with_overrides(deck_path=deck)
    repo = YamlDeckRepository(_deck_path(config))
    card = Card(id=generate_card_id(), front=front, back=back, created_at=utcnow())

    _run(repo.save_card(card))
    typer.secho(f"Added {card.id}", fg="green")


@app.command()
def review(
    deck: Annotated[Path, typer.Argument(help="Path to the YAML deck file.")],
    card_id: Annotated[str, typer.Argument(help="ID of the card being reviewed.")],
    quality: Annotated[
        int, typer.Argument(help="Recall quality: 0=blackout, 3=good, 5=perfect.")
    ],
    time_spent: Annotated[
        int | None, typer.Option(help="Milliseconds spent on the card.")
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--lenient", help="Reject ratings outside 0-5 instead of clamping."),
    ] = None,
):
    """[bold green]Review[/bold green] a card and schedule its next repetition."""
    config = _resolve_with_overrides(deck_path=deck, strict_ratings=strict)
    service = _service(config)

    outcome = _run(service.review_card(card_id, quality, time_spent=time_spent))
    card = outcome.card

    label = rating_label(card.review_history[-1].quality)
    typer.echo(f"{label}: next review in {format_interval(card.interval)}")
    typer.echo(
        f"  status={classify_status(card)} reps={card.repetition_count} "
        f"ease={card.ease_factor:.2f} lapses={card.lapses}"
    )
    if card.next_review:
        typer.echo(f"  due {card.next_review.isoformat(timespec='minutes')}")


@app.command()
def stats(
    deck: DeckArg = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck statistics: status counts, due, mastered, averages."""
    config = _resolve_with_overrides(deck_path=deck)
    result = _run(_service(config).deck_stats())

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    typer.echo(f"Cards: {result.total}  Due: {result.due}  Mastered: {result.mastered}")
    typer.echo(
        f"New: {result.new}  Learning: {result.learning}  "
        f"Review: {result.review}  Relearning: {result.relearning}"
    )
    label = difficulty_label(result.average_ease_factor)
    typer.echo(
        f"Avg ease: {result.average_ease_factor:.2f} ({label})"
        f"  Avg difficulty: {result.average_difficulty:.2f}  Lapses: {result.total_lapses}"
    )


@app.command()
def due(deck: DeckArg = None):
    """List cards due for review now."""
    config = _resolve_with_overrides(deck_path=deck)
    cards = _run(_service(config).due_cards())

    if not cards:
        typer.secho("Nothing due.", fg="green")
        return

    for card in cards:
        typer.echo(_card_line(card))
    typer.echo(f"{len(cards)} due")


@app.command()
def study(
    deck: DeckArg = None,
    mode: Annotated[
        str | None, typer.Option(help="Study mode: standard, cram, review, learn, custom.")
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Maximum cards in the session.")] = None,
    shuffle: Annotated[
        bool | None, typer.Option("--shuffle/--no-shuffle", help="Override preset shuffling.")
    ] = None,
    weak: Annotated[
        bool | None, typer.Option("--weak/--no-weak", help="Put weak cards first.")
    ] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for a reproducible shuffle.")] = None,
    drill: Annotated[
        bool, typer.Option("--drill", help="Review each card now and record the session.")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Build a study queue for the chosen mode, optionally drilling through it."""
    config = _resolve_with_overrides(deck_path=deck, shuffle_seed=seed)
    try:
        mode_config = default_study_mode_config(mode or config.default_mode)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--mode") from e
    if limit is not None:
        mode_config.card_limit = limit
    if shuffle is not None:
        mode_config.shuffle = shuffle
    if weak is not None:
        mode_config.focus_on_weak = weak

    service = _service(config)
    cards = _run(service.study_queue(mode_config))
    session = create_study_session(str(_deck_path(config).stem))

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "session": session.id,
                    "mode": mode_config.mode,
                    "cards": [
                        {"id": c.id, "front": c.front, "status": classify_status(c)}
                        for c in cards
                    ],
                },
                indent=2,
            )
        )
        return

    typer.echo(f"Session {session.id} ({mode_config.mode}): {len(cards)} cards")
    if drill:
        _drill(service, cards, session)
        return
    for position, card in enumerate(cards, start=1):
        typer.echo(f"  [{position}] {_card_line(card)}")


@app.command()
def upcoming(
    deck: DeckArg = None,
    days: Annotated[int | None, typer.Option(help="How many days ahead to show.")] = None,
):
    """Show how many reviews fall on each of the coming days."""
    config = _resolve_with_overrides(deck_path=deck)
    buckets = _run(_service(config).upcoming(days or config.upcoming_days))

    for day, cards in buckets.items():
        typer.echo(f"{day}  {len(cards)}")


@app.command()
def card(
    deck: Annotated[Path, typer.Argument(help="Path to the YAML deck file.")],
    card_id: Annotated[str, typer.Argument(help="ID of the card to report on.")],
):
    """Show review history statistics for one card."""
    config = _resolve_with_overrides(deck_path=deck)
    report = _run(_service(config).card_report(card_id))

    typer.echo(f"{card_id}: {report.status}")
    typer.echo(
        f"  reviews={report.total_reviews} avg_rating={report.average_rating} "
        f"success={report.success_rate}%"
    )
    typer.echo(f"  last reviewed: {_fmt_dt(report.last_reviewed)}")
    typer.echo(f"  next review:   {_fmt_dt(report.next_review)}")


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8787,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Start the HTTP scheduling API."""
    import uvicorn

    uvicorn.run("sandstone.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def _drill(service: StudyService, cards: list[Card], session: StudySession) -> None:
    """Prompt for a rating on each card, saving every review as it happens."""
    for position, card in enumerate(cards, start=1):
        typer.echo(f"[{position}/{len(cards)}] {card.front}")
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(f"  {card.back}")
        quality = typer.prompt("Quality (0-5)", type=int)

        outcome = _run(service.review_card(card.id, quality, session=session))
        session = outcome.session
        rated = outcome.card.review_history[-1].quality
        typer.echo(
            f"  {rating_label(rated)}: next review in {format_interval(outcome.card.interval)}"
        )

    session = end_study_session(session)
    typer.secho(
        f"Reviewed {session.cards_reviewed} cards, "
        f"accuracy {session_accuracy(session)}%, "
        f"average rating {session_average_rating(session)}",
        fg="green",
    )


def _card_line(card: Card) -> str:
    front = card.front if len(card.front) <= 40 else card.front[:37] + "..."
    return f"{card.id}  {classify_status(card):<10}  {front}"


def _fmt_dt(value: datetime | None) -> str:
    return value.isoformat(timespec="minutes") if value else "-"
