"""
YAML Deck Repository — Infrastructure adapter for deck files.

A deck file is a YAML mapping:

    id: biology
    name: Biology
    cards:
      - id: card_01H...
        front: Mitochondria
        back: Powerhouse of the cell
        interval: 6
        repetition_count: 2
        ease_factor: 2.6
        lapses: 0
        next_review: '2026-10-25T09:00:00+00:00'
        review_history:
          - {date: '2026-10-19T09:00:00+00:00', quality: 4, interval: 1, ease_factor: 2.5}

Datetimes are written as ISO-8601 strings; naive values read back as UTC.
"""

import logging
import os
import tempfile
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml  # type: ignore
from ulid import ULID

from sandstone.domain.constants import DEFAULT_EASE_FACTOR
from sandstone.domain.errors import CardNotFoundError, DeckFileError
from sandstone.domain.flashcards.models import Card, ReviewEntry
from sandstone.domain.flashcards.ports import CardRepository

logger = logging.getLogger(__name__)


def generate_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"card_{ULID()}"


class YamlDeckRepository(CardRepository):
    """
    Reads and writes a deck of cards stored in a single YAML file.

    Every call re-reads the file, so edits made by other tools are picked up.
    """

    def __init__(self, path: Path, deck_name: str | None = None):
        self.path = Path(path)
        self.deck_name = deck_name

    async def list_cards(self) -> list[Card]:
        _, cards = self._load()
        return cards

    async def get_card(self, card_id: str) -> Card:
        _, cards = self._load()
        for card in cards:
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    async def save_card(self, card: Card) -> None:
        await self.save_cards([card])

    async def save_cards(self, cards: list[Card]) -> None:
        meta, existing = self._load(allow_missing=True)
        index = {c.id: i for i, c in enumerate(existing)}

        for card in cards:
            if card.deck_id is None:
                card = replace(card, deck_id=meta["id"])
            if card.id in index:
                existing[index[card.id]] = card
            else:
                index[card.id] = len(existing)
                existing.append(card)

        self._write(meta, existing)

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------

    def _load(self, allow_missing: bool = False) -> tuple[dict[str, Any], list[Card]]:
        if not self.path.exists():
            if allow_missing:
                logger.info(f"[deck] Creating new deck file {self.path}")
                return self._default_meta(), []
            raise DeckFileError(f"Deck file not found: {self.path}")

        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise DeckFileError(f"Could not read deck file {self.path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise DeckFileError(f"Deck file {self.path} must contain a mapping")

        meta = self._default_meta()
        if raw.get("id"):
            meta["id"] = str(raw["id"])
        if raw.get("name"):
            meta["name"] = str(raw["name"])

        entries = raw.get("cards") or []
        if not isinstance(entries, list):
            raise DeckFileError(f"'cards' in {self.path} must be a list")

        cards = []
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict) or not entry.get("id"):
                raise DeckFileError(f"Card #{position + 1} in {self.path} has no id")
            try:
                card = card_from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                raise DeckFileError(f"Card {entry['id']!r} in {self.path} is invalid: {e}") from e
            if card.deck_id is None:
                card.deck_id = meta["id"]
            cards.append(card)

        logger.debug(f"[deck] Loaded {len(cards)} cards from {self.path}")
        return meta, cards

    def _write(self, meta: dict[str, Any], cards: list[Card]) -> None:
        doc = {**meta, "cards": [card_to_dict(card) for card in cards]}
        text = yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)

        # Write a sibling temp file, then swap it in over the deck
        tmp: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            tmp = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            tmp.replace(self.path)
        except OSError as e:
            if tmp is not None:
                tmp.unlink(missing_ok=True)
            raise DeckFileError(f"Could not write deck file {self.path}: {e}") from e
        logger.debug(f"[deck] Wrote {len(cards)} cards to {self.path}")

    def _default_meta(self) -> dict[str, Any]:
        return {"id": self.path.stem, "name": self.deck_name or self.path.stem}


# ----------------------------------------------------------------------
# (De)serialization
# ----------------------------------------------------------------------


def card_to_dict(card: Card) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": card.id,
        "front": card.front,
        "back": card.back,
        "interval": card.interval,
        "repetition_count": card.repetition_count,
        "ease_factor": card.ease_factor,
        "lapses": card.lapses,
    }
    optional = {
        "deck_id": card.deck_id,
        "created_at": _dump_dt(card.created_at),
        "difficulty": card.difficulty,
        "stability": card.stability,
        "last_review": _dump_dt(card.last_review),
        "next_review": _dump_dt(card.next_review),
    }
    data.update({k: v for k, v in optional.items() if v is not None})

    if card.review_history:
        data["review_history"] = [_entry_to_dict(e) for e in card.review_history]
    return data


def card_from_dict(data: dict[str, Any]) -> Card:
    history = data.get("review_history") or []
    if not isinstance(history, list):
        raise ValueError("review_history must be a list")

    return Card(
        id=str(data["id"]),
        front=str(data.get("front") or ""),
        back=str(data.get("back") or ""),
        deck_id=data.get("deck_id"),
        created_at=_load_dt(data.get("created_at")),
        interval=_number(data.get("interval", 0)),
        repetition_count=int(data.get("repetition_count", 0)),
        ease_factor=float(data.get("ease_factor", DEFAULT_EASE_FACTOR)),
        lapses=int(data.get("lapses", 0)),
        difficulty=_optional_float(data.get("difficulty")),
        stability=_optional_float(data.get("stability")),
        last_review=_load_dt(data.get("last_review")),
        next_review=_load_dt(data.get("next_review")),
        review_history=[_entry_from_dict(e) for e in history],
    )


def _entry_to_dict(entry: ReviewEntry) -> dict[str, Any]:
    data: dict[str, Any] = {
        "date": _dump_dt(entry.date),
        "quality": entry.quality,
        "interval": entry.interval,
        "ease_factor": entry.ease_factor,
    }
    if entry.time_spent is not None:
        data["time_spent"] = entry.time_spent
    return data


def _entry_from_dict(data: Any) -> ReviewEntry:
    if not isinstance(data, dict):
        raise ValueError("review entries must be mappings")
    moment = _load_dt(data.get("date"))
    if moment is None:
        raise ValueError("review entry has no date")
    time_spent = data.get("time_spent")
    return ReviewEntry(
        date=moment,
        quality=int(data["quality"]),
        interval=_number(data.get("interval", 0)),
        ease_factor=float(data.get("ease_factor", DEFAULT_EASE_FACTOR)),
        time_spent=int(time_spent) if time_spent is not None else None,
    )


def _dump_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _load_dt(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    # safe_load turns unquoted timestamps into datetime already
    moment = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _number(value: Any) -> float:
    number = float(value)
    return int(number) if number.is_integer() else number


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None
