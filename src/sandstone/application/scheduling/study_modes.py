"""
Study-mode filtering.

Selects, orders and caps the cards for a study session. Randomness comes
from an injected `random.Random` so callers can seed it.
"""

import random
from collections.abc import Sequence
from typing import TypeVar

from sandstone.domain.constants import CRAM_CARD_LIMIT, DEFAULT_EASE_FACTOR, LEARN_CARD_LIMIT
from sandstone.domain.flashcards.models import Card, StudyMode, StudyModeConfig

from .classifier import classify_status

T = TypeVar("T")


def filter_for_study_mode(
    cards: Sequence[Card],
    config: StudyModeConfig,
    *,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Filter, reorder and cap cards for a study session.

    Steps, in order:
    1. Drop card types the config excludes (flags left as None include).
    2. focus_on_weak: sort by weakness, weakest first.
    3. shuffle: uniform random permutation.
    4. card_limit: keep the first N when N > 0.

    The input sequence is never modified.
    """
    filtered = [card for card in cards if _included(card, config)]

    if config.focus_on_weak:
        filtered.sort(key=weakness_score, reverse=True)

    if config.shuffle:
        filtered = shuffle_cards(filtered, rng or random.Random())

    if config.card_limit and config.card_limit > 0:
        filtered = filtered[: config.card_limit]

    return filtered


def weakness_score(card: Card) -> float:
    """Higher is weaker: lapses weigh double, low ease adds the rest."""
    return (card.lapses or 0) * 2 + (3 - (card.ease_factor or DEFAULT_EASE_FACTOR))


def shuffle_cards(items: Sequence[T], rng: random.Random) -> list[T]:
    """Fisher-Yates shuffle into a new list."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def default_study_mode_config(mode: StudyMode) -> StudyModeConfig:
    """Preset configuration for each study mode."""
    presets: dict[str, StudyModeConfig] = {
        "standard": StudyModeConfig(
            mode="standard",
            include_new=True,
            include_review=True,
            include_learning=True,
            shuffle=False,
        ),
        "cram": StudyModeConfig(
            mode="cram",
            card_limit=CRAM_CARD_LIMIT,
            include_new=False,
            include_review=True,
            include_learning=True,
            shuffle=True,
            focus_on_weak=True,
        ),
        "review": StudyModeConfig(
            mode="review",
            include_new=False,
            include_review=True,
            include_learning=False,
            shuffle=False,
        ),
        "learn": StudyModeConfig(
            mode="learn",
            card_limit=LEARN_CARD_LIMIT,
            include_new=True,
            include_review=False,
            include_learning=False,
            shuffle=True,
        ),
        "custom": StudyModeConfig(
            mode="custom",
            include_new=True,
            include_review=True,
            include_learning=True,
        ),
    }
    if mode not in presets:
        raise ValueError(f"Unknown study mode: {mode!r}")
    return presets[mode]


def _included(card: Card, config: StudyModeConfig) -> bool:
    status = classify_status(card)
    if status == "new" and config.include_new is False:
        return False
    if status == "review" and config.include_review is False:
        return False
    if status in ("learning", "relearning") and config.include_learning is False:
        return False
    return True
