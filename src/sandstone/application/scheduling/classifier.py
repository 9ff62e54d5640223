"""Card status and progress classification."""

from sandstone.domain.constants import (
    EASY_EASE_THRESHOLD,
    LEARNING_THRESHOLD,
    MASTERY_THRESHOLD,
    MEDIUM_EASE_THRESHOLD,
)
from sandstone.domain.flashcards.models import Card, CardStatus, DifficultyLabel


def classify_status(card: Card) -> CardStatus:
    """
    Classify a card by its progression.

    new: never reviewed successfully and never lapsed.
    relearning: no current repetitions but has lapsed before.
    learning: 1-2 successful repetitions.
    review: 3 or more successful repetitions.
    """
    if not card.repetition_count:
        return "relearning" if card.lapses > 0 else "new"
    if card.repetition_count < LEARNING_THRESHOLD:
        return "learning"
    return "review"


def is_mastered(card: Card) -> bool:
    return (card.repetition_count or 0) >= MASTERY_THRESHOLD and not card.lapses


def difficulty_label(ease_factor: float) -> DifficultyLabel:
    if ease_factor >= EASY_EASE_THRESHOLD:
        return "easy"
    if ease_factor >= MEDIUM_EASE_THRESHOLD:
        return "medium"
    return "hard"
