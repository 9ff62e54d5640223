# Domain Flashcards Package
from .models import (
    BasicReviewResult,
    Card,
    CardStats,
    CardStatus,
    DeckStats,
    DifficultyLabel,
    ReviewEntry,
    ReviewResult,
    Streak,
    StudyMode,
    StudyModeConfig,
    StudySession,
)
from .ports import CardRepository

__all__ = [
    "BasicReviewResult",
    "Card",
    "CardRepository",
    "CardStats",
    "CardStatus",
    "DeckStats",
    "DifficultyLabel",
    "ReviewEntry",
    "ReviewResult",
    "Streak",
    "StudyMode",
    "StudyModeConfig",
    "StudySession",
]
