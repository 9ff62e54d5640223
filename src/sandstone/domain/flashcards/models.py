"""
Domain models for flashcard scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from sandstone.domain.constants import DEFAULT_EASE_FACTOR

CardStatus = Literal["new", "learning", "review", "relearning"]
StudyMode = Literal["standard", "cram", "review", "learn", "custom"]
DifficultyLabel = Literal["easy", "medium", "hard"]


@dataclass(frozen=True)
class ReviewEntry:
    """
    A single review event. Append-only, never mutated.

    Attributes:
        date: When the review happened.
        quality: Rating given (0=blackout ... 5=perfect).
        interval: The card's interval (days) at the time of the review.
        ease_factor: The card's ease factor at the time of the review.
        time_spent: Milliseconds spent on the card, if tracked.
    """

    date: datetime
    quality: int
    interval: float
    ease_factor: float
    time_spent: int | None = None


@dataclass
class Card:
    """
    One piece of memorized content plus its scheduling state.

    A fresh card has ease 2.5, interval 0 and no repetitions. The scheduler
    never mutates a card in place; `apply_review` returns a new one.
    """

    id: str
    front: str = ""
    back: str = ""
    deck_id: str | None = None
    created_at: datetime | None = None

    # SM-2 state
    interval: float = 0  # days until next review
    repetition_count: int = 0  # consecutive successful reviews
    ease_factor: float = DEFAULT_EASE_FACTOR
    lapses: int = 0  # times forgotten

    # FSRS-inspired scalars
    difficulty: float | None = None  # 0-1
    stability: float | None = None  # days

    last_review: datetime | None = None
    next_review: datetime | None = None

    review_history: list[ReviewEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ReviewResult:
    """Next scheduling state computed from a single review."""

    interval: float
    repetition_count: int
    ease_factor: float
    difficulty: float
    stability: float
    next_review_date: datetime
    lapses: int


@dataclass(frozen=True)
class BasicReviewResult:
    """Plain SM-2 output without the FSRS-inspired scalars."""

    interval: float
    repetition_count: int
    ease_factor: float
    next_review_date: datetime


@dataclass
class DeckStats:
    total: int = 0
    new: int = 0
    learning: int = 0
    review: int = 0
    relearning: int = 0
    due: int = 0
    mastered: int = 0
    average_ease_factor: float = 0.0
    average_difficulty: float = 0.0
    total_lapses: int = 0


@dataclass(frozen=True)
class CardStats:
    """Per-card report derived from a card's review history."""

    total_reviews: int
    average_rating: float
    success_rate: float  # percent of reviews rated >= 3
    average_time_spent: float  # ms
    last_reviewed: datetime | None
    next_review: datetime | None
    status: CardStatus


@dataclass
class StudySession:
    """
    Reviews performed in one sitting.

    Created at session start, updated by each review, closed at session end.
    """

    id: str
    deck_id: str
    start_time: datetime
    end_time: datetime | None = None
    cards_reviewed: int = 0
    correct_count: int = 0
    ratings: list[int] = field(default_factory=list)
    total_time_spent: int = 0  # ms


@dataclass(frozen=True)
class Streak:
    current: int
    longest: int


@dataclass
class StudyModeConfig:
    """
    Filter settings for a study session.

    Include flags left as None behave as True.
    """

    mode: StudyMode = "standard"
    card_limit: int | None = None
    time_limit: int | None = None  # minutes
    include_new: bool | None = None
    include_review: bool | None = None
    include_learning: bool | None = None
    shuffle: bool = False
    focus_on_weak: bool = False
