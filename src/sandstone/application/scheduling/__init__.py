# Application Scheduling Package
from .classifier import classify_status, difficulty_label, is_mastered
from .deck_stats import (
    aggregate_stats,
    card_stats,
    get_cards_due_on,
    get_due_cards,
    get_upcoming_reviews,
)
from .formatting import format_interval, rating_color, rating_label
from .scheduler import apply_review, compute_review, compute_review_basic
from .sessions import (
    calculate_streak,
    create_study_session,
    end_study_session,
    record_review,
    session_accuracy,
    session_average_rating,
)
from .study_modes import default_study_mode_config, filter_for_study_mode

__all__ = [
    "aggregate_stats",
    "apply_review",
    "calculate_streak",
    "card_stats",
    "classify_status",
    "compute_review",
    "compute_review_basic",
    "create_study_session",
    "default_study_mode_config",
    "difficulty_label",
    "end_study_session",
    "filter_for_study_mode",
    "format_interval",
    "get_cards_due_on",
    "get_due_cards",
    "get_upcoming_reviews",
    "is_mastered",
    "rating_color",
    "rating_label",
    "record_review",
    "session_accuracy",
    "session_average_rating",
]
