"""
Enhanced SM-2 scheduler.

SM-2 interval growth with FSRS-inspired difficulty and stability scalars.
This is a pure computation module with no I/O; the only impurity is reading
the clock when `now` is not supplied.
"""

import math
from dataclasses import replace
from datetime import datetime

from sandstone.application.utils.dates import add_days, utcnow
from sandstone.domain.constants import (
    BASE_EASE_PENALTY,
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    DIFFICULTY_BASE,
    LAPSE_EASE_PENALTY,
    MAX_EASE_FACTOR,
    MAX_INTERVAL,
    MAX_QUALITY,
    MAX_STABILITY_BONUS,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    RELEARN_DECAY,
    SECOND_INTERVAL,
    STABILITY_BASE,
    STABILITY_BONUS_STEP,
    STABILITY_LAPSE_DECAY,
)
from sandstone.domain.errors import InvalidRatingError
from sandstone.domain.flashcards.models import (
    BasicReviewResult,
    Card,
    ReviewEntry,
    ReviewResult,
)


def compute_review(
    quality: int,
    interval: float = 0,
    repetition_count: int = 0,
    ease_factor: float = DEFAULT_EASE_FACTOR,
    lapses: int = 0,
    *,
    now: datetime | None = None,
    strict: bool = False,
) -> ReviewResult:
    """
    Compute a card's next scheduling state from one review.

    Args:
        quality: 0-5 rating (5 = perfect, 0 = complete blackout).
        interval: Current interval in days.
        repetition_count: Number of consecutive successful reviews.
        ease_factor: Current ease factor.
        lapses: Number of times the card was forgotten.
        now: Reference time for the next review date. Defaults to UTC now.
        strict: Raise InvalidRatingError instead of clamping bad ratings.

    Returns:
        ReviewResult with ease in [1.3, 3.0] and interval in [0, 365].
    """
    quality = _normalize_quality(quality, strict)
    interval = max(0, interval)
    repetition_count = max(0, repetition_count)
    lapses = max(0, lapses)
    ease_factor = _clamp(ease_factor, MIN_EASE_FACTOR, MAX_EASE_FACTOR)

    if quality < PASSING_QUALITY:
        # Failed: card enters relearning
        new_lapses = lapses + 1
        new_repetition_count = 0
        new_interval: float = DEFAULT_INTERVAL

        # Repeated lapses shrink the relearning step
        if new_lapses > 1:
            new_interval = min(DEFAULT_INTERVAL * RELEARN_DECAY ** (new_lapses - 1), 1)

        ease_penalty = BASE_EASE_PENALTY + new_lapses * LAPSE_EASE_PENALTY
        new_ease_factor = max(MIN_EASE_FACTOR, ease_factor - ease_penalty)

        difficulty = min(
            1.0, DIFFICULTY_BASE + new_lapses * 0.1 + (PASSING_QUALITY - quality) * 0.1
        )
        stability = STABILITY_BASE * STABILITY_LAPSE_DECAY**new_lapses
    else:
        new_lapses = lapses
        new_repetition_count = repetition_count + 1

        if new_repetition_count == 1:
            new_interval = DEFAULT_INTERVAL
            stability = float(DEFAULT_INTERVAL)
        elif new_repetition_count == 2:
            new_interval = SECOND_INTERVAL
            stability = float(SECOND_INTERVAL)
        else:
            new_interval = _round_half_up(
                interval * ease_factor * stability_bonus(new_repetition_count)
            )
            stability = float(new_interval)

        quality_delta = MAX_QUALITY - quality
        new_ease_factor = ease_factor + ease_adjustment(quality)

        difficulty = _clamp(
            DIFFICULTY_BASE + quality_delta * 0.1 - new_repetition_count * 0.02, 0.0, 1.0
        )

    new_ease_factor = _clamp(new_ease_factor, MIN_EASE_FACTOR, MAX_EASE_FACTOR)
    new_interval = _clamp(new_interval, 0, MAX_INTERVAL)

    reference = now or utcnow()
    return ReviewResult(
        interval=new_interval,
        repetition_count=new_repetition_count,
        ease_factor=new_ease_factor,
        difficulty=difficulty,
        stability=stability,
        next_review_date=add_days(reference, new_interval),
        lapses=new_lapses,
    )


def compute_review_basic(
    quality: int,
    interval: float = 0,
    repetition_count: int = 0,
    ease_factor: float = DEFAULT_EASE_FACTOR,
    *,
    now: datetime | None = None,
) -> BasicReviewResult:
    """Plain SM-2 entry point, kept for callers that track no lapses."""
    result = compute_review(quality, interval, repetition_count, ease_factor, 0, now=now)
    return BasicReviewResult(
        interval=result.interval,
        repetition_count=result.repetition_count,
        ease_factor=result.ease_factor,
        next_review_date=result.next_review_date,
    )


def apply_review(
    card: Card,
    quality: int,
    *,
    time_spent: int | None = None,
    now: datetime | None = None,
    strict: bool = False,
) -> Card:
    """
    Return a copy of `card` with one review applied.

    The appended ReviewEntry records the interval and ease the card had
    before this review.
    """
    reference = now or utcnow()
    result = compute_review(
        quality,
        card.interval,
        card.repetition_count,
        card.ease_factor,
        card.lapses,
        now=reference,
        strict=strict,
    )
    entry = ReviewEntry(
        date=reference,
        quality=int(_normalize_quality(quality, strict)),
        interval=card.interval,
        ease_factor=card.ease_factor,
        time_spent=time_spent,
    )
    return replace(
        card,
        interval=result.interval,
        repetition_count=result.repetition_count,
        ease_factor=result.ease_factor,
        lapses=result.lapses,
        difficulty=result.difficulty,
        stability=result.stability,
        last_review=reference,
        next_review=result.next_review_date,
        review_history=[*card.review_history, entry],
    )


def stability_bonus(repetition_count: int) -> float:
    """Interval multiplier for mature cards; 1.0 at the third success, capped at 1.2."""
    return min(MAX_STABILITY_BONUS, 1 + (repetition_count - 3) * STABILITY_BONUS_STEP)


def ease_adjustment(quality: float) -> float:
    """SM-2 ease delta: +0.1 for a perfect answer, -0.14 for a bare pass."""
    delta = MAX_QUALITY - quality
    return 0.1 - delta * (0.08 + delta * 0.02)


def _normalize_quality(quality: float, strict: bool) -> float:
    if strict:
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidRatingError(quality)
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise InvalidRatingError(quality)
        return quality
    return _clamp(quality, MIN_QUALITY, MAX_QUALITY)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
