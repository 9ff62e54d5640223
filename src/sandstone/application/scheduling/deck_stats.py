"""
Deck statistics and due-date bucketing.

Pure reductions over a collection of cards, no I/O.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from sandstone.application.utils.dates import day_key, is_due, utcnow
from sandstone.domain.constants import DEFAULT_EASE_FACTOR, DIFFICULTY_BASE, PASSING_QUALITY
from sandstone.domain.flashcards.models import Card, CardStats, DeckStats

from .classifier import classify_status, is_mastered


def aggregate_stats(cards: Sequence[Card], *, now: datetime | None = None) -> DeckStats:
    """
    Compute counts per status, due and mastered counts, and averages in one pass.

    An empty deck yields zero counts, average ease 2.5 and average difficulty 0.3.
    """
    now = now or utcnow()
    stats = DeckStats(total=len(cards))

    total_ease = 0.0
    cards_with_ease = 0
    total_difficulty = 0.0

    for card in cards:
        status = classify_status(card)
        setattr(stats, status, getattr(stats, status) + 1)

        if is_due(card.next_review, now):
            stats.due += 1

        if is_mastered(card):
            stats.mastered += 1

        if card.ease_factor:
            total_ease += card.ease_factor
            cards_with_ease += 1

        # Cards without a difficulty still count toward the average
        if card.difficulty is not None:
            total_difficulty += card.difficulty

        stats.total_lapses += card.lapses or 0

    stats.average_ease_factor = (
        total_ease / cards_with_ease if cards_with_ease > 0 else DEFAULT_EASE_FACTOR
    )
    stats.average_difficulty = total_difficulty / len(cards) if cards else DIFFICULTY_BASE
    return stats


def get_due_cards(cards: Iterable[Card], *, now: datetime | None = None) -> list[Card]:
    now = now or utcnow()
    return [card for card in cards if is_due(card.next_review, now)]


def get_cards_due_on(cards: Iterable[Card], day: date | datetime) -> list[Card]:
    """Cards whose next review falls on the given calendar day."""
    key = day_key(day)
    return [card for card in cards if card.next_review and day_key(card.next_review) == key]


def get_upcoming_reviews(
    cards: Iterable[Card], days: int, *, now: datetime | None = None
) -> dict[str, list[Card]]:
    """
    Bucket scheduled cards by day for today and the following `days - 1` days.

    Keys are ISO dates in chronological order. Cards scheduled outside the
    window (or not scheduled at all) are left out.
    """
    now = now or utcnow()
    reviews: dict[str, list[Card]] = {
        day_key(now + timedelta(days=offset)): [] for offset in range(max(0, days))
    }

    for card in cards:
        if not card.next_review:
            continue
        bucket = reviews.get(day_key(card.next_review))
        if bucket is not None:
            bucket.append(card)

    return reviews


def card_stats(card: Card) -> CardStats:
    """
    Summarize a card's review history.
    """
    history = card.review_history
    total = len(history)

    if total:
        average_rating = sum(entry.quality for entry in history) / total
        passed = sum(1 for entry in history if entry.quality >= PASSING_QUALITY)
        success_rate = passed / total * 100
        timed = [entry.time_spent for entry in history if entry.time_spent is not None]
        average_time = sum(timed) / len(timed) if timed else 0.0
        last_reviewed = card.last_review or max(entry.date for entry in history)
    else:
        average_rating = 0.0
        success_rate = 0.0
        average_time = 0.0
        last_reviewed = card.last_review

    return CardStats(
        total_reviews=total,
        average_rating=round(average_rating, 1),
        success_rate=round(success_rate, 1),
        average_time_spent=average_time,
        last_reviewed=last_reviewed,
        next_review=card.next_review,
        status=classify_status(card),
    )
