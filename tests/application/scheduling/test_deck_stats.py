from datetime import date, datetime, timedelta, timezone

import pytest

from sandstone.application.scheduling.deck_stats import (
    aggregate_stats,
    card_stats,
    get_cards_due_on,
    get_due_cards,
    get_upcoming_reviews,
)
from sandstone.domain.flashcards.models import Card, ReviewEntry


@pytest.fixture
def cards(now):
    return [
        Card(id="new"),
        Card(
            id="learning",
            repetition_count=1,
            next_review=now + timedelta(days=1),
            difficulty=0.4,
        ),
        Card(
            id="mastered",
            repetition_count=6,
            ease_factor=2.8,
            next_review=now - timedelta(hours=1),
            difficulty=0.2,
        ),
        Card(
            id="relearning",
            lapses=2,
            ease_factor=1.5,
            next_review=now + timedelta(days=2),
            difficulty=0.8,
        ),
    ]


class TestAggregateStats:
    def test_counts_and_averages(self, cards, now):
        stats = aggregate_stats(cards, now=now)

        assert stats.total == 4
        assert (stats.new, stats.learning, stats.review, stats.relearning) == (1, 1, 1, 1)
        assert stats.due == 2  # unscheduled + overdue
        assert stats.mastered == 1
        assert stats.total_lapses == 2
        assert stats.average_ease_factor == pytest.approx((2.5 + 2.5 + 2.8 + 1.5) / 4)
        # the card without a difficulty still counts in the denominator
        assert stats.average_difficulty == pytest.approx((0.4 + 0.2 + 0.8) / 4)

    def test_empty_deck(self, now):
        stats = aggregate_stats([], now=now)

        assert stats.total == 0
        assert stats.due == 0
        assert stats.mastered == 0
        assert stats.total_lapses == 0
        assert stats.average_ease_factor == 2.5
        assert stats.average_difficulty == 0.3

    def test_review_due_exactly_now_counts(self, now):
        stats = aggregate_stats([Card(id="a", next_review=now)], now=now)
        assert stats.due == 1

    def test_zero_ease_is_excluded_from_average(self, now):
        cards = [Card(id="a", ease_factor=0), Card(id="b", ease_factor=2.0)]
        stats = aggregate_stats(cards, now=now)
        assert stats.average_ease_factor == 2.0


def test_get_due_cards(cards, now):
    due = get_due_cards(cards, now=now)
    assert [c.id for c in due] == ["new", "mastered"]


def test_get_cards_due_on(cards, now):
    tomorrow = (now + timedelta(days=1)).date()

    assert [c.id for c in get_cards_due_on(cards, tomorrow)] == ["learning"]
    assert get_cards_due_on(cards, date(2030, 1, 1)) == []


class TestUpcomingReviews:
    def test_buckets_by_day(self, cards, now):
        upcoming = get_upcoming_reviews(cards, 3, now=now)

        assert list(upcoming) == ["2026-10-19", "2026-10-20", "2026-10-21"]
        assert [c.id for c in upcoming["2026-10-19"]] == ["mastered"]
        assert [c.id for c in upcoming["2026-10-20"]] == ["learning"]
        assert [c.id for c in upcoming["2026-10-21"]] == ["relearning"]

    def test_cards_outside_window_are_ignored(self, now):
        far = Card(id="far", next_review=datetime(2027, 5, 1, tzinfo=timezone.utc))
        upcoming = get_upcoming_reviews([far, Card(id="unscheduled")], 7, now=now)

        assert len(upcoming) == 7
        assert all(bucket == [] for bucket in upcoming.values())

    def test_zero_days(self, cards, now):
        assert get_upcoming_reviews(cards, 0, now=now) == {}

    def test_offset_datetimes_bucket_by_utc_day(self, now):
        tokyo = timezone(timedelta(hours=9))
        # 2026-10-19T16:00Z
        card = Card(id="a", next_review=datetime(2026, 10, 20, 1, 0, tzinfo=tokyo))

        upcoming = get_upcoming_reviews([card], 1, now=now)

        assert [c.id for c in upcoming["2026-10-19"]] == ["a"]
        assert [c.id for c in get_cards_due_on([card], date(2026, 10, 19))] == ["a"]
        assert get_cards_due_on([card], date(2026, 10, 20)) == []


class TestCardStats:
    def test_from_history(self, now):
        history = [
            ReviewEntry(now - timedelta(days=7), 2, 0, 2.5, time_spent=1000),
            ReviewEntry(now - timedelta(days=6), 4, 1, 2.2),
            ReviewEntry(now - timedelta(days=1), 5, 1, 2.2, time_spent=3000),
        ]
        card = Card(
            id="a",
            repetition_count=2,
            lapses=1,
            last_review=now - timedelta(days=1),
            next_review=now + timedelta(days=5),
            review_history=history,
        )

        stats = card_stats(card)

        assert stats.total_reviews == 3
        assert stats.average_rating == 3.7
        assert stats.success_rate == 66.7
        assert stats.average_time_spent == 2000
        assert stats.last_reviewed == now - timedelta(days=1)
        assert stats.next_review == now + timedelta(days=5)
        assert stats.status == "learning"

    def test_unreviewed_card(self):
        stats = card_stats(Card(id="a"))

        assert stats.total_reviews == 0
        assert stats.average_rating == 0
        assert stats.success_rate == 0
        assert stats.last_reviewed is None
        assert stats.status == "new"
