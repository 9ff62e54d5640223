from datetime import date, datetime, timedelta, timezone

from sandstone.application.scheduling.sessions import (
    calculate_streak,
    create_study_session,
    end_study_session,
    record_review,
    session_accuracy,
    session_average_rating,
)


def test_session_lifecycle(now):
    session = create_study_session("biology", now=now)

    assert session.id.startswith("session_")
    assert session.deck_id == "biology"
    assert session.start_time == now
    assert session.end_time is None

    session = record_review(session, 4, 1200)
    session = record_review(session, 2, 800)

    assert session.cards_reviewed == 2
    assert session.correct_count == 1
    assert session.ratings == [4, 2]
    assert session.total_time_spent == 2000
    assert session_accuracy(session) == 50
    assert session_average_rating(session) == 3.0

    closed = end_study_session(session, now=now + timedelta(minutes=10))
    assert closed.end_time == now + timedelta(minutes=10)
    assert session.end_time is None


def test_session_ids_are_unique(now):
    assert create_study_session("d", now=now).id != create_study_session("d", now=now).id


def test_empty_session_metrics(now):
    session = create_study_session("d", now=now)

    assert session_accuracy(session) == 0
    assert session_average_rating(session) == 0


def test_accuracy_rounds_half_up(now):
    session = create_study_session("d", now=now)
    session = record_review(session, 5)
    for _ in range(7):
        session = record_review(session, 1)

    # 1/8 = 12.5%
    assert session_accuracy(session) == 13


class TestStreak:
    today = date(2026, 10, 19)

    def test_empty(self):
        streak = calculate_streak([], today=self.today)
        assert (streak.current, streak.longest) == (0, 0)

    def test_current_run_ending_today(self):
        dates = [date(2026, 10, d) for d in (19, 18, 17, 14, 13)]
        streak = calculate_streak(dates, today=self.today)

        assert streak.current == 3
        assert streak.longest == 3

    def test_current_run_ending_yesterday(self):
        dates = [date(2026, 10, 18), date(2026, 10, 17)]
        assert calculate_streak(dates, today=self.today).current == 2

    def test_broken_streak_keeps_longest(self):
        dates = [date(2026, 10, d) for d in (15, 14, 13, 12)]
        streak = calculate_streak(dates, today=self.today)

        assert streak.current == 0
        assert streak.longest == 4

    def test_duplicates_and_datetimes(self):
        dates = [
            datetime(2026, 10, 19, 8, tzinfo=timezone.utc),
            datetime(2026, 10, 19, 21, tzinfo=timezone.utc),
            date(2026, 10, 18),
        ]
        streak = calculate_streak(dates, today=self.today)

        assert streak.current == 2
        assert streak.longest == 2
