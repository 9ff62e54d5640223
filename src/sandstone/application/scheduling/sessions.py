"""Study session bookkeeping and streak tracking."""

import math
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, timedelta

from ulid import ULID

from sandstone.application.utils.dates import utcnow
from sandstone.domain.constants import PASSING_QUALITY
from sandstone.domain.flashcards.models import Streak, StudySession


def generate_session_id() -> str:
    return f"session_{ULID()}"


def create_study_session(deck_id: str, *, now: datetime | None = None) -> StudySession:
    return StudySession(
        id=generate_session_id(),
        deck_id=deck_id,
        start_time=now or utcnow(),
    )


def record_review(session: StudySession, quality: int, time_spent: int = 0) -> StudySession:
    """Return the session with one more review counted."""
    return replace(
        session,
        cards_reviewed=session.cards_reviewed + 1,
        correct_count=session.correct_count + (1 if quality >= PASSING_QUALITY else 0),
        ratings=[*session.ratings, quality],
        total_time_spent=session.total_time_spent + max(0, time_spent),
    )


def end_study_session(session: StudySession, *, now: datetime | None = None) -> StudySession:
    return replace(session, end_time=now or utcnow())


def session_accuracy(session: StudySession) -> int:
    """Percent of reviews passed, rounded to a whole number."""
    if session.cards_reviewed == 0:
        return 0
    return math.floor(session.correct_count / session.cards_reviewed * 100 + 0.5)


def session_average_rating(session: StudySession) -> float:
    if not session.ratings:
        return 0
    return round(sum(session.ratings) / len(session.ratings), 1)


def calculate_streak(
    study_dates: Iterable[date | datetime], *, today: date | None = None
) -> Streak:
    """
    Compute the current and longest run of consecutive study days.

    The current streak only counts if the most recent study day is today or
    yesterday.
    """
    days = sorted(
        {d.date() if isinstance(d, datetime) else d for d in study_dates}, reverse=True
    )
    if not days:
        return Streak(current=0, longest=0)

    today = today or utcnow().date()
    one_day = timedelta(days=1)

    current = 0
    if days[0] in (today, today - one_day):
        current = 1
        for previous, day in zip(days, days[1:]):
            if previous - day != one_day:
                break
            current += 1

    longest = 1
    run = 1
    for previous, day in zip(days, days[1:]):
        if previous - day == one_day:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return Streak(current=current, longest=longest)
