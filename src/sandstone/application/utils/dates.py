from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_days(moment: datetime, days: float) -> datetime:
    return moment + timedelta(days=days)


def day_key(moment: datetime | date) -> str:
    """UTC calendar date (YYYY-MM-DD) used to bucket reviews by day."""
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        moment = moment.date()
    return moment.isoformat()


def is_due(next_review: datetime | None, now: datetime) -> bool:
    """A card is due when it has no scheduled review or the time has passed."""
    return next_review is None or next_review <= now
