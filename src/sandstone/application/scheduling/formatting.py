"""Display helpers for intervals and ratings."""

RATING_LABELS = {
    0: "Blackout",
    1: "Again",
    2: "Hard",
    3: "Good",
    4: "Easy",
    5: "Perfect",
}


def format_interval(days: float) -> str:
    if days == 0:
        return "Now"
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{_fmt(days)} days"
    if days < 30:
        weeks = round(days / 7)
        return f"{weeks} week{'s' if weeks > 1 else ''}"
    if days < 365:
        months = round(days / 30)
        return f"{months} month{'s' if months > 1 else ''}"
    years = round(days / 365)
    return f"{years} year{'s' if years > 1 else ''}"


def rating_label(rating: int) -> str:
    return RATING_LABELS.get(rating, "Unknown")


def rating_color(rating: int) -> str:
    if rating <= 1:
        return "#D4A8A8"  # red-ish
    if rating == 2:
        return "#E5D4A8"  # yellow-ish
    if rating == 3:
        return "#A8C5D4"  # blue-ish
    return "#A8C5A8"  # green-ish


def _fmt(days: float) -> str:
    # Relearning steps are fractional
    return f"{days:g}" if isinstance(days, float) and not days.is_integer() else str(int(days))
