import pytest

from sandstone.application.scheduling.formatting import (
    format_interval,
    rating_color,
    rating_label,
)


@pytest.mark.parametrize(
    ("days", "text"),
    [
        (0, "Now"),
        (1, "1 day"),
        (0.8, "0.8 days"),
        (3, "3 days"),
        (7, "1 week"),
        (14, "2 weeks"),
        (30, "1 month"),
        (60, "2 months"),
        (365, "1 year"),
    ],
)
def test_format_interval(days, text):
    assert format_interval(days) == text


def test_rating_labels():
    assert [rating_label(r) for r in range(6)] == [
        "Blackout",
        "Again",
        "Hard",
        "Good",
        "Easy",
        "Perfect",
    ]
    assert rating_label(9) == "Unknown"


def test_rating_color():
    assert rating_color(0) == rating_color(1)
    assert rating_color(2) != rating_color(3)
    assert rating_color(5) == "#A8C5A8"
