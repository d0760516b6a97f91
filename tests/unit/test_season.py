"""Seasonal theme tests."""

from datetime import date, datetime, timezone

import pytest

from rootmarks.season.service import Season, current_season, today_utc


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 10, 14), Season.AUTUMN),
        (date(2026, 10, 15), Season.HALLOWEEN),
        (date(2026, 11, 5), Season.HALLOWEEN),
        (date(2026, 11, 6), Season.AUTUMN),
        (date(2026, 12, 1), Season.CHRISTMAS),
        (date(2027, 1, 6), Season.CHRISTMAS),
        (date(2027, 1, 7), Season.WINTER),
        (date(2027, 2, 28), Season.WINTER),
        (date(2027, 3, 1), Season.SPRING),
        (date(2027, 5, 31), Season.SPRING),
        (date(2027, 6, 1), Season.SUMMER),
        (date(2027, 8, 31), Season.SUMMER),
        (date(2027, 9, 1), Season.AUTUMN),
    ],
)
def test_current_season(day, expected):
    assert current_season(day) is expected


def test_today_utc_uses_given_clock():
    now = datetime(2026, 3, 31, 23, 30, tzinfo=timezone.utc)
    assert today_utc(now) == date(2026, 3, 31)
