"""Seasonal theme derived from a calendar date.

Holiday windows take precedence over the meteorological seasons.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum


class Season(str, Enum):
    HALLOWEEN = "halloween"
    CHRISTMAS = "christmas"
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


def current_season(day: date) -> Season:
    """Theme for a given day. Halloween is 15 Oct to 5 Nov, Christmas is 1 Dec to 6 Jan."""
    month, dom = day.month, day.day

    if (month == 10 and dom >= 15) or (month == 11 and dom <= 5):
        return Season.HALLOWEEN
    if month == 12 or (month == 1 and dom <= 6):
        return Season.CHRISTMAS
    if 3 <= month <= 5:
        return Season.SPRING
    if 6 <= month <= 8:
        return Season.SUMMER
    if 9 <= month <= 11:
        return Season.AUTUMN
    return Season.WINTER


def today_utc(now: datetime | None = None) -> date:
    """Today's date in UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.date()
