"""In-person events where Rootmarks runs a stall. Static display data."""

from __future__ import annotations

from datetime import date

EVENTS: list[dict] = [
    {
        "id": "1",
        "day": date(2025, 1, 27),
        "title": "Year 9 Parents Evening",
        "location": "AGS",
        "description": "Come visit our stall to learn about Rootmarks and our seeded bookmarks!",
    },
]


def list_events(today: date | None = None) -> list[dict]:
    """Events in date order; only those on or after ``today`` when it is given."""
    events = sorted(EVENTS, key=lambda e: (e["day"], e["id"]))
    if today is None:
        return events
    return [e for e in events if e["day"] >= today]
