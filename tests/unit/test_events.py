"""Tests for the events catalog."""

from datetime import date

from rootmarks.events.catalog import EVENTS, list_events


def test_all_events_in_date_order():
    days = [e["day"] for e in list_events()]
    assert len(days) == len(EVENTS)
    assert days == sorted(days)


def test_past_events_filtered_out():
    assert list_events(date(2025, 1, 28)) == []


def test_event_on_the_day_is_upcoming():
    events = list_events(date(2025, 1, 27))
    assert [e["title"] for e in events] == ["Year 9 Parents Evening"]
