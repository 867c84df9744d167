"""Shared fixtures for Daybook tests."""

from datetime import date, time

import pytest

from daybook.event import CalEvent, create_event
from daybook.event_store import EventStore
from daybook.registry import CalendarRegistry


def _parse_time(value) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def _parse_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _make_event(
    day="2024-03-05",
    start="09:00",
    end="10:00",
    title="Team Meeting",
    location=None,
    notes=None,
) -> CalEvent:
    return create_event(
        title,
        _parse_date(day),
        _parse_time(start),
        _parse_time(end),
        location=location,
        notes=notes,
    )


@pytest.fixture
def make_event():
    """Factory for events from ISO date/time strings."""
    return _make_event


@pytest.fixture
def store():
    return EventStore("Work", "#4285f4")


@pytest.fixture
def registry():
    """Registry with 'Work' and 'Home' calendars (no default calendar)."""
    reg = CalendarRegistry(default_calendar=None)
    reg.create_calendar("Work")
    reg.create_calendar("Home")
    return reg
