"""
Daybook Core Module

This module provides the temporal query and layout core of the calendar:
- Event record (event.py) - CalEvent, referenced by identity
- Event store (event_store.py) - one named calendar's events
- Range queries (query.py) - open-interval queries and granularity helpers
- Day layout (layout.py) - overlap partitioning into display columns
- Calendar registry (registry.py) - named stores, moves between calendars
- View models (views.py) - day/week/month navigation and content
- Configuration parsing (config.py)
"""

from .config import Config
from .event import CalEvent, InvalidEventError, create_event, new_event_at
from .event_store import EventStore
from .query import (
    InvalidIntervalError,
    query_range, query_stores,
    events_in_year, events_in_month, events_in_week, events_in_day, events_in_hour,
)
from .layout import PlacedEvent, overlaps, partition_day, layout_day, time_to_slot, slot_span
from .registry import CalendarRegistry, NoSuchCalendarError, CalendarAlreadyExistsError
from .views import DayView, WeekView, MonthView

__all__ = [
    'Config',
    'CalEvent',
    'InvalidEventError',
    'create_event',
    'new_event_at',
    'EventStore',
    'InvalidIntervalError',
    'query_range',
    'query_stores',
    'events_in_year',
    'events_in_month',
    'events_in_week',
    'events_in_day',
    'events_in_hour',
    'PlacedEvent',
    'overlaps',
    'partition_day',
    'layout_day',
    'time_to_slot',
    'slot_span',
    'CalendarRegistry',
    'NoSuchCalendarError',
    'CalendarAlreadyExistsError',
    'DayView',
    'WeekView',
    'MonthView',
]
