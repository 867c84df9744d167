"""
Event store for a single named calendar.

Holds CalEvent references in insertion order. Membership and removal go by
identity, never by field equality, so an event can be edited in place or
moved to another store while the UI keeps referring to the same object.
"""

from datetime import datetime, date
from typing import Callable, Iterator, Optional, Union

from .event import CalEvent
from . import query


# Callback signature: (store, event or None)
ChangeCallback = Callable[['EventStore', Optional[CalEvent]], None]


class EventStore:
    """
    Ordered collection of events belonging to one calendar.

    Iteration walks a snapshot taken when iteration starts, so a query in
    progress never sees the store change underneath it.
    """

    def __init__(self, name: str, color: Optional[str] = None):
        self.name = name
        self.color = color
        self._events: list[CalEvent] = []
        self._on_change_callback: Optional[ChangeCallback] = None

    def set_on_change_callback(self, callback: Optional[ChangeCallback]) -> None:
        self._on_change_callback = callback

    def _notify_change(self, event: Optional[CalEvent] = None) -> None:
        if self._on_change_callback:
            self._on_change_callback(self, event)

    # ==================== Contents ====================

    def _index_of(self, event: CalEvent) -> int:
        for i, e in enumerate(self._events):
            if e is event:
                return i
        return -1

    def contains(self, event: CalEvent) -> bool:
        """Check if this exact event object is in the store."""
        return self._index_of(event) >= 0

    def __contains__(self, event) -> bool:
        return self.contains(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[CalEvent]:
        return iter(self.snapshot())

    def snapshot(self) -> tuple[CalEvent, ...]:
        """Get an immutable view of the current contents."""
        return tuple(self._events)

    def get_all_events(self) -> list[CalEvent]:
        """Get a copy of the list of events in this store."""
        return list(self._events)

    # ==================== Mutation ====================

    def add_event(self, event: CalEvent) -> None:
        """
        Add an event to this store.

        Raises:
            TypeError: if event is not a CalEvent
            ValueError: if this event object is already in the store
        """
        if not isinstance(event, CalEvent):
            raise TypeError(f"Expected CalEvent, got {type(event).__name__}")
        if self.contains(event):
            raise ValueError(f"Event {event.title!r} is already in calendar '{self.name}'")
        self._events.append(event)
        self._notify_change(event)

    def remove_event(self, event: CalEvent) -> bool:
        """
        Remove an event by identity.

        Returns:
            True if the event was removed, False if it was not in the store
        """
        idx = self._index_of(event)
        if idx < 0:
            return False
        del self._events[idx]
        self._notify_change(None)
        return True

    def replace_event(self, old: CalEvent, new: CalEvent) -> None:
        """
        Replace an event with another, keeping its position.

        Raises:
            TypeError: if new is not a CalEvent
            ValueError: if old is not in the store, or new already is
        """
        if not isinstance(new, CalEvent):
            raise TypeError(f"Expected CalEvent, got {type(new).__name__}")
        idx = self._index_of(old)
        if idx < 0:
            raise ValueError(f"Event {old.title!r} is not in calendar '{self.name}'")
        if new is old:
            return
        if self.contains(new):
            raise ValueError(f"Event {new.title!r} is already in calendar '{self.name}'")
        self._events[idx] = new
        self._notify_change(new)

    def mark_modified(self, event: CalEvent) -> None:
        """Signal that an event in this store was edited in place."""
        if not self.contains(event):
            raise ValueError(f"Event {event.title!r} is not in calendar '{self.name}'")
        self._notify_change(event)

    # ==================== Queries ====================

    def get_events_in_range(self, before: datetime, after: datetime) -> list[CalEvent]:
        """Get events starting strictly between before and after."""
        return query.query_range(self, before, after)

    def get_events_in_year(self, year: int) -> list[CalEvent]:
        return query.events_in_year(self, year)

    def get_events_in_month(self, year: int, month: int) -> list[CalEvent]:
        return query.events_in_month(self, year, month)

    def get_events_in_week(self, day: date, first_weekday: int = query.SUNDAY) -> list[CalEvent]:
        return query.events_in_week(self, day, first_weekday)

    def get_events_in_day(self, year: Union[int, date], month: int = None, day: int = None) -> list[CalEvent]:
        return query.events_in_day(self, year, month, day)

    def get_events_in_hour(self, year: Union[int, datetime], month: int = None,
                           day: int = None, hour: int = None) -> list[CalEvent]:
        return query.events_in_hour(self, year, month, day, hour)

    def __repr__(self):
        return f"EventStore(name={self.name!r}, events={len(self._events)})"
