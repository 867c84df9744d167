"""
Calendar registry: named event stores.

Owns the calendars by name and resolves name sets to stores for range
queries. Moving an event between calendars moves the same object, so any
reference a view holds stays valid.
"""

import sys
from datetime import datetime
from typing import Callable, Iterable, Optional

from .config import Config, get_next_color
from .event import CalEvent
from .event_store import EventStore
from .query import query_each
from .timezone_utils import set_timezone


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] REGISTRY: {msg}", file=sys.stderr)


class NoSuchCalendarError(KeyError):
    """Raised when a calendar name is not known to the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"No such calendar: '{self.name}'"


class CalendarAlreadyExistsError(ValueError):
    """Raised when creating or renaming onto an existing calendar name."""


class CalendarRegistry:
    """
    Registry of named calendars.

    Calendar order is creation order; renaming keeps a calendar's position.
    """

    def __init__(self, default_calendar: Optional[str] = "Default"):
        self._stores: dict[str, EventStore] = {}
        self._on_change_callback: Optional[Callable[[], None]] = None
        if default_calendar:
            self.create_calendar(default_calendar)

    @classmethod
    def from_config(cls, config: Config) -> 'CalendarRegistry':
        """
        Create a registry holding the calendars named in the configuration.

        Also sets the local clock to the configured timezone.
        """
        set_timezone(config.timezone)
        registry = cls(default_calendar=None)
        for cal in config.calendars:
            registry.create_calendar(cal.name, cal.color)
        if not registry._stores:
            registry.create_calendar(config.default_calendar)
        return registry

    # ==================== Change Notification ====================

    def set_on_change_callback(self, callback: Optional[Callable[[], None]]) -> None:
        """Set a callback fired after any calendar or event change."""
        self._on_change_callback = callback

    def _notify_change(self, *_args) -> None:
        if self._on_change_callback:
            self._on_change_callback()

    # ==================== Calendars ====================

    def calendar_names(self) -> list[str]:
        return list(self._stores)

    def __contains__(self, name) -> bool:
        return name in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def get_store(self, name: str) -> EventStore:
        try:
            return self._stores[name]
        except KeyError:
            raise NoSuchCalendarError(name) from None

    def _clean_name(self, name: str) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Calendar name must not be blank")
        return name.strip()

    def create_calendar(self, name: str, color: Optional[str] = None) -> EventStore:
        """
        Create a new, empty calendar.

        Args:
            name: Calendar name (surrounding whitespace is stripped)
            color: Display color; defaults to the next unused palette color

        Raises:
            CalendarAlreadyExistsError: if the name is taken
        """
        name = self._clean_name(name)
        if name in self._stores:
            raise CalendarAlreadyExistsError(f"Calendar '{name}' already exists")
        if color is None:
            color = get_next_color([s.color for s in self._stores.values() if s.color])

        store = EventStore(name, color)
        store.set_on_change_callback(self._notify_change)
        self._stores[name] = store
        _debug_print(f"Created calendar '{name}' ({color})")
        self._notify_change()
        return store

    def rename_calendar(self, new_name: str, old_name: str) -> None:
        """Rename a calendar, keeping its store, events and position."""
        new_name = self._clean_name(new_name)
        store = self.get_store(old_name)
        if new_name == old_name:
            return
        if new_name in self._stores:
            raise CalendarAlreadyExistsError(f"Calendar '{new_name}' already exists")

        # Rebuild to keep the renamed calendar at its original position
        self._stores = {
            (new_name if name == old_name else name): s
            for name, s in self._stores.items()
        }
        store.name = new_name
        _debug_print(f"Renamed calendar '{old_name}' to '{new_name}'")
        self._notify_change()

    def delete_calendar(self, name: str) -> EventStore:
        """
        Delete a calendar and its events.

        Raises:
            NoSuchCalendarError: if the calendar does not exist
            ValueError: if it is the only remaining calendar
        """
        store = self.get_store(name)
        if len(self._stores) <= 1:
            raise ValueError("Cannot delete the only remaining calendar")
        del self._stores[name]
        store.set_on_change_callback(None)
        _debug_print(f"Deleted calendar '{name}' with {len(store)} events")
        self._notify_change()
        return store

    def validate_names(self, names: Iterable[str]) -> set[str]:
        """
        Check that every name refers to a calendar.

        Returns:
            The names as a set

        Raises:
            NoSuchCalendarError: on the first unknown name
        """
        checked = set()
        for name in names:
            if name not in self._stores:
                raise NoSuchCalendarError(name)
            checked.add(name)
        return checked

    # ==================== Events ====================

    def add_event(self, name: str, event: CalEvent) -> None:
        """
        Add an event to a calendar.

        Raises:
            NoSuchCalendarError: if the calendar does not exist
            ValueError: if the event already belongs to a calendar
        """
        store = self.get_store(name)
        current = self.find_calendar(event)
        if current is not None:
            raise ValueError(f"Event {event.title!r} already belongs to calendar '{current}'")
        store.add_event(event)

    def remove_event(self, name: str, event: CalEvent) -> bool:
        return self.get_store(name).remove_event(event)

    def find_calendar(self, event: CalEvent) -> Optional[str]:
        """Get the name of the calendar holding this exact event object."""
        for name, store in self._stores.items():
            if store.contains(event):
                return name
        return None

    def move_event(self, event: CalEvent, source: str, destination: str) -> None:
        """
        Move an event between calendars.

        The same object is removed from the source and added to the
        destination; its fields are left untouched.

        Raises:
            NoSuchCalendarError: if either calendar does not exist
            ValueError: if the event is not in the source calendar
        """
        src = self.get_store(source)
        dst = self.get_store(destination)
        if src is dst:
            return
        if not src.contains(event):
            raise ValueError(f"Event {event.title!r} is not in calendar '{source}'")
        if dst.contains(event):
            raise ValueError(f"Event {event.title!r} is already in calendar '{destination}'")

        src.remove_event(event)
        dst.add_event(event)
        _debug_print(f"Moved {event.title!r} from '{source}' to '{destination}'")

    # ==================== Queries ====================

    def events_in_range(
        self,
        names: Iterable[str],
        before: datetime,
        after: datetime,
        parallel: bool = False
    ) -> list[tuple[str, CalEvent]]:
        """
        Get (calendar name, event) pairs for events starting strictly between the bounds.

        Calendars are visited in registry order regardless of the order of
        `names`.
        """
        wanted = self.validate_names(names)
        selected = [name for name in self._stores if name in wanted]
        per_store = query_each([self._stores[name] for name in selected], before, after, parallel=parallel)

        return [(name, event) for name, found in zip(selected, per_store) for event in found]
