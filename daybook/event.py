"""
Event record for Daybook.

A CalEvent is a mutable value object that is referenced by identity:
stores hold references, edits mutate the referenced object in place, and
moving an event between calendars moves the very same object.

Instants (start/end) are derived from the date and time-of-day fields on
every access and are never cached, so they cannot go stale after an edit.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime, date, time as dt_time, timedelta
from typing import Optional


DEFAULT_EVENT_COLOR = "#4285f4"  # Default Google blue

# Events never span midnight, so a default end time is capped here
LAST_SECOND_OF_DAY = dt_time(23, 59, 59)


class InvalidEventError(ValueError):
    """Raised when an event record would violate its invariants."""


@dataclass(eq=False)
class CalEvent:
    """
    One calendar entry anchored to a single day.

    Compares and hashes by identity: two events with identical fields are
    distinct entries.
    """
    title: str
    date: date
    start_time: dt_time
    end_time: dt_time
    location: Optional[str] = None
    notes: Optional[str] = None
    color: str = DEFAULT_EVENT_COLOR  # Opaque display tag

    def __post_init__(self):
        _validate(self)

    # ==================== Derived Instants ====================

    @property
    def start(self) -> datetime:
        """The instant the event starts (date combined with start_time)."""
        return datetime.combine(self.date, self.start_time)

    @property
    def end(self) -> datetime:
        """The instant the event ends (date combined with end_time)."""
        return datetime.combine(self.date, self.end_time)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    # ==================== Editing ====================

    def update(self, **changes) -> 'CalEvent':
        """
        Edit this event in place.

        The edited record is validated before any field is touched, so a
        rejected edit leaves the event exactly as it was.

        Returns:
            self, to allow chaining
        """
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown event field(s): {', '.join(sorted(unknown))}")

        # replace() builds a throwaway copy and runs __post_init__ on it
        replace(self, **changes)

        for name, value in changes.items():
            setattr(self, name, value)
        return self

    def __repr__(self):
        return (f"CalEvent(title={self.title!r}, date={self.date.isoformat()}, "
                f"start={self.start_time.isoformat()}, end={self.end_time.isoformat()})")


def _validate(event: CalEvent) -> None:
    if not isinstance(event.title, str) or not event.title.strip():
        raise InvalidEventError("Event title must not be blank")
    # datetime is a subclass of date; a datetime here would hide a time component
    if not isinstance(event.date, date) or isinstance(event.date, datetime):
        raise InvalidEventError(f"Event date must be a date, got {type(event.date).__name__}")
    for label, value in (("start", event.start_time), ("end", event.end_time)):
        if not isinstance(value, dt_time):
            raise InvalidEventError(f"Event {label} time must be a time, got {type(value).__name__}")
        if value.tzinfo is not None:
            raise InvalidEventError(f"Event {label} time must be a local (naive) time")
        # Query bounds step by whole seconds
        if value.microsecond:
            raise InvalidEventError(f"Event {label} time must not have sub-second precision")
    if event.end_time < event.start_time:
        raise InvalidEventError(
            f"End time {event.end_time.isoformat()} must not be before "
            f"start time {event.start_time.isoformat()}"
        )
    for label, value in (("location", event.location), ("notes", event.notes)):
        if value is not None and not isinstance(value, str):
            raise InvalidEventError(f"Event {label} must be a string or None")


# ==================== Factories ====================

def create_event(
    title: str,
    event_date: date,
    start_time: dt_time,
    end_time: dt_time,
    location: Optional[str] = None,
    notes: Optional[str] = None,
    color: str = DEFAULT_EVENT_COLOR
) -> CalEvent:
    """
    Create a new event.

    Args:
        title: Display title, must not be blank
        event_date: The day the event is anchored to
        start_time: Time of day the event starts
        end_time: Time of day the event ends (not before start_time)
        location: Optional location; None means "no location"
        notes: Optional notes; None means "no notes"
        color: Display color tag

    Returns:
        A validated CalEvent

    Raises:
        InvalidEventError: if the fields violate the event invariants
    """
    return CalEvent(
        title=title,
        date=event_date,
        start_time=start_time,
        end_time=end_time,
        location=location,
        notes=notes,
        color=color
    )


def new_event_at(
    when: datetime,
    title: str = "New Event",
    duration: timedelta = timedelta(hours=1),
    color: str = DEFAULT_EVENT_COLOR
) -> CalEvent:
    """
    Create an event starting at a clicked slot.

    The start is truncated to the minute. The end is start + duration,
    capped at the last second of the same day.
    """
    start = when.replace(second=0, microsecond=0, tzinfo=None)
    end = start + duration
    if end.date() != start.date():
        end_time = LAST_SECOND_OF_DAY
    else:
        end_time = end.time().replace(microsecond=0)
    return create_event(title, start.date(), start.time(), end_time, color=color)


def blank_to_none(text: Optional[str]) -> Optional[str]:
    """Map None or whitespace-only text to None, anything else unchanged."""
    if text is None or not text.strip():
        return None
    return text
