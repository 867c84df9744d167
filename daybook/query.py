"""
Range queries over event collections.

Every query reduces to query_range(), which selects the events whose start
instant lies strictly between two bounds. The granularity helpers derive
their bounds by stepping one second back from the start of the unit and
one unit forward from it, so an event starting exactly on the unit
boundary is included and nothing from the neighbouring units leaks in.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, date, timedelta
from typing import Iterable, Sequence, Union

from dateutil.relativedelta import relativedelta

from .event import CalEvent


ONE_SECOND = timedelta(seconds=1)

# Day numbering follows datetime.weekday(): 0=Monday ... 6=Sunday
SUNDAY = 6


class InvalidIntervalError(ValueError):
    """Raised for malformed query bounds."""


# ==================== Bounds ====================

def _instant(year: int, month: int = 1, day: int = 1, hour: int = 0, minute: int = 0) -> datetime:
    """Build a datetime, failing fast on fields that do not name a real instant."""
    for name, value in (("year", year), ("month", month), ("day", day),
                        ("hour", hour), ("minute", minute)):
        # bool is an int subclass but never a meaningful calendar field
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidIntervalError(f"{name} must be an int, got {value!r}")
    try:
        return datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise InvalidIntervalError(
            f"Invalid date/time {year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}: {e}"
        ) from e


def _bounds(anchor: datetime, step) -> tuple[datetime, datetime]:
    try:
        return anchor - ONE_SECOND, anchor + step
    except (OverflowError, ValueError) as e:
        raise InvalidIntervalError(f"Bounds around {anchor.isoformat()} are out of range") from e


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return _bounds(_instant(year), relativedelta(years=1))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    return _bounds(_instant(year, month), relativedelta(months=1))


def day_bounds(year: int, month: int, day: int) -> tuple[datetime, datetime]:
    return _bounds(_instant(year, month, day), timedelta(days=1))


def hour_bounds(year: int, month: int, day: int, hour: int) -> tuple[datetime, datetime]:
    return _bounds(_instant(year, month, day, hour), timedelta(hours=1))


def week_start(day: date, first_weekday: int = SUNDAY) -> date:
    """Get the first day of the week containing the given day."""
    if not isinstance(first_weekday, int) or isinstance(first_weekday, bool) or not 0 <= first_weekday <= 6:
        raise ValueError(f"first_weekday must be 0..6, got {first_weekday!r}")
    offset = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=offset)


def week_bounds(day: date, first_weekday: int = SUNDAY) -> tuple[datetime, datetime]:
    start = week_start(day, first_weekday)
    return _bounds(_instant(start.year, start.month, start.day), timedelta(days=7))


# ==================== Queries ====================

def _check_interval(before: datetime, after: datetime) -> None:
    for label, bound in (("before", before), ("after", after)):
        if not isinstance(bound, datetime):
            raise InvalidIntervalError(f"'{label}' must be a datetime, got {type(bound).__name__}")
        if bound.tzinfo is not None:
            raise InvalidIntervalError(f"'{label}' must be a naive local datetime, got {bound.isoformat()}")
    if not before < after:
        raise InvalidIntervalError(
            f"'before' ({before.isoformat()}) must be strictly earlier than 'after' ({after.isoformat()})"
        )


def query_range(events: Iterable[CalEvent], before: datetime, after: datetime) -> list[CalEvent]:
    """
    Get all events that start strictly after `before` and strictly before `after`.

    Args:
        events: Any iterable of events; an EventStore is iterated via a snapshot
        before: Exclusive lower bound
        after: Exclusive upper bound

    Returns:
        Matching events in iteration order (possibly empty)

    Raises:
        InvalidIntervalError: if the bounds are not naive datetimes or before >= after
    """
    _check_interval(before, after)
    snapshot = tuple(events)
    return [event for event in snapshot if before < event.start < after]


def events_in_year(events: Iterable[CalEvent], year: int) -> list[CalEvent]:
    return query_range(events, *year_bounds(year))


def events_in_month(events: Iterable[CalEvent], year: int, month: int) -> list[CalEvent]:
    return query_range(events, *month_bounds(year, month))


def events_in_day(events: Iterable[CalEvent], year: Union[int, date], month: int = None, day: int = None) -> list[CalEvent]:
    """Get events on a day, given either (year, month, day) or a date."""
    if isinstance(year, date):
        if month is not None or day is not None:
            raise TypeError("Pass either a date or (year, month, day), not both")
        year, month, day = year.year, year.month, year.day
    elif month is None or day is None:
        raise TypeError("events_in_day() needs a date or year, month and day")
    return query_range(events, *day_bounds(year, month, day))


def events_in_hour(events: Iterable[CalEvent], year: Union[int, datetime], month: int = None,
                   day: int = None, hour: int = None) -> list[CalEvent]:
    """Get events starting within an hour, given either (year, month, day, hour) or a datetime."""
    if isinstance(year, datetime):
        if any(v is not None for v in (month, day, hour)):
            raise TypeError("Pass either a datetime or (year, month, day, hour), not both")
        year, month, day, hour = year.year, year.month, year.day, year.hour
    elif month is None or day is None or hour is None:
        raise TypeError("events_in_hour() needs a datetime or year, month, day and hour")
    return query_range(events, *hour_bounds(year, month, day, hour))


def events_in_week(events: Iterable[CalEvent], day: date, first_weekday: int = SUNDAY) -> list[CalEvent]:
    return query_range(events, *week_bounds(day, first_weekday))


def query_each(
    stores: Sequence[Iterable[CalEvent]],
    before: datetime,
    after: datetime,
    parallel: bool = False,
    max_workers: int = 4
) -> list[list[CalEvent]]:
    """
    Run query_range() against several stores.

    Returns one result list per store, in store order, whether or not the
    per-store queries run in parallel. Each store is snapshotted exactly once.
    """
    _check_interval(before, after)
    snapshots = [tuple(store) for store in stores]

    if parallel and len(snapshots) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="QueryWorker") as executor:
            futures = [executor.submit(query_range, snap, before, after) for snap in snapshots]
            return [f.result() for f in futures]
    return [query_range(snap, before, after) for snap in snapshots]


def query_stores(
    stores: Sequence[Iterable[CalEvent]],
    before: datetime,
    after: datetime,
    parallel: bool = False,
    max_workers: int = 4
) -> list[CalEvent]:
    """Run query_range() against several stores and concatenate the results in store order."""
    results = []
    for found in query_each(stores, before, after, parallel, max_workers):
        results.extend(found)
    return results
