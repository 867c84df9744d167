"""
Day layout: overlap partitioning and time-slot mapping.

partition_day() splits one day's events into display columns such that no
column holds two overlapping events, using as few columns as the day's
busiest instant requires. Events are processed in start order and each one
goes into the first column whose last event it does not overlap; for
interval overlap graphs this greedy coloring is optimal. Processing in any
other order (insertion order, say) can open more columns than needed.

Overlap is closed at both ends: an event ending at 10:00 and one starting
at 10:00 overlap and are laid out side by side. Range queries use open
bounds instead; the two rules are intentionally different.
"""

from dataclasses import dataclass
from datetime import time as dt_time
from typing import Iterable

from .event import CalEvent


DEFAULT_SUBDIVISIONS = 4  # Slots per hour (15 minute rows)


def overlaps(a: CalEvent, b: CalEvent) -> bool:
    """Check if two events overlap (same date, closed time intervals intersect)."""
    if a.date != b.date:
        return False
    return a.start_time <= b.end_time and b.start_time <= a.end_time


def _start_order(events: Iterable[CalEvent]) -> list[CalEvent]:
    # sorted() is stable, so equal starts keep their input order
    return sorted(events, key=lambda e: e.start)


def partition_day(events: Iterable[CalEvent]) -> list[list[CalEvent]]:
    """
    Partition events into the minimum number of non-overlapping columns.

    Args:
        events: Events of a single day, in any order

    Returns:
        A list of columns, each a list of events in start order.
        Empty input gives an empty list.
    """
    columns: list[list[CalEvent]] = []

    for event in _start_order(events):
        # Within a column the last event has the latest end, so it is the
        # only one that can collide with a later-starting event
        for column in columns:
            if not overlaps(column[-1], event):
                column.append(event)
                break
        else:
            columns.append([event])

    return columns


def max_overlap(events: Iterable[CalEvent]) -> int:
    """
    Get the largest number of events sharing a single instant.

    This is the clique number of the day's overlap graph and therefore the
    number of columns partition_day() produces.
    """
    points = []
    for event in events:
        # At equal instants starts sort before ends (closed intervals)
        points.append((event.start, 0))
        points.append((event.end, 1))
    points.sort()

    active = 0
    busiest = 0
    for _, kind in points:
        if kind == 0:
            active += 1
            busiest = max(busiest, active)
        else:
            active -= 1
    return busiest


# ==================== Slot Mapping ====================

def _check_subdivisions(subdivisions: int) -> None:
    if not isinstance(subdivisions, int) or isinstance(subdivisions, bool) or subdivisions < 1:
        raise ValueError(f"subdivisions must be a positive int, got {subdivisions!r}")


def time_to_slot(t: dt_time, subdivisions: int = DEFAULT_SUBDIVISIONS) -> int:
    """
    Map a time of day to a row index: hour * K + floor(K * minute / 60).

    Seconds are ignored.
    """
    _check_subdivisions(subdivisions)
    return t.hour * subdivisions + (subdivisions * t.minute) // 60


def slot_span(event: CalEvent, subdivisions: int = DEFAULT_SUBDIVISIONS) -> tuple[int, int]:
    """
    Get (row, height) of an event in slot units.

    The height is never less than one slot, so short events stay visible.
    """
    row = time_to_slot(event.start_time, subdivisions)
    end_row = time_to_slot(event.end_time, subdivisions)
    return row, max(1, end_row - row)


@dataclass
class PlacedEvent:
    """An event with its column and row placement in a day grid."""
    event: CalEvent
    column: int
    total_columns: int
    row: int
    height: int


def layout_day(events: Iterable[CalEvent], subdivisions: int = DEFAULT_SUBDIVISIONS) -> list[PlacedEvent]:
    """
    Compute column and row placement for one day's events.

    Returns placements in column-major order (column 0 first, each column
    in start order).
    """
    _check_subdivisions(subdivisions)
    columns = partition_day(events)
    total = len(columns)

    placed = []
    for col_idx, column in enumerate(columns):
        for event in column:
            row, height = slot_span(event, subdivisions)
            placed.append(PlacedEvent(event, col_idx, total, row, height))
    return placed
