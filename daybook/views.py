"""
View models for the Day, Week and Month browse modes.

These hold the navigation state (current date, visible calendars) and
compute what a view has to show: the events per day, and for day/week
views the column and row placement of each event. Drawing is left to the
UI toolkit.
"""

import calendar
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from .config import Config, LocalizationConfig
from .event import CalEvent
from .layout import DEFAULT_SUBDIVISIONS, PlacedEvent, layout_day, partition_day
from .query import SUNDAY, day_bounds, month_bounds, week_bounds, week_start
from .registry import CalendarRegistry
from .timezone_utils import local_today


# A (calendar name, event) pair as returned by registry queries
Entry = tuple[str, CalEvent]


def month_grid(year: int, month: int, first_weekday: int = SUNDAY) -> list[list[Optional[date]]]:
    """
    Get the weeks of a month as rows of dates.

    Cells outside the month are None.
    """
    cal = calendar.Calendar(firstweekday=first_weekday)
    return [
        [date(year, month, d) if d else None for d in week]
        for week in cal.monthdayscalendar(year, month)
    ]


def slot_labels(subdivisions: int = DEFAULT_SUBDIVISIONS) -> list[str]:
    """Get "HH:MM" labels for every row of a day grid."""
    if not isinstance(subdivisions, int) or isinstance(subdivisions, bool) or subdivisions < 1:
        raise ValueError(f"subdivisions must be a positive int, got {subdivisions!r}")
    labels = []
    for row in range(24 * subdivisions):
        hour, part = divmod(row, subdivisions)
        labels.append(f"{hour:02d}:{part * 60 // subdivisions:02d}")
    return labels


def _group_by_day(entries: Iterable[Entry], days: Iterable[date]) -> dict[date, list[Entry]]:
    grouped: dict[date, list[Entry]] = {d: [] for d in days}
    for name, event in entries:
        if event.date in grouped:
            grouped[event.date].append((name, event))
    return grouped


def _layout_entries(entries: list[Entry], subdivisions: int) -> list[tuple[str, PlacedEvent]]:
    # An event belongs to exactly one calendar, so identity maps it back
    owner = {id(event): name for name, event in entries}
    placed = layout_day([event for _, event in entries], subdivisions)
    return [(owner[id(p.event)], p) for p in placed]


class CalendarViewMode(ABC):
    """Navigation state shared by all view modes."""

    def __init__(
        self,
        registry: CalendarRegistry,
        day: Optional[date] = None,
        visible_calendars: Optional[Iterable[str]] = None,
        localization: Optional[LocalizationConfig] = None
    ):
        self.registry = registry
        self.localization = localization or LocalizationConfig()
        if visible_calendars is None:
            self._visible = set(registry.calendar_names())
        else:
            self._visible = registry.validate_names(visible_calendars)
        self._date = self._normalize(day if day is not None else local_today())

    def _normalize(self, day: date) -> date:
        return day

    @property
    def date(self) -> date:
        return self._date

    def set_date(self, day: date) -> None:
        if day is None:
            raise ValueError("Date must not be None")
        self._date = self._normalize(day)

    @property
    def visible_calendars(self) -> set[str]:
        """Visible calendar names that still exist in the registry."""
        return {name for name in self._visible if name in self.registry}

    def set_visible_calendars(self, names: Iterable[str]) -> None:
        """
        Set which calendars this view shows.

        Raises:
            NoSuchCalendarError: if any name is unknown
        """
        self._visible = self.registry.validate_names(names)

    @abstractmethod
    def forward(self) -> None:
        """Step to the next day, week or month."""

    @abstractmethod
    def backward(self) -> None:
        """Step to the previous day, week or month."""

    def _query(self, before, after) -> list[Entry]:
        return self.registry.events_in_range(self.visible_calendars, before, after)


class DayView(CalendarViewMode):
    """A single day with overlapping events split into columns."""

    def __init__(self, registry: CalendarRegistry, day: Optional[date] = None,
                 visible_calendars: Optional[Iterable[str]] = None,
                 subdivisions: int = DEFAULT_SUBDIVISIONS,
                 localization: Optional[LocalizationConfig] = None):
        super().__init__(registry, day, visible_calendars, localization)
        self.subdivisions = subdivisions

    @classmethod
    def from_config(cls, registry: CalendarRegistry, config: Config, day: Optional[date] = None) -> 'DayView':
        return cls(registry, day, subdivisions=config.layout.hour_subdivisions,
                   localization=config.localization)

    def forward(self) -> None:
        self._date += timedelta(days=1)

    def backward(self) -> None:
        self._date -= timedelta(days=1)

    def header(self) -> str:
        return self._date.isoformat()

    def get_events(self) -> list[Entry]:
        return self._query(*day_bounds(self._date.year, self._date.month, self._date.day))

    def get_event_columns(self) -> list[list[Entry]]:
        """Get the day's events split into non-overlapping columns."""
        entries = self.get_events()
        owner = {id(event): name for name, event in entries}
        columns = partition_day(event for _, event in entries)
        return [[(owner[id(event)], event) for event in column] for column in columns]

    def get_layout(self) -> list[tuple[str, PlacedEvent]]:
        return _layout_entries(self.get_events(), self.subdivisions)

    def slot_labels(self) -> list[str]:
        return slot_labels(self.subdivisions)


class WeekView(CalendarViewMode):
    """Seven days side by side, starting on the configured first weekday."""

    def __init__(self, registry: CalendarRegistry, day: Optional[date] = None,
                 visible_calendars: Optional[Iterable[str]] = None,
                 first_weekday: int = SUNDAY,
                 subdivisions: int = DEFAULT_SUBDIVISIONS,
                 localization: Optional[LocalizationConfig] = None):
        self.first_weekday = first_weekday
        self.subdivisions = subdivisions
        super().__init__(registry, day, visible_calendars, localization)

    @classmethod
    def from_config(cls, registry: CalendarRegistry, config: Config, day: Optional[date] = None) -> 'WeekView':
        """Create a week view using the configured first weekday and grid rows."""
        return cls(registry, day, first_weekday=config.layout.first_weekday,
                   subdivisions=config.layout.hour_subdivisions,
                   localization=config.localization)

    def _normalize(self, day: date) -> date:
        return week_start(day, self.first_weekday)

    def forward(self) -> None:
        self._date += timedelta(days=7)

    def backward(self) -> None:
        self._date -= timedelta(days=7)

    def days(self) -> list[date]:
        return [self._date + timedelta(days=i) for i in range(7)]

    def header(self) -> str:
        end = self._date + timedelta(days=6)
        return f"Week of {self._date.month}/{self._date.day} - {end.month}/{end.day}"

    def day_names(self) -> list[str]:
        return [self.localization.get_day_name(d.weekday()) for d in self.days()]

    def get_events(self) -> list[Entry]:
        return self._query(*week_bounds(self._date, self.first_weekday))

    def events_by_day(self) -> dict[date, list[Entry]]:
        return _group_by_day(self.get_events(), self.days())

    def day_layouts(self) -> dict[date, list[tuple[str, PlacedEvent]]]:
        """Get column/row placement for each day of the week."""
        return {
            day: _layout_entries(entries, self.subdivisions)
            for day, entries in self.events_by_day().items()
        }


class MonthView(CalendarViewMode):
    """A month grid with the events of each day."""

    def __init__(self, registry: CalendarRegistry, day: Optional[date] = None,
                 visible_calendars: Optional[Iterable[str]] = None,
                 first_weekday: int = SUNDAY,
                 localization: Optional[LocalizationConfig] = None):
        self.first_weekday = first_weekday
        super().__init__(registry, day, visible_calendars, localization)

    @classmethod
    def from_config(cls, registry: CalendarRegistry, config: Config, day: Optional[date] = None) -> 'MonthView':
        return cls(registry, day, first_weekday=config.layout.first_weekday,
                   localization=config.localization)

    def _normalize(self, day: date) -> date:
        return day.replace(day=1)

    def forward(self) -> None:
        self._date += relativedelta(months=1)

    def backward(self) -> None:
        self._date -= relativedelta(months=1)

    def header(self) -> str:
        return f"{self.localization.get_month_name(self._date.month)} {self._date.year}"

    def grid(self) -> list[list[Optional[date]]]:
        return month_grid(self._date.year, self._date.month, self.first_weekday)

    def days(self) -> list[date]:
        length = calendar.monthrange(self._date.year, self._date.month)[1]
        return [self._date.replace(day=d) for d in range(1, length + 1)]

    def get_events(self) -> list[Entry]:
        return self._query(*month_bounds(self._date.year, self._date.month))

    def events_by_day(self) -> dict[date, list[Entry]]:
        return _group_by_day(self.get_events(), self.days())
