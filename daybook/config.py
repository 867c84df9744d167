"""
Configuration parser for Daybook.

Handles TOML file parsing for calendars, layout and localization.
"""

import tomllib
import os
import sys
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


def _debug_print(message: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CONFIG: {message}", file=sys.stderr)


@dataclass
class CalendarConfig:
    """Configuration for a named calendar."""
    name: str
    color: Optional[str] = None  # None picks the next palette color


@dataclass
class LayoutConfig:
    """Configuration for day/week grid layout."""
    hour_subdivisions: int = 4  # Rows per hour in day/week view
    first_weekday: int = 6      # 0=Monday ... 6=Sunday


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Default to English abbreviated day names
    day_names: list[str] = None  # Mon Tue Wed Thu Fri Sat Sun
    # Default to English full month names
    month_names: list[str] = None  # January February ... December

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""


@dataclass
class Config:
    """Main configuration container for Daybook."""

    timezone: str = "Europe/Amsterdam"
    default_calendar: str = "Default"
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    calendars: list[CalendarConfig] = field(default_factory=list)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'daybook' / 'daybook.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file."""
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a configuration from parsed TOML data."""
        # Parse General section
        general = data.get('General', {})
        timezone = general.get('timezone', cls.timezone)
        default_calendar = general.get('default_calendar', cls.default_calendar)

        # Parse calendars
        # Supports both [Calendar.Name] and [Calendar] with nested sub-tables
        calendars = []
        for key, value in data.items():
            # Format 1: [Calendar.Name] written as a dotted top-level key
            if key.startswith('Calendar.') and isinstance(value, dict):
                name = key.split('.', 1)[1]
                calendars.append(CalendarConfig(name=name, color=value.get('color')))

            # Format 2: [Calendar] with nested [Calendar.Name] sub-tables
            elif key == 'Calendar' and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, dict):
                        calendars.append(CalendarConfig(name=sub_key, color=sub_value.get('color')))

        _debug_print(f"Calendars found: {[c.name for c in calendars]}")

        # Parse Layout section
        layout_data = data.get('Layout', {})
        layout = LayoutConfig(
            hour_subdivisions=layout_data.get('hour_subdivisions', LayoutConfig.hour_subdivisions),
            first_weekday=layout_data.get('first_weekday', LayoutConfig.first_weekday),
        )
        if (not isinstance(layout.hour_subdivisions, int) or isinstance(layout.hour_subdivisions, bool)
                or layout.hour_subdivisions < 1):
            raise ValueError(f"Layout.hour_subdivisions must be a positive integer, got {layout.hour_subdivisions!r}")
        if (not isinstance(layout.first_weekday, int) or isinstance(layout.first_weekday, bool)
                or not 0 <= layout.first_weekday <= 6):
            raise ValueError(f"Layout.first_weekday must be 0..6, got {layout.first_weekday!r}")

        # Parse Localization section
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')

        # Parse space-separated day names (if provided)
        day_names = day_names_str.split() if day_names_str else None
        # Parse space-separated month names (if provided)
        month_names = month_names_str.split() if month_names_str else None

        localization = LocalizationConfig(
            day_names=day_names,
            month_names=month_names
        )

        return cls(
            timezone=timezone,
            default_calendar=default_calendar,
            layout=layout,
            localization=localization,
            calendars=calendars
        )


# Colors palette for auto-assignment to calendars
CALENDAR_COLORS = [
    '#4285f4',  # Blue
    '#34a853',  # Green
    '#ea4335',  # Red
    '#fbbc05',  # Yellow
    '#9c27b0',  # Purple
    '#00bcd4',  # Cyan
    '#ff5722',  # Deep Orange
    '#607d8b',  # Blue Grey
    '#e91e63',  # Pink
    '#3f51b5',  # Indigo
]


def get_next_color(used_colors: list[str]) -> str:
    """Get the next available color from the palette."""
    used = [c.lower() for c in used_colors]
    for color in CALENDAR_COLORS:
        if color.lower() not in used:
            return color
    # If all colors are used, cycle back
    return CALENDAR_COLORS[len(used_colors) % len(CALENDAR_COLORS)]
