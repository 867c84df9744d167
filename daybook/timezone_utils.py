"""
Local clock for Daybook.

Events carry naive local times; there is a single implicit local clock.
This module only answers "what is the local date/time now" for views and
factories that default to the present.
"""

from datetime import datetime, date
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "Europe/Amsterdam"


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured local timezone,
        or UTC if the configured name is unknown.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def local_now() -> datetime:
    """
    Get the current local wall-clock time as a naive datetime.

    Naive because event records hold naive local times.
    """
    return datetime.now(pytz.UTC).astimezone(get_local_timezone()).replace(tzinfo=None)


def local_today() -> date:
    """Get the current local date."""
    return local_now().date()
