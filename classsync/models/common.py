# File: classsync/models/common.py
"""
Clock-time helpers shared by the models and processors.

Stored meeting times are zero-padded "HH:MM:SS" strings so that they
compare correctly as plain strings; interval math uses minutes since
midnight.
"""

import re
from datetime import datetime, time
from typing import Optional

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")


def parse_clock(value: Optional[str]) -> Optional[time]:
    """Parse "H:MM" / "HH:MM:SS" into a time, or None if it is not a valid clock time."""
    if not value:
        return None
    match = _CLOCK_RE.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    try:
        return time(hours, minutes, seconds)
    except ValueError:
        return None


def format_clock(value: time) -> str:
    """Zero-padded "HH:MM:SS"."""
    return value.strftime("%H:%M:%S")


def hour_to_clock(hour: int) -> str:
    """Window boundary as a clock string; 24 maps to "24:00:00" so it sorts after every real time."""
    return f"{hour:02d}:00:00"


def clock_to_minutes(value: Optional[str]) -> Optional[int]:
    """Minutes since midnight for a clock string; seconds are truncated."""
    if not value:
        return None
    parts = value.split(':')
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None
    return hours * 60 + minutes


def minutes_to_clock(minutes: int) -> str:
    """Minutes since midnight back to "HH:MM:SS"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}:00"


def format_time(minutes: Optional[int]) -> str:
    """12-hour display label, e.g. 810 -> "1:30 PM"."""
    if minutes is None:
        return ''
    total_hours = minutes // 60
    period = 'PM' if total_hours >= 12 else 'AM'
    display_hour = total_hours % 12 or 12
    return f"{display_hour}:{minutes % 60:02d} {period}"


def minutes_of_day(moment: datetime) -> int:
    """Minutes since midnight of a datetime's wall clock."""
    return moment.hour * 60 + moment.minute
