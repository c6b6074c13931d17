# File: classsync/processors/free_blocks.py
"""
Free-time derivation for a single person's weekly schedule.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from classsync.core.config_manager import Config
from classsync.utils.logger import setup_logger
from classsync.models import ClassMeeting, FreeBlock, Weekday
from classsync.models.common import hour_to_clock

logger = setup_logger(__name__)


def validate_window(start_hour: int, end_hour: int) -> None:
    """Raise ValueError for a day window that cannot hold any time."""
    if not (0 <= start_hour < end_hour <= 24):
        raise ValueError(f"Invalid day window: {start_hour}-{end_hour}")


def group_by_day(meetings: Iterable[ClassMeeting]) -> Dict[int, List[ClassMeeting]]:
    """Bucket meetings by weekday index."""
    by_day: Dict[int, List[ClassMeeting]] = defaultdict(list)
    for meeting in meetings:
        by_day[meeting.day].append(meeting)
    return by_day


def compute_free_blocks(
    meetings: Iterable[ClassMeeting],
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
) -> List[FreeBlock]:
    """
    Complement of a person's meetings inside the day window, for all seven days.

    Overlapping meetings are absorbed by only ever moving the cursor forward,
    so the result is the same as merging first. Clock strings are fixed-width
    "HH:MM:SS" and are compared as strings.

    Args:
        meetings: The person's class meetings
        start_hour: Window start (default Config.DAY_START_HOUR)
        end_hour: Window end (default Config.DAY_END_HOUR)

    Returns:
        Free blocks ordered by day, then time
    """
    if start_hour is None:
        start_hour = Config.DAY_START_HOUR
    if end_hour is None:
        end_hour = Config.DAY_END_HOUR
    validate_window(start_hour, end_hour)

    window_start = hour_to_clock(start_hour)
    window_end = hour_to_clock(end_hour)
    by_day = group_by_day(meetings)

    free: List[FreeBlock] = []
    for day in Weekday:
        cursor = window_start
        for meeting in sorted(by_day.get(day, []), key=lambda m: m.start_time):
            if cursor >= window_end:
                break
            if meeting.start_time > cursor:
                free.append(FreeBlock(day=day, start_time=cursor, end_time=min(meeting.start_time, window_end)))
            cursor = max(cursor, meeting.end_time)

        if cursor < window_end:
            free.append(FreeBlock(day=day, start_time=cursor, end_time=window_end))

    logger.debug(f"Derived {len(free)} free blocks in window {window_start}-{window_end}")
    return free
