from .enums import Weekday, MeetingSource
from .common import (
    parse_clock,
    format_clock,
    clock_to_minutes,
    minutes_to_clock,
    format_time,
)
from .meeting import RawEvent, ClassMeeting
from .interval import Interval, FreeBlock
from .person import Person
from .gap import Gap
from .schedule import ScheduleGroup, SyncPlan
from .api import ClassSyncError, ManualEntryError, IcsParseReport
from .utils import meeting_from_row, free_block_from_dict

__all__ = [
    "Weekday",
    "MeetingSource",
    "parse_clock",
    "format_clock",
    "clock_to_minutes",
    "minutes_to_clock",
    "format_time",
    "RawEvent",
    "ClassMeeting",
    "Interval",
    "FreeBlock",
    "Person",
    "Gap",
    "ScheduleGroup",
    "SyncPlan",
    "ClassSyncError",
    "ManualEntryError",
    "IcsParseReport",
    "meeting_from_row",
    "free_block_from_dict",
]
