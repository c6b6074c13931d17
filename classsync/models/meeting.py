# File: classsync/models/meeting.py

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .enums import Weekday, MeetingSource
from .common import clock_to_minutes

CLOCK_PATTERN = re.compile(r"^\d{2}:\d{2}:\d{2}$")


@dataclass
class RawEvent:
    """One VEVENT block as tokenized from an ICS file."""
    dtstart: str
    dtend: str
    summary: Optional[str] = None
    rrule: Optional[str] = None


@dataclass
class ClassMeeting:
    """A recurring weekly class slot: one weekday, one clock range."""
    title: str
    day: int
    start_time: str  # "HH:MM:SS"
    end_time: str    # "HH:MM:SS"
    source: Optional[str] = None
    owner: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        """Validate meeting data."""
        self.day = int(Weekday.coerce(self.day))
        for label, value in (("start", self.start_time), ("end", self.end_time)):
            if not isinstance(value, str) or not CLOCK_PATTERN.match(value):
                raise ValueError(f"Invalid {label} time {value!r} for meeting: {self.title}")
        if self.end_time <= self.start_time:
            raise ValueError(f"Meeting end time must be after start time: {self.title}")

    @property
    def weekday(self) -> Weekday:
        return Weekday(self.day)

    @property
    def start_minutes(self) -> int:
        return clock_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return clock_to_minutes(self.end_time)

    @property
    def is_manual(self) -> bool:
        return MeetingSource.of(self.source) is MeetingSource.MANUAL

    def duration_minutes(self) -> int:
        """Meeting length in minutes."""
        return self.end_minutes - self.start_minutes

    def overlaps_with(self, other: 'ClassMeeting') -> bool:
        """Check if this meeting overlaps another on the same weekday."""
        return (
            self.day == other.day
            and self.start_time < other.end_time
            and self.end_time > other.start_time
        )

    def dedup_key(self) -> Tuple[str, int, str, str]:
        return (self.title, self.day, self.start_time, self.end_time)

    def to_dict(self) -> dict:
        """Row shape expected by the storage collaborator."""
        data = {
            'title': self.title,
            'day': self.day,
            'start_time': self.start_time,
            'end_time': self.end_time,
        }
        if self.source is not None:
            data['source'] = self.source
        if self.owner is not None:
            data['user_id'] = self.owner
        if self.id is not None:
            data['id'] = self.id
        return data
