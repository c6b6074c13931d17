# File: classsync/models/schedule.py

from dataclasses import dataclass, field
from typing import List

from .enums import Weekday, MeetingSource
from .common import format_time
from .meeting import ClassMeeting


@dataclass
class ScheduleGroup:
    """Meetings of one course shown as a single row ("CSE 142, Mon/Wed, 9:00 AM-9:50 AM")."""
    title: str
    start_minutes: int
    end_minutes: int
    source: str = ""
    days: List[int] = field(default_factory=list)

    @property
    def day_label(self) -> str:
        labels = [Weekday(d).label for d in self.days]
        return '/'.join(labels) or 'Day'

    @property
    def time_label(self) -> str:
        return f"{format_time(self.start_minutes)}-{format_time(self.end_minutes)}"

    @property
    def is_manual(self) -> bool:
        return MeetingSource.of(self.source) is MeetingSource.MANUAL

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'days': list(self.days),
            'day_label': self.day_label,
            'time_label': self.time_label,
            'source': self.source,
        }


@dataclass
class SyncPlan:
    """Replace-by-source instructions for the storage collaborator."""
    owner_id: str
    delete_sources: List[str] = field(default_factory=list)
    meetings: List[ClassMeeting] = field(default_factory=list)

    @property
    def insert_rows(self) -> List[dict]:
        return [m.to_dict() for m in self.meetings]

    def is_empty(self) -> bool:
        return not self.meetings
