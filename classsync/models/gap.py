# File: classsync/models/gap.py

from dataclasses import dataclass
from datetime import date

from .enums import Weekday
from .common import format_time


@dataclass(frozen=True)
class Gap:
    """A common free interval placed on a concrete date of the current week."""
    id: str
    day: int
    date: date
    start: int
    end: int
    effective_start: int  # start clipped to "now" for today's gaps
    is_today: bool = False

    @property
    def day_label(self) -> str:
        """"today" or the short weekday name."""
        if self.is_today:
            return "today"
        return Weekday(self.day).label

    @property
    def time_label(self) -> str:
        return format_time(self.effective_start)

    @property
    def remaining_minutes(self) -> int:
        return self.end - self.effective_start

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'day': self.day,
            'date': self.date.isoformat(),
            'start': self.start,
            'end': self.end,
            'effective_start': self.effective_start,
            'is_today': self.is_today,
            'day_label': self.day_label,
            'time_label': self.time_label,
        }
