# File: classsync/models/interval.py

from dataclasses import dataclass

from .enums import Weekday
from .common import clock_to_minutes, minutes_to_clock
from .meeting import CLOCK_PATTERN


@dataclass(frozen=True)
class Interval:
    """Half-open [start, end) span in minutes since midnight on one weekday."""
    day: int
    start: int
    end: int
    id: str = ""

    def __post_init__(self):
        """Validate interval bounds."""
        Weekday.coerce(self.day)
        if self.end <= self.start:
            raise ValueError(f"Interval end must be after start: {self.start}-{self.end} on day {self.day}")

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps_with(self, other: 'Interval') -> bool:
        """Check if two intervals share time on the same weekday."""
        return self.day == other.day and self.start < other.end and self.end > other.start

    def to_dict(self) -> dict:
        return {'id': self.id, 'day': self.day, 'start': self.start, 'end': self.end}


@dataclass
class FreeBlock:
    """Time on one weekday not covered by any of a person's meetings."""
    day: int
    start_time: str  # "HH:MM:SS"
    end_time: str    # "HH:MM:SS"

    def __post_init__(self):
        """Validate block data."""
        self.day = int(Weekday.coerce(self.day))
        if not CLOCK_PATTERN.match(self.start_time) or not CLOCK_PATTERN.match(self.end_time):
            raise ValueError(f"Invalid free block times: {self.start_time}-{self.end_time}")
        if self.end_time <= self.start_time:
            raise ValueError(f"Free block end must be after start: {self.start_time}-{self.end_time}")

    @property
    def start_minutes(self) -> int:
        return clock_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return clock_to_minutes(self.end_time)

    def to_interval(self) -> Interval:
        return Interval(
            day=self.day,
            start=self.start_minutes,
            end=self.end_minutes,
            id=f"free-{self.day}-{self.start_minutes}-{self.end_minutes}",
        )

    def to_dict(self) -> dict:
        """Convert to the row shape used for persistence."""
        return {'day': self.day, 'start_time': self.start_time, 'end_time': self.end_time}

    @classmethod
    def from_interval(cls, interval: Interval) -> 'FreeBlock':
        return cls(
            day=interval.day,
            start_time=minutes_to_clock(interval.start),
            end_time=minutes_to_clock(interval.end),
        )
