# File: classsync/models/enums.py

from datetime import date
from enum import Enum, IntEnum


class Weekday(IntEnum):
    """Day of a weekly schedule, Monday first."""
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def label(self) -> str:
        """Short display label ("Mon")."""
        return self.name.capitalize()

    @classmethod
    def from_datetime(cls, d: date) -> 'Weekday':
        """Weekday of a date or datetime."""
        return cls(d.weekday())

    @classmethod
    def coerce(cls, value) -> 'Weekday':
        """Validate an integer-like day index, raising ValueError when out of range."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid weekday: {value!r}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid weekday: {value!r}") from None


class MeetingSource(Enum):
    """Where a stored class meeting came from."""
    ICS = "ics"          # Bulk import, replaced on every re-sync
    MANUAL = "manual"    # Hand-entered, tagged "manual:<key>" per group

    @classmethod
    def of(cls, source) -> 'MeetingSource':
        """Classify a raw source tag. Untagged rows count as imported."""
        if source and str(source).startswith("manual:"):
            return cls.MANUAL
        return cls.ICS
