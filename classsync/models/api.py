# File: classsync/models/api.py
"""
Result and error types returned to collaborators.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .meeting import ClassMeeting


class ClassSyncError(Exception):
    """Base error for caller-facing failures."""


class ManualEntryError(ClassSyncError):
    """A hand-entered schedule item failed validation. The message is user-facing."""


@dataclass
class IcsParseReport:
    """What a parse produced and why events were left out."""
    meetings: List[ClassMeeting] = field(default_factory=list)
    blocks_seen: int = 0
    duplicates: int = 0
    rejections: Counter = field(default_factory=Counter)

    @property
    def accepted(self) -> int:
        return len(self.meetings)

    @property
    def rejected(self) -> int:
        return sum(self.rejections.values())

    def is_empty(self) -> bool:
        """True when nothing class-like was found; the UI asks for a re-export."""
        return not self.meetings

    def __str__(self) -> str:
        reasons = ", ".join(f"{reason}={count}" for reason, count in sorted(self.rejections.items()))
        return (
            f"{self.accepted} classes from {self.blocks_seen} events "
            f"({self.duplicates} duplicates; rejected: {reasons or 'none'})"
        )
