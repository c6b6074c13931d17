# File: classsync/models/person.py

from dataclasses import dataclass, field
from typing import List

from .meeting import ClassMeeting


@dataclass
class Person:
    """A selectable roster entry and the meetings loaded for them."""
    id: str
    display_name: str
    meetings: List[ClassMeeting] = field(default_factory=list)

    def __post_init__(self):
        if not self.display_name:
            self.display_name = "Unknown"

    @classmethod
    def from_profile(cls, profile: dict) -> 'Person':
        """Build from a profile row, falling back from full name to username."""
        name = (
            profile.get('display_name')
            or profile.get('full_name')
            or profile.get('username')
            or profile.get('name')
            or ''
        )
        return cls(id=str(profile['id']), display_name=str(name).strip())
