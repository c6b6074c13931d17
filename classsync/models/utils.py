# File: classsync/models/utils.py
"""
Utility functions for ClassSync models.
"""

from typing import Optional

from .common import parse_clock, format_clock
from .meeting import ClassMeeting
from .interval import FreeBlock


def meeting_from_row(row: dict) -> Optional[ClassMeeting]:
    """
    Create a ClassMeeting from a storage row.

    Accepts either ``user_id`` or ``owner`` for the owning person. Returns
    None when the day or times cannot be used, so callers can skip the row.
    """
    start = parse_clock(str(row.get('start_time') or ''))
    end = parse_clock(str(row.get('end_time') or ''))
    if start is None or end is None:
        return None

    owner = row.get('user_id', row.get('owner'))
    row_id = row.get('id')
    try:
        return ClassMeeting(
            title=str(row.get('title') or 'Class').strip(),
            day=row.get('day'),
            start_time=format_clock(start),
            end_time=format_clock(end),
            source=row.get('source') or None,
            owner=str(owner) if owner is not None else None,
            id=str(row_id) if row_id is not None else None,
        )
    except ValueError:
        return None


def free_block_from_dict(data: dict) -> FreeBlock:
    """Create FreeBlock from a persisted row."""
    return FreeBlock(
        day=int(data['day']),
        start_time=str(data['start_time']),
        end_time=str(data['end_time']),
    )
