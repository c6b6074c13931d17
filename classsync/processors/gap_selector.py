# File: classsync/processors/gap_selector.py
"""
Next-gap selection over common free time.

Everything here is a pure function of (free blocks, now); the only state is
the GapCursor, which belongs to the caller.
"""

import datetime
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

from classsync.utils.logger import setup_logger
from classsync.models import Gap, Interval, FreeBlock
from classsync.models.common import minutes_of_day

logger = setup_logger(__name__)


def week_start_for(now: datetime.datetime) -> datetime.date:
    """Monday on or before ``now``."""
    return now.date() - datetime.timedelta(days=now.weekday())


def upcoming_gaps(
    free_blocks: Iterable[Union[Interval, FreeBlock]],
    now: datetime.datetime,
) -> List[Gap]:
    """
    Place free blocks on this week's dates and keep the ones still ahead.

    Today's blocks start no earlier than ``now`` and disappear once they
    have ended; earlier weekdays are dropped. Sorted by date, then by
    effective start.

    Raises:
        TypeError: if ``now`` is not a datetime
    """
    if not isinstance(now, datetime.datetime):
        raise TypeError(f"now must be a datetime, got {type(now).__name__}")

    today_idx = now.weekday()
    now_minutes = minutes_of_day(now)
    week_start = week_start_for(now)

    gaps: List[Gap] = []
    for block in free_blocks:
        if isinstance(block, FreeBlock):
            # Sub-minute blocks vanish once times are truncated to minutes
            if block.end_minutes <= block.start_minutes:
                continue
            interval = block.to_interval()
        else:
            interval = block
        if interval.day < today_idx:
            continue

        is_today = interval.day == today_idx
        effective_start = max(interval.start, now_minutes) if is_today else interval.start
        if effective_start >= interval.end:
            continue

        gaps.append(Gap(
            id=interval.id or f"free-{interval.day}-{interval.start}-{interval.end}",
            day=interval.day,
            date=week_start + datetime.timedelta(days=interval.day),
            start=interval.start,
            end=interval.end,
            effective_start=effective_start,
            is_today=is_today,
        ))

    gaps.sort(key=lambda gap: (gap.date, gap.effective_start))
    return gaps


def select_gap(gaps: Sequence[Gap], index: int = 0) -> Optional[Gap]:
    """Gap at ``index`` clamped into range, or None when there are no gaps."""
    if not gaps:
        return None
    return gaps[max(0, min(index, len(gaps) - 1))]


@dataclass
class GapCursor:
    """Caller-held position in the upcoming-gap list."""
    index: int = 0

    def clamp(self, gaps: Sequence[Gap]) -> int:
        """Cursor index clamped into the range of ``gaps``."""
        if not gaps:
            return 0
        return max(0, min(self.index, len(gaps) - 1))

    def current(self, gaps: Sequence[Gap]) -> Optional[Gap]:
        return select_gap(gaps, self.index)

    def has_previous(self, gaps: Sequence[Gap]) -> bool:
        return bool(gaps) and self.clamp(gaps) > 0

    def has_next(self, gaps: Sequence[Gap]) -> bool:
        return bool(gaps) and self.clamp(gaps) < len(gaps) - 1

    def forward(self, gaps: Sequence[Gap]) -> Optional[Gap]:
        """Step to the next gap, stopping at the last one."""
        self.index = min(self.clamp(gaps) + 1, max(len(gaps) - 1, 0))
        return self.current(gaps)

    def back(self, gaps: Sequence[Gap]) -> Optional[Gap]:
        """Step to the previous gap, stopping at the first one."""
        self.index = max(self.clamp(gaps) - 1, 0)
        return self.current(gaps)

    def reset(self) -> None:
        self.index = 0


def format_friend_list(names: Sequence[str]) -> str:
    """"A", "A and B", "A, B, and C"."""
    if not names:
        return 'no friends'
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def format_gap_status(gap: Optional[Gap], selected_names: Sequence[str]) -> str:
    """Status line shown above the sync grid."""
    if gap is not None:
        return (
            f"Next synced gap with {format_friend_list(selected_names)} "
            f"is {gap.day_label} at {gap.time_label}."
        )
    if selected_names:
        return 'No synced gaps available this week.'
    return 'Select friends to see synced gaps.'
