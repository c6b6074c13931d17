# File: classsync/processors/interval_engine.py
"""
Multi-person interval views.

Works on minute integers: busy overlap between pairs of selected people,
and the free time every selected person shares.
"""

from collections import defaultdict
from typing import Collection, Dict, Iterable, List, Optional, Sequence

from classsync.core.config_manager import Config
from classsync.utils.logger import setup_logger
from classsync.models import ClassMeeting, Interval
from classsync.processors.free_blocks import validate_window

logger = setup_logger(__name__)


def _meeting_key(meeting: ClassMeeting, index: int) -> str:
    return meeting.id if meeting.id is not None else f"{meeting.owner}:{index}"


def select_meetings(meetings: Iterable[ClassMeeting], selected_ids: Collection[str]) -> List[ClassMeeting]:
    """Meetings whose owner is in the selection, in input order."""
    selected = set(selected_ids)
    return [m for m in meetings if m.owner in selected]


def build_overlap_blocks(
    meetings: Sequence[ClassMeeting],
    selected_ids: Collection[str],
    days: Optional[Collection[int]] = None,
) -> List[Interval]:
    """
    Busy time shared by two different selected people.

    Every qualifying pair contributes its own interval; stacked duplicates
    are what the grid uses to show how many people are busy at once, so
    nothing is merged here.
    """
    if days is None:
        days = Config.SYNC_DAYS
    selected = set(selected_ids)
    indexed = [
        (_meeting_key(m, i), m)
        for i, m in enumerate(meetings)
        if m.owner in selected and m.day in days
    ]

    overlaps: List[Interval] = []
    for i in range(len(indexed)):
        key_a, a = indexed[i]
        for j in range(i + 1, len(indexed)):
            key_b, b = indexed[j]
            if a.day != b.day or a.owner == b.owner:
                continue
            start = max(a.start_minutes, b.start_minutes)
            end = min(a.end_minutes, b.end_minutes)
            if end > start:
                overlaps.append(Interval(day=a.day, start=start, end=end, id=f"{key_a}-{key_b}"))

    logger.debug(f"{len(overlaps)} pairwise overlaps across {len(indexed)} selected meetings")
    return overlaps


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Coalesce overlapping or touching intervals of one day into a minimal cover.

    Intervals are assumed to share a day; the merged spans keep that day.
    """
    merged: List[Interval] = []
    for interval in sorted(intervals, key=lambda iv: (iv.start, iv.end)):
        last = merged[-1] if merged else None
        if last is None or interval.start > last.end:
            merged.append(interval)
        elif interval.end > last.end:
            merged[-1] = Interval(day=last.day, start=last.start, end=interval.end, id=last.id)
    return merged


def busy_by_day(
    meetings: Iterable[ClassMeeting],
    window_start: int,
    window_end: int,
) -> Dict[int, List[Interval]]:
    """Meetings clipped to the window and bucketed by day; fully clipped ones are dropped."""
    buckets: Dict[int, List[Interval]] = defaultdict(list)
    for meeting in meetings:
        start = max(window_start, meeting.start_minutes)
        end = min(window_end, meeting.end_minutes)
        if end <= start:
            continue
        buckets[meeting.day].append(Interval(day=meeting.day, start=start, end=end))
    return buckets


def complement(day: int, busy: Sequence[Interval], window_start: int, window_end: int) -> List[Interval]:
    """Free spans of a day given merged, sorted busy spans."""
    free: List[Interval] = []
    cursor = window_start
    for slot in busy:
        if slot.start > cursor:
            free.append(Interval(day=day, start=cursor, end=slot.start, id=f"free-{day}-{cursor}-{slot.start}"))
        cursor = max(cursor, slot.end)
    if cursor < window_end:
        free.append(Interval(day=day, start=cursor, end=window_end, id=f"free-{day}-{cursor}-{window_end}"))
    return free


def compute_common_free(
    meetings: Iterable[ClassMeeting],
    selected_ids: Collection[str],
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    days: Optional[Collection[int]] = None,
) -> List[Interval]:
    """
    Time when every selected person is free, per day.

    An empty selection returns no blocks at all, which is different from
    "everyone is free all day".

    Args:
        meetings: Meetings of everyone on the roster
        selected_ids: Owners to intersect
        start_hour: Window start (default Config.SYNC_START_HOUR)
        end_hour: Window end (default Config.SYNC_END_HOUR)
        days: Weekday indices to cover (default Config.SYNC_DAYS)
    """
    if start_hour is None:
        start_hour = Config.SYNC_START_HOUR
    if end_hour is None:
        end_hour = Config.SYNC_END_HOUR
    validate_window(start_hour, end_hour)
    if days is None:
        days = Config.SYNC_DAYS

    if not selected_ids:
        return []

    window_start, window_end = start_hour * 60, end_hour * 60
    buckets = busy_by_day(select_meetings(meetings, selected_ids), window_start, window_end)

    free: List[Interval] = []
    for day in sorted(days):
        merged = merge_intervals(buckets.get(day, []))
        free.extend(complement(day, merged, window_start, window_end))

    logger.debug(f"{len(free)} common free blocks for {len(selected_ids)} selected people")
    return free
