# File: classsync/processors/schedule_processor.py
"""
Schedule processing module.
Maps storage rows into typed meetings, validates manual entries, and
prepares replace-by-source sync plans for the storage collaborator.
"""

import re
import uuid
from collections import OrderedDict
from typing import Collection, Dict, Iterable, List, Optional, Tuple

from classsync.core.config_manager import Config
from classsync.utils.logger import setup_logger
from classsync.models import (
    ClassMeeting,
    ManualEntryError,
    MeetingSource,
    ScheduleGroup,
    SyncPlan,
    meeting_from_row,
)

logger = setup_logger(__name__)

_COURSE_TITLE_RE = re.compile(r"[A-Z]{1,4}(?:\s+[A-Z]{1,4})?\s+\d{3}[A-Z]?", re.IGNORECASE)


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    Parse a hand-typed time into "HH:MM:SS".

    Accepts 530, 0530, 5:30, 05:30, 5, 5pm, 5:30pm, 530pm, 17:30 and
    optional seconds. Returns None for anything else.
    """
    if not value:
        return None
    cleaned = re.sub(r"\s+", "", value.lower()).replace('.', '')
    suffix = None
    if cleaned.endswith(('am', 'pm')):
        suffix, cleaned = cleaned[-2:], cleaned[:-2]

    if re.match(r"^\d{1,2}:\d{1,2}(:\d{1,2})?$", cleaned):
        parts = cleaned.split(':')
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = int(parts[2]) if len(parts) > 2 else 0
    elif re.match(r"^\d{3,4}$", cleaned):
        hours, minutes, seconds = int(cleaned[:-2]), int(cleaned[-2:]), 0
    elif re.match(r"^\d{1,2}$", cleaned):
        hours, minutes, seconds = int(cleaned), 0, 0
    else:
        return None

    if minutes > 59 or seconds > 59:
        return None

    if suffix:
        if hours < 1 or hours > 12:
            return None
        if suffix == 'pm' and hours < 12:
            hours += 12
        if suffix == 'am' and hours == 12:
            hours = 0

    if hours > 23:
        return None
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def normalize_title(title: Optional[str]) -> str:
    """
    Display title for grouping: the course code if one is present.

    "cse  142: Lecture A" -> "CSE 142"; "Study group" stays as is.
    """
    cleaned = re.sub(r"\s+", " ", (title or '').strip())
    without_suffix = cleaned.split(':')[0].strip()
    match = _COURSE_TITLE_RE.search(without_suffix)
    if match:
        return re.sub(r"\s+", " ", match.group(0).upper())
    return without_suffix or cleaned


def new_manual_source() -> str:
    """Fresh group key shared by all days of one manual entry."""
    return f"{Config.MANUAL_SOURCE_PREFIX}{uuid.uuid4().hex}"


class ScheduleProcessor:
    """Prepares stored schedule data for the interval engine and for storage."""

    def __init__(self):
        self.logger = setup_logger(__name__)

    # ------------------------------------------------------------------
    # Storage rows -> meetings
    # ------------------------------------------------------------------

    def load_rows(
        self,
        rows: Iterable[dict],
        hidden_owners: Optional[Collection[str]] = None,
        viewer_id: Optional[str] = None,
        days: Optional[Collection[int]] = None,
        keep_sources: bool = False,
    ) -> List[ClassMeeting]:
        """
        Map fetched rows into meetings for the multi-person views.

        Rows with unusable times, rows outside ``days`` and rows owned by
        someone hiding their schedule are dropped. The viewer never hides
        from themselves. Exact repeats collapse to the first occurrence;
        with ``keep_sources`` the source tag is part of that identity.
        """
        if days is None:
            days = Config.SYNC_DAYS
        hidden = set(hidden_owners or ())
        hidden.discard(viewer_id)

        meetings: List[ClassMeeting] = []
        seen = set()
        skipped = 0
        for row in rows:
            meeting = meeting_from_row(row)
            if meeting is None:
                skipped += 1
                continue
            if meeting.day not in days or meeting.owner in hidden:
                continue
            key = (meeting.owner, meeting.title, meeting.day, meeting.start_minutes, meeting.end_minutes)
            if keep_sources:
                key += (meeting.source or '',)
            if key in seen:
                continue
            seen.add(key)
            meetings.append(meeting)

        if skipped:
            self.logger.warning(f"Skipped {skipped} schedule rows with unusable day or times")
        self.logger.debug(f"Loaded {len(meetings)} meetings")
        return meetings

    # ------------------------------------------------------------------
    # Manual entries
    # ------------------------------------------------------------------

    def build_manual_meetings(
        self,
        title: str,
        days: Iterable[int],
        start: str,
        end: str,
        source: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> List[ClassMeeting]:
        """
        Validate a hand-entered item and expand it to one meeting per day.

        All meetings share one ``manual:`` source so the group can be edited
        or removed as a unit.

        Raises:
            ManualEntryError: with a message suitable for the form
        """
        day_list = sorted(set(int(d) for d in days))
        if not day_list:
            raise ManualEntryError('Select at least one day.')
        if any(d < 0 or d > 6 for d in day_list):
            raise ManualEntryError('Select valid days.')

        clean_title = (title or '').strip()
        if not clean_title:
            raise ManualEntryError('Add a title.')

        start_time = normalize_time(start)
        end_time = normalize_time(end)
        if not start_time or not end_time:
            raise ManualEntryError('Enter a time like 530pm, 5:30pm, or 17:30.')
        if end_time <= start_time:
            raise ManualEntryError('End time must be after start time.')

        if source is not None and MeetingSource.of(source) is not MeetingSource.MANUAL:
            raise ValueError(f"Not a manual source key: {source!r}")
        group_source = source or new_manual_source()

        return [
            ClassMeeting(
                title=clean_title,
                day=day,
                start_time=start_time,
                end_time=end_time,
                source=group_source,
                owner=owner,
            )
            for day in day_list
        ]

    def replace_manual_group(
        self,
        existing: Iterable[ClassMeeting],
        owner_id: str,
        source: str,
        replacement: Iterable[ClassMeeting] = (),
    ) -> List[ClassMeeting]:
        """Drop every meeting of one manual group and append its replacement (if any)."""
        kept = [m for m in existing if not (m.owner == owner_id and m.source == source)]
        return kept + list(replacement)

    # ------------------------------------------------------------------
    # ICS re-sync
    # ------------------------------------------------------------------

    def build_sync_plan(self, owner_id: str, meetings: Iterable[ClassMeeting]) -> SyncPlan:
        """
        Replace-all-by-owner plan for freshly imported meetings.

        Previous imported rows (tagged or untagged) are deleted; manual
        groups are left alone.
        """
        imported = [
            ClassMeeting(
                title=m.title,
                day=m.day,
                start_time=m.start_time,
                end_time=m.end_time,
                source=Config.ICS_SOURCE,
                owner=owner_id,
            )
            for m in meetings
        ]
        plan = SyncPlan(owner_id=owner_id, delete_sources=[Config.ICS_SOURCE], meetings=imported)
        self.logger.info(f"Sync plan for {owner_id}: replace imported rows with {len(imported)} meetings")
        return plan

    def apply_sync_plan(self, existing: Iterable[ClassMeeting], plan: SyncPlan) -> List[ClassMeeting]:
        """What the owner's stored schedule looks like once the plan has run."""
        def _deleted(meeting: ClassMeeting) -> bool:
            if meeting.owner != plan.owner_id:
                return False
            tag = meeting.source or Config.ICS_SOURCE
            return tag in plan.delete_sources

        return [m for m in existing if not _deleted(m)] + list(plan.meetings)

    # ------------------------------------------------------------------
    # Display grouping
    # ------------------------------------------------------------------

    def group_schedule(self, meetings: Iterable[ClassMeeting]) -> List[ScheduleGroup]:
        """Collapse per-day meetings of one course and time into a single row."""
        groups: "OrderedDict[Tuple[str, int, int, str], ScheduleGroup]" = OrderedDict()
        for meeting in meetings:
            title = normalize_title(meeting.title) or meeting.title
            source = meeting.source or ''
            key = (title, meeting.start_minutes, meeting.end_minutes, source)
            if key not in groups:
                groups[key] = ScheduleGroup(
                    title=title,
                    start_minutes=meeting.start_minutes,
                    end_minutes=meeting.end_minutes,
                    source=source,
                )
            groups[key].days.append(meeting.day)

        for group in groups.values():
            group.days = sorted(set(group.days))
        return list(groups.values())

    def manual_groups_by_source(self, groups: Iterable[ScheduleGroup]) -> Dict[str, ScheduleGroup]:
        """Manual groups keyed by their source, for the edit sheet."""
        return {g.source: g for g in groups if g.is_manual}
