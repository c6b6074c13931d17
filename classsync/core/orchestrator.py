# File: classsync/core/orchestrator.py
"""
Main orchestrator module for ClassSync.
Coordinates the schedule engine components behind one facade for the
sync screen: selection state, overlap/free-time views and the gap cursor.

The orchestrator never fetches anything itself; collaborators hand it
rows and a roster, and persist the SyncPlans it returns.
"""

import datetime
from dataclasses import dataclass, field
from typing import Collection, Iterable, List, Optional, Union

from classsync.core.config_manager import Config
from classsync.utils.logger import setup_logger
from classsync.models import ClassMeeting, FreeBlock, Gap, IcsParseReport, Interval, Person, SyncPlan
from classsync.processors.ics_parser import IcsParser
from classsync.processors.free_blocks import compute_free_blocks
from classsync.processors.interval_engine import build_overlap_blocks, compute_common_free
from classsync.processors.gap_selector import GapCursor, upcoming_gaps, format_gap_status
from classsync.processors.schedule_processor import ScheduleProcessor

logger = setup_logger(__name__)


@dataclass
class SyncSnapshot:
    """Everything the sync grid and status line need for one render."""
    selected_ids: List[str]
    selected_names: List[str]
    overlaps: List[Interval] = field(default_factory=list)
    free_blocks: List[Interval] = field(default_factory=list)
    gaps: List[Gap] = field(default_factory=list)
    current_gap: Optional[Gap] = None
    gap_index: int = 0
    has_previous_gap: bool = False
    has_next_gap: bool = False
    status_text: str = ""


class SyncOrchestrator:
    """
    Facade over the schedule engine for one viewer.

    Holds the roster, the loaded meetings, the current selection and the
    gap cursor. Changing the selection or the data resets the cursor.
    """

    def __init__(
        self,
        roster: Iterable[Union[Person, dict]],
        rows: Iterable[dict] = (),
        viewer_id: Optional[str] = None,
        hidden_owners: Optional[Collection[str]] = None,
        timezone: str = Config.TARGET_TIMEZONE,
    ):
        """
        Initialize the orchestrator.

        Args:
            roster: People that can be selected (Person objects or profile dicts)
            rows: Stored class rows for everyone on the roster
            viewer_id: The signed-in person; never hidden from themselves
            hidden_owners: People whose schedules the viewer may not see
            timezone: Local timezone for ICS imports
        """
        self.viewer_id = viewer_id
        self.hidden_owners = set(hidden_owners or ())
        self.hidden_owners.discard(viewer_id)

        self.processor = ScheduleProcessor()
        self.parser = IcsParser(timezone)
        self.cursor = GapCursor()
        self.last_import_report: Optional[IcsParseReport] = None

        self.people: List[Person] = []
        seen = set()
        for entry in roster:
            person = entry if isinstance(entry, Person) else Person.from_profile(entry)
            if person.id in seen:
                continue
            if person.id in self.hidden_owners:
                continue
            seen.add(person.id)
            self.people.append(person)

        self.all_meetings: List[ClassMeeting] = []
        self.meetings: List[ClassMeeting] = []
        self.selected_ids: List[str] = [p.id for p in self.people]
        self.load_rows(rows)

        logger.info(f"Orchestrator initialized with {len(self.people)} people, {len(self.meetings)} meetings")

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def load_rows(self, rows: Iterable[dict]) -> None:
        """Replace the loaded meetings with freshly fetched rows."""
        self.all_meetings = self.processor.load_rows(
            rows,
            hidden_owners=self.hidden_owners,
            viewer_id=self.viewer_id,
            days=range(7),
        )
        self._attach_meetings()
        self.cursor.reset()

    def import_ics(self, owner_id: str, ics_text: str) -> SyncPlan:
        """
        Parse an ICS export for one person and apply it locally.

        Returns:
            The SyncPlan the storage collaborator should execute. An empty
            plan means nothing class-like was found and the user should
            re-export.
        """
        report = self.parser.parse(ics_text)
        self.last_import_report = report
        if report.is_empty():
            logger.warning(f"No classes found in ICS import for {owner_id}; existing schedule kept")
            return SyncPlan(owner_id=owner_id)

        plan = self.processor.build_sync_plan(owner_id, report.meetings)
        self.all_meetings = self.processor.apply_sync_plan(self.all_meetings, plan)
        self._attach_meetings()
        self.cursor.reset()
        return plan

    def _attach_meetings(self) -> None:
        # People keep their whole week; the multi-person views only see sync days
        self.meetings = [m for m in self.all_meetings if m.day in Config.SYNC_DAYS]
        for person in self.people:
            person.meetings = [m for m in self.all_meetings if m.owner == person.id]

    def free_blocks_for(self, person_id: str) -> List[FreeBlock]:
        """Personal free blocks in the profile window, for all seven days."""
        person = self._person(person_id)
        meetings = person.meetings if person else []
        return compute_free_blocks(meetings, *Config.day_window())

    def _person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self.people if p.id == person_id), None)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def all_selected(self) -> bool:
        return bool(self.people) and len(self.selected_ids) == len(self.people)

    def toggle(self, person_id: str) -> List[str]:
        """Toggle one person. The last selected person cannot be deselected this way."""
        if person_id in self.selected_ids:
            remaining = [pid for pid in self.selected_ids if pid != person_id]
            if not remaining:
                return list(self.selected_ids)
            self.selected_ids = remaining
        elif self._person(person_id) is not None:
            self.selected_ids = self.selected_ids + [person_id]
        else:
            raise KeyError(f"Unknown person: {person_id}")
        self.cursor.reset()
        return list(self.selected_ids)

    def toggle_all(self) -> List[str]:
        """Select everyone, or clear the selection when everyone is already selected."""
        self.selected_ids = [] if self.all_selected else [p.id for p in self.people]
        self.cursor.reset()
        return list(self.selected_ids)

    def set_selection(self, person_ids: Iterable[str]) -> List[str]:
        known = {p.id for p in self.people}
        self.selected_ids = [pid for pid in dict.fromkeys(person_ids) if pid in known]
        self.cursor.reset()
        return list(self.selected_ids)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self, now: datetime.datetime) -> SyncSnapshot:
        """
        Compute the sync view for ``now``.

        Pure with respect to (meetings, selection, now); the cursor is only
        read, never moved.
        """
        selected_names = [p.display_name for p in self.people if p.id in self.selected_ids]
        overlaps = build_overlap_blocks(self.meetings, self.selected_ids)
        free = compute_common_free(self.meetings, self.selected_ids)
        gaps = upcoming_gaps(free, now)
        current = self.cursor.current(gaps)

        return SyncSnapshot(
            selected_ids=list(self.selected_ids),
            selected_names=selected_names,
            overlaps=overlaps,
            free_blocks=free,
            gaps=gaps,
            current_gap=current,
            gap_index=self.cursor.clamp(gaps),
            has_previous_gap=self.cursor.has_previous(gaps),
            has_next_gap=self.cursor.has_next(gaps),
            status_text=format_gap_status(current, selected_names),
        )

    def next_gap(self, now: datetime.datetime) -> SyncSnapshot:
        gaps = upcoming_gaps(compute_common_free(self.meetings, self.selected_ids), now)
        self.cursor.forward(gaps)
        return self.snapshot(now)

    def previous_gap(self, now: datetime.datetime) -> SyncSnapshot:
        gaps = upcoming_gaps(compute_common_free(self.meetings, self.selected_ids), now)
        self.cursor.back(gaps)
        return self.snapshot(now)
