# File: tests/integration/test_orchestrator.py
"""
Integration tests for the SyncOrchestrator.
Tests the full workflow from stored rows and ICS imports to the gap status line.
"""

import datetime

import pytest

from classsync.core.orchestrator import SyncOrchestrator
from classsync.models import Person


pytestmark = pytest.mark.integration


@pytest.fixture
def orchestrator(roster, class_rows):
    return SyncOrchestrator(roster, class_rows, viewer_id="alice")


@pytest.fixture
def monday_morning(monday):
    return monday.replace(hour=10)


# ==================== Setup ====================

class TestOrchestratorSetup:
    """Tests for roster and row loading."""

    def test_everyone_selected_initially(self, orchestrator):
        assert orchestrator.selected_ids == ["alice", "bob", "cara"]
        assert orchestrator.all_selected is True

    def test_sync_view_excludes_weekend_rows(self, orchestrator):
        assert len(orchestrator.meetings) == 5
        assert all(m.day <= 4 for m in orchestrator.meetings)

    def test_meetings_attached_to_people(self, orchestrator):
        bob = next(p for p in orchestrator.people if p.id == "bob")

        assert bob.display_name == "bobby"
        assert sorted(m.title for m in bob.meetings) == ["Gym", "MATH 124"]

    def test_hidden_owners_are_excluded(self, roster, class_rows):
        orchestrator = SyncOrchestrator(roster, class_rows, viewer_id="alice", hidden_owners={"bob", "alice"})

        assert [p.id for p in orchestrator.people] == ["alice", "cara"]
        assert all(m.owner != "bob" for m in orchestrator.meetings)

    def test_duplicate_roster_entries_collapse(self, class_rows):
        roster = [Person("alice", "Alice Kim"), {'id': 'alice', 'full_name': 'Alice again'}]

        orchestrator = SyncOrchestrator(roster, class_rows)

        assert [p.display_name for p in orchestrator.people] == ["Alice Kim"]

    def test_weekend_rows_count_for_personal_free_blocks(self, orchestrator):
        blocks = orchestrator.free_blocks_for("alice")

        assert [(b.start_time, b.end_time) for b in blocks if b.day == 5] == [
            ("08:00:00", "11:00:00"),
            ("12:00:00", "20:00:00"),
        ]

    def test_personal_free_blocks(self, orchestrator):
        blocks = orchestrator.free_blocks_for("cara")

        assert [(b.start_time, b.end_time) for b in blocks if b.day == 1] == [
            ("08:00:00", "08:30:00"),
            ("09:20:00", "20:00:00"),
        ]


# ==================== Sync View ====================

class TestSnapshot:
    """Tests for the sync grid snapshot."""

    def test_overlaps_between_people(self, orchestrator, monday_morning):
        snapshot = orchestrator.snapshot(monday_morning)

        assert [(iv.day, iv.start, iv.end, iv.id) for iv in snapshot.overlaps] == [(0, 600, 660, "1-3")]

    def test_common_free_time_on_monday(self, orchestrator, monday_morning):
        snapshot = orchestrator.snapshot(monday_morning)

        assert [(iv.start, iv.end) for iv in snapshot.free_blocks if iv.day == 0] == [(420, 540), (720, 1380)]

    def test_status_names_everyone(self, orchestrator, monday_morning):
        snapshot = orchestrator.snapshot(monday_morning)

        assert snapshot.current_gap.is_today is True
        assert snapshot.status_text == (
            "Next synced gap with Alice Kim, bobby, and Cara Diaz is today at 12:00 PM."
        )

    def test_snapshot_is_pure(self, orchestrator, monday_morning):
        assert orchestrator.snapshot(monday_morning) == orchestrator.snapshot(monday_morning)

    def test_next_and_previous_gap(self, orchestrator, monday_morning):
        snapshot = orchestrator.next_gap(monday_morning)

        assert snapshot.gap_index == 1
        assert snapshot.status_text.endswith("is Tue at 7:00 AM.")
        assert snapshot.has_previous_gap is True

        snapshot = orchestrator.previous_gap(monday_morning)

        assert snapshot.gap_index == 0
        assert snapshot.has_previous_gap is False

    def test_friday_evening_runs_out_of_gaps(self, orchestrator, monday):
        late_friday = monday + datetime.timedelta(days=4, hours=23)

        snapshot = orchestrator.snapshot(late_friday)

        assert snapshot.gaps == []
        assert snapshot.status_text == "No synced gaps available this week."


# ==================== Selection ====================

class TestSelection:
    """Tests for toggling people in and out of the sync view."""

    def test_toggle_resets_cursor(self, orchestrator, monday_morning):
        orchestrator.next_gap(monday_morning)

        orchestrator.toggle("cara")
        snapshot = orchestrator.snapshot(monday_morning)

        assert snapshot.selected_ids == ["alice", "bob"]
        assert snapshot.gap_index == 0

    def test_last_person_cannot_be_deselected(self, orchestrator):
        orchestrator.set_selection(["alice"])

        assert orchestrator.toggle("alice") == ["alice"]

    def test_toggle_unknown_person_raises(self, orchestrator):
        with pytest.raises(KeyError):
            orchestrator.toggle("zed")

    def test_toggle_all_clears_then_selects(self, orchestrator, monday_morning):
        assert orchestrator.toggle_all() == []

        snapshot = orchestrator.snapshot(monday_morning)
        assert snapshot.overlaps == []
        assert snapshot.free_blocks == []
        assert snapshot.status_text == "Select friends to see synced gaps."

        assert orchestrator.toggle_all() == ["alice", "bob", "cara"]

    def test_set_selection_ignores_unknown_ids(self, orchestrator):
        assert orchestrator.set_selection(["cara", "zed", "cara"]) == ["cara"]


# ==================== ICS Import ====================

class TestImportIcs:
    """Tests for replacing a person's imported schedule."""

    def test_import_replaces_imported_rows_only(self, roster, class_rows, sample_ics):
        rows = class_rows + [{
            'id': 7, 'user_id': 'alice', 'title': 'Gym', 'day': 3,
            'start_time': '07:00', 'end_time': '08:00', 'source': 'manual:g2',
        }]
        orchestrator = SyncOrchestrator(roster, rows, viewer_id="alice")

        plan = orchestrator.import_ics("alice", sample_ics)

        assert plan.delete_sources == ["ics"]
        assert len(plan.insert_rows) == 4
        assert all(row['user_id'] == "alice" and row['source'] == "ics" for row in plan.insert_rows)

        alice = next(p for p in orchestrator.people if p.id == "alice")
        assert sorted(m.title for m in alice.meetings) == ["Brunch", "CSE 142", "CSE 142", "Gym", "MATH 124A", "Study group"]
        assert any(m.owner == "bob" for m in orchestrator.meetings)
        assert orchestrator.last_import_report.rejections["blocklist"] == 1

    def test_empty_import_keeps_schedule(self, orchestrator, make_calendar):
        plan = orchestrator.import_ics("alice", make_calendar())

        assert plan.is_empty()
        assert orchestrator.last_import_report.is_empty()
        alice = next(p for p in orchestrator.people if p.id == "alice")
        assert len(alice.meetings) == 3

    def test_imported_weekend_class_blocks_personal_time(self, orchestrator, make_vevent, make_calendar):
        ics = make_calendar(make_vevent("CSE 142", "20240106T090000", "20240106T095000"))

        orchestrator.import_ics("cara", ics)

        blocks = orchestrator.free_blocks_for("cara")
        assert [(b.start_time, b.end_time) for b in blocks if b.day == 5] == [
            ("08:00:00", "09:00:00"),
            ("09:50:00", "20:00:00"),
        ]
        assert all(m.day <= 4 for m in orchestrator.meetings)

    def test_import_resets_cursor(self, orchestrator, sample_ics, monday_morning):
        orchestrator.next_gap(monday_morning)

        orchestrator.import_ics("alice", sample_ics)

        assert orchestrator.cursor.index == 0
