# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable ICS text, meetings and roster data for all tests.
"""

import pytest
from datetime import datetime
from pathlib import Path
import sys

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from classsync.models import ClassMeeting, Interval


# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1)


# ==================== ICS Fixtures ====================

@pytest.fixture
def make_vevent():
    """Factory fixture for a single VEVENT block."""
    def _make(summary=None, dtstart="20240101T090000", dtend="20240101T095000", rrule=None, extra=()):
        lines = ["BEGIN:VEVENT", "UID:test-uid@example.com", "DTSTAMP:20231215T120000Z"]
        if dtstart is not None:
            lines.append(f"DTSTART:{dtstart}")
        if dtend is not None:
            lines.append(f"DTEND:{dtend}")
        if summary is not None:
            lines.append(f"SUMMARY:{summary}")
        if rrule is not None:
            lines.append(f"RRULE:{rrule}")
        lines.extend(extra)
        lines.append("END:VEVENT")
        return "\r\n".join(lines)

    return _make


@pytest.fixture
def make_calendar():
    """Factory fixture wrapping VEVENT blocks in a VCALENDAR."""
    def _make(*events):
        header = "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//Test//Schedule Export//EN"
        body = "\r\n".join(events)
        return f"{header}\r\n{body}\r\nEND:VCALENDAR\r\n"

    return _make


@pytest.fixture
def sample_ics(make_vevent, make_calendar):
    """A realistic export: two classes, a recurring section, and noise."""
    return make_calendar(
        make_vevent("CSE 142", "20240101T093000", "20240101T102000"),
        make_vevent("CSE 142", "20240103T093000", "20240103T102000"),
        make_vevent("Study group", "20240102T140000", "20240102T153000", rrule="FREQ=WEEKLY;BYDAY=TU"),
        make_vevent("Homework 3 due", "20240104T230000", "20240104T235900"),
        make_vevent("Winter break", "20240101", "20240102"),
        make_vevent("MATH 124A", "20240105T130000", "20240105T142000"),
    )


# ==================== Meeting Fixtures ====================

@pytest.fixture
def create_meeting():
    """Factory fixture for class meetings."""
    counter = {'n': 0}

    def _create(day=0, start="09:00:00", end="10:00:00", owner="alice", title="CSE 142", source="ics"):
        counter['n'] += 1
        return ClassMeeting(
            title=title,
            day=day,
            start_time=start,
            end_time=end,
            source=source,
            owner=owner,
            id=f"m{counter['n']}",
        )

    return _create


@pytest.fixture
def overlapping_monday(create_meeting):
    """Alice 9:00-10:30 and Bob 10:00-11:00 on Monday."""
    return [
        create_meeting(day=0, start="09:00:00", end="10:30:00", owner="alice"),
        create_meeting(day=0, start="10:00:00", end="11:00:00", owner="bob", title="MATH 124"),
    ]


# ==================== Roster / Row Fixtures ====================

@pytest.fixture
def roster():
    """Selectable people as profile rows."""
    return [
        {'id': 'alice', 'full_name': 'Alice Kim'},
        {'id': 'bob', 'username': 'bobby'},
        {'id': 'cara', 'full_name': 'Cara Diaz'},
    ]


@pytest.fixture
def class_rows():
    """Stored class rows as fetched from the backend."""
    return [
        {'id': 1, 'user_id': 'alice', 'title': 'CSE 142', 'day': 0, 'start_time': '09:00:00', 'end_time': '11:00:00', 'source': 'ics'},
        {'id': 2, 'user_id': 'alice', 'title': 'CSE 142', 'day': 2, 'start_time': '09:00:00', 'end_time': '11:00:00', 'source': 'ics'},
        {'id': 3, 'user_id': 'bob', 'title': 'MATH 124', 'day': 0, 'start_time': '10:00:00', 'end_time': '12:00:00', 'source': 'ics'},
        {'id': 4, 'user_id': 'bob', 'title': 'Gym', 'day': 2, 'start_time': '13:00', 'end_time': '14:00', 'source': 'manual:gym'},
        {'id': 5, 'user_id': 'cara', 'title': 'BIO 180', 'day': 1, 'start_time': '08:30:00', 'end_time': '09:20:00', 'source': 'ics'},
        {'id': 6, 'user_id': 'alice', 'title': 'Brunch', 'day': 5, 'start_time': '11:00:00', 'end_time': '12:00:00', 'source': 'manual:x'},
    ]


@pytest.fixture
def free_intervals():
    """Common free blocks: Mon 09:00-11:00, Wed 13:00-15:00."""
    return [
        Interval(day=0, start=9 * 60, end=11 * 60, id="free-0-540-660"),
        Interval(day=2, start=13 * 60, end=15 * 60, id="free-2-780-900"),
    ]


@pytest.fixture
def monday():
    return MONDAY


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
