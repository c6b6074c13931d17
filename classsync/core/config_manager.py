# File: classsync/core/config_manager.py
"""
Centralized configuration management for ClassSync.
Loads settings from environment variables.
"""

import os
import re
from typing import List, Tuple

import pytz
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


class Config:
    """Application configuration singleton."""

    # Application Settings
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "UTC")

    # Personal schedule window (free-block derivation, profile view)
    DAY_START_HOUR = _int_env("CLASSSYNC_DAY_START_HOUR", 8)
    DAY_END_HOUR = _int_env("CLASSSYNC_DAY_END_HOUR", 20)

    # Multi-person window (overlap / common free time view)
    SYNC_START_HOUR = _int_env("CLASSSYNC_SYNC_START_HOUR", 7)
    SYNC_END_HOUR = _int_env("CLASSSYNC_SYNC_END_HOUR", 23)

    # Mon-Fri; weekend rows are dropped from the multi-person views
    SYNC_DAYS: Tuple[int, ...] = (0, 1, 2, 3, 4)

    # ICS class-likeness heuristic
    MIN_CLASS_MINUTES = 30
    MAX_CLASS_MINUTES = 240
    CLASS_BLOCKLIST: List[str] = [
        'assignment',
        'homework',
        'quiz',
        'exam',
        'midterm',
        'final',
        'due',
        'submission',
        'reading',
        'project',
        'grade',
        'office hours',
    ]
    COURSE_CODE_PATTERN = re.compile(r"\b[A-Z]{2,5}\s?\d{3}[A-Z]?\b", re.IGNORECASE)
    DEFAULT_CLASS_TITLE = "Class"

    # Source tags on stored meetings
    ICS_SOURCE = "ics"
    MANUAL_SOURCE_PREFIX = "manual:"

    @classmethod
    def day_window(cls) -> Tuple[int, int]:
        """Personal free-block window as (start_hour, end_hour)."""
        return cls.DAY_START_HOUR, cls.DAY_END_HOUR

    @classmethod
    def sync_window(cls) -> Tuple[int, int]:
        """Multi-person window as (start_hour, end_hour)."""
        return cls.SYNC_START_HOUR, cls.SYNC_END_HOUR

    @classmethod
    def validate(cls) -> bool:
        """Validate that the configured values are usable."""
        errors = []

        if cls.TARGET_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"Unknown timezone: {cls.TARGET_TIMEZONE}")

        for label, (start, end) in (("day", cls.day_window()), ("sync", cls.sync_window())):
            if not (0 <= start < end <= 24):
                errors.append(f"Invalid {label} window: {start}-{end}")

        if cls.MIN_CLASS_MINUTES > cls.MAX_CLASS_MINUTES:
            errors.append("MIN_CLASS_MINUTES exceeds MAX_CLASS_MINUTES")

        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
