from .ics_parser import IcsParser, parse_to_class_meetings
from .free_blocks import compute_free_blocks
from .interval_engine import build_overlap_blocks, compute_common_free, merge_intervals
from .gap_selector import GapCursor, upcoming_gaps, select_gap
from .schedule_processor import ScheduleProcessor

__all__ = [
    "IcsParser",
    "parse_to_class_meetings",
    "compute_free_blocks",
    "build_overlap_blocks",
    "compute_common_free",
    "merge_intervals",
    "GapCursor",
    "upcoming_gaps",
    "select_gap",
    "ScheduleProcessor",
]
