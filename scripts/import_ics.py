"""
ICS import preview.
Parses an exported calendar file and prints the class meetings and free
blocks that would be saved.

Usage: python scripts/import_ics.py path/to/schedule.ics
"""

import sys
import time
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from classsync.core.config_manager import Config
from classsync.models import Weekday
from classsync.models.common import format_time
from classsync.processors.ics_parser import IcsParser
from classsync.processors.free_blocks import compute_free_blocks
from classsync.utils.logger import setup_logger

logger = setup_logger(__name__)


def main(argv) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    if len(argv) != 2:
        print(__doc__.strip().splitlines()[-1])
        return 1

    start_time = time.time()
    ics_path = Path(argv[1])

    try:
        if not Config.validate():
            logger.error("Configuration validation failed")
            return 1

        report = IcsParser(Config.TARGET_TIMEZONE).parse(ics_path.read_text(encoding="utf-8", errors="replace"))
        if report.is_empty():
            logger.error("No classes found. Re-export the calendar and try again.")
            return 1

        print(f"\nClasses ({report.accepted}):")
        for meeting in report.meetings:
            print(
                f"  {Weekday(meeting.day).label}  {format_time(meeting.start_minutes):>8} - "
                f"{format_time(meeting.end_minutes):>8}  {meeting.title}"
            )

        print(f"\nFree blocks ({Config.DAY_START_HOUR}:00-{Config.DAY_END_HOUR}:00):")
        for block in compute_free_blocks(report.meetings, *Config.day_window()):
            print(
                f"  {Weekday(block.day).label}  {format_time(block.start_minutes):>8} - "
                f"{format_time(block.end_minutes):>8}"
            )
        return 0

    except FileNotFoundError as e:
        logger.error(f"Could not find: {e.filename}")
        return 1

    finally:
        elapsed = time.time() - start_time
        logger.info(f"Total execution time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    sys.exit(main(sys.argv))
