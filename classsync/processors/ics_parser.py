# File: classsync/processors/ics_parser.py
"""
iCalendar import.
Turns an exported .ics blob into recurring weekly ClassMeeting records,
keeping only entries that look like real class sessions.
"""

import datetime
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

import pytz
from icalendar import Calendar, Component

from classsync.core.config_manager import Config
from classsync.utils.logger import setup_logger
from classsync.models import RawEvent, ClassMeeting, IcsParseReport, Weekday

logger = setup_logger(__name__)

_DATE_ONLY_RE = re.compile(r"^\d{8}$")
_DATETIME_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})?$")


class DateOnlyValue(ValueError):
    """An all-day DATE value where a DATE-TIME is required."""


# --------------------------------------------------------------------------
# Class-likeness rules
# --------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassRule:
    """
    One step of the class-likeness check.

    ``check`` returns False to reject, True to accept, or None to defer to
    the next rule.
    """
    name: str
    check: Callable[[str, datetime.datetime, datetime.datetime, Optional[str]], Optional[bool]]


def _blocklist_rule(summary, start, end, rrule):
    text = (summary or '').lower()
    if any(word in text for word in Config.CLASS_BLOCKLIST):
        return False
    return None


def _duration_rule(summary, start, end, rrule):
    minutes = (end - start).total_seconds() / 60
    if minutes < Config.MIN_CLASS_MINUTES or minutes > Config.MAX_CLASS_MINUTES:
        return False
    return None


def _recurrence_rule(summary, start, end, rrule):
    return True if rrule else None


def _course_code_rule(summary, start, end, rrule):
    return looks_like_course_code(summary)


CLASS_RULES: Tuple[ClassRule, ...] = (
    ClassRule("blocklist", _blocklist_rule),
    ClassRule("duration", _duration_rule),
    ClassRule("recurring", _recurrence_rule),
    ClassRule("course_code", _course_code_rule),
)


def looks_like_course_code(text: Optional[str]) -> bool:
    """True if the text contains something like "CSE 142" or "MATH124A"."""
    if not text:
        return False
    return bool(Config.COURSE_CODE_PATTERN.search(text))


def classify_event(
    summary: Optional[str],
    start: datetime.datetime,
    end: datetime.datetime,
    rrule: Optional[str] = None,
    rules: Tuple[ClassRule, ...] = CLASS_RULES,
) -> Tuple[bool, str]:
    """
    Run the ordered rule list.

    Returns:
        (accepted, name of the deciding rule)
    """
    for rule in rules:
        verdict = rule.check(summary, start, end, rrule)
        if verdict is not None:
            return verdict, rule.name
    return False, "undecided"


def is_likely_class(summary, start, end, rrule=None) -> bool:
    """True if the ordered rules accept the event as a class session."""
    return classify_event(summary, start, end, rrule)[0]


# --------------------------------------------------------------------------
# Reading VEVENTs
# --------------------------------------------------------------------------

def read_vevents(ics_text: Union[str, bytes]) -> List[Component]:
    """
    Parse iCalendar content and collect every VEVENT in it.

    icalendar takes care of line unfolding, property parameters and TEXT
    unescaping.

    Raises:
        ValueError: if the content is not iCalendar at all
    """
    components = Calendar.from_ical(ics_text, multiple=True)
    return [event for component in components for event in component.walk('VEVENT')]


def _raw_value(component: Component, name: str) -> Optional[str]:
    prop = component.get(name)
    if prop is None:
        return None
    return prop.to_ical().decode('utf-8')


def to_raw_event(component: Component) -> Tuple[Optional[RawEvent], str]:
    """
    Pull the properties classification needs out of one VEVENT.

    DTSTART/DTEND are kept as their serialized tokens so that DATE values
    and the UTC "Z" suffix are still visible to ``IcsParser.parse_datetime``.

    Returns:
        (raw event or None, reason it was skipped)
    """
    failed = {name.upper() for name, _ in component.errors}
    if failed & {'DTSTART', 'DTEND'}:
        return None, "bad_datetime"

    dtstart = _raw_value(component, 'DTSTART')
    dtend = _raw_value(component, 'DTEND')
    if not dtstart or not dtend:
        return None, "incomplete"

    summary = component.get('SUMMARY')
    return RawEvent(
        dtstart=dtstart,
        dtend=dtend,
        summary=str(summary) if summary is not None else None,
        rrule=_raw_value(component, 'RRULE'),
    ), ""


# --------------------------------------------------------------------------
# Parser
# --------------------------------------------------------------------------

class IcsParser:
    """Parses iCalendar exports into class meetings."""

    def __init__(self, timezone: str = Config.TARGET_TIMEZONE):
        """
        Initialize the parser.

        Args:
            timezone: Local timezone name that UTC ("Z") values are converted to
        """
        self.timezone = pytz.timezone(timezone)
        self.logger = setup_logger(__name__)

    def parse_datetime(self, value: str) -> datetime.datetime:
        """
        Decode an ICS DATE-TIME into a naive local wall-clock datetime.

        Raises:
            DateOnlyValue: for 8-digit all-day values
            ValueError: for anything else that is not a DATE-TIME
        """
        value = (value or '').strip()
        is_utc = value.endswith('Z')
        clean = value[:-1] if is_utc else value

        if _DATE_ONLY_RE.match(clean):
            raise DateOnlyValue(f"All-day value: {value}")

        match = _DATETIME_RE.match(clean)
        if not match:
            raise ValueError(f"Unrecognized datetime: {value!r}")

        year, month, day, hour, minute = (int(match.group(i)) for i in range(1, 6))
        second = int(match.group(6) or 0)
        parsed = datetime.datetime(year, month, day, hour, minute, second)

        if is_utc:
            local = pytz.utc.localize(parsed).astimezone(self.timezone)
            return local.replace(tzinfo=None)
        return parsed

    def to_meeting(self, event: RawEvent) -> Tuple[Optional[ClassMeeting], str]:
        """
        Classify and project one event.

        Returns:
            (meeting or None, reason) where reason names the rule that
            decided, or the decoding problem that skipped the event
        """
        try:
            start = self.parse_datetime(event.dtstart)
            end = self.parse_datetime(event.dtend)
        except DateOnlyValue:
            return None, "all_day"
        except ValueError as e:
            self.logger.debug(f"Skipping event '{event.summary}': {e}")
            return None, "bad_datetime"

        accepted, reason = classify_event(event.summary, start, end, event.rrule)
        if not accepted:
            return None, reason

        try:
            meeting = ClassMeeting(
                title=(event.summary or '').strip() or Config.DEFAULT_CLASS_TITLE,
                day=int(Weekday.from_datetime(start)),
                start_time=start.strftime('%H:%M:%S'),
                end_time=end.strftime('%H:%M:%S'),
                source=Config.ICS_SOURCE,
            )
        except ValueError as e:
            # Crosses midnight: end clock is not after start clock
            self.logger.debug(f"Skipping event '{event.summary}': {e}")
            return None, "invalid_span"
        return meeting, reason

    def parse(self, ics_text: Union[str, bytes, None]) -> IcsParseReport:
        """
        Parse a whole ICS blob.

        Malformed or non-class events are skipped; the report says how many
        and why. Never raises on bad input.
        """
        report = IcsParseReport()
        if not ics_text:
            return report
        if isinstance(ics_text, bytes):
            ics_text = ics_text.decode('utf-8', errors='replace')

        try:
            vevents = read_vevents(ics_text)
        except ValueError as e:
            self.logger.warning(f"Could not read ICS content: {e}")
            return report
        report.blocks_seen = len(vevents)

        seen = set()
        for component in vevents:
            event, reason = to_raw_event(component)
            if event is None:
                self.logger.debug(f"Skipping event '{component.get('SUMMARY')}': {reason}")
                report.rejections[reason] += 1
                continue
            meeting, reason = self.to_meeting(event)
            if meeting is None:
                report.rejections[reason] += 1
                continue
            key = meeting.dedup_key()
            if key in seen:
                report.duplicates += 1
                continue
            seen.add(key)
            report.meetings.append(meeting)

        self.logger.info(f"ICS import: {report}")
        return report

    def parse_to_class_meetings(self, ics_text: Union[str, bytes, None]) -> List[ClassMeeting]:
        return self.parse(ics_text).meetings


def parse_to_class_meetings(
    ics_text: Union[str, bytes, None],
    timezone: Optional[str] = None,
) -> List[ClassMeeting]:
    """Parse ICS text into deduplicated class meetings, in file order."""
    return IcsParser(timezone or Config.TARGET_TIMEZONE).parse_to_class_meetings(ics_text)
