"""
Recognize attendance events on the calendar and pull out their fields.
"""

import re

from models.events import TARGET_TYPE_LABELS, AttendanceEvent, RawCalendarEvent

UNKNOWN = "不明"

SUMMARY_PATTERN = re.compile(r"^(.+?)\s*-\s*(.+)$")
REPORTER_PATTERN = re.compile(r"申請者:\s*(.+?)(?:\n|$)")


def is_attendance_event(summary: str | None) -> bool:
    """True if the title mentions any attendance type label."""
    if not summary:
        return False
    return any(label in summary for label in TARGET_TYPE_LABELS)


def parse_event_summary(summary: str) -> tuple[str, str]:
    """Split '山田太郎 - 全休' into (person name, attendance type)."""
    match = SUMMARY_PATTERN.match(summary)
    if not match:
        return UNKNOWN, UNKNOWN
    return match.group(1).strip(), match.group(2).strip()


def extract_reporter(description: str | None) -> str:
    """Reporter recorded in the '申請者: X' line of the description."""
    match = REPORTER_PATTERN.search(description or "")
    return match.group(1).strip() if match else UNKNOWN


def extract_event_info(event: RawCalendarEvent) -> AttendanceEvent:
    person_name, attendance_type = parse_event_summary(event.summary)
    return AttendanceEvent(
        id=event.id,
        person_name=person_name,
        attendance_type=attendance_type,
        reporter=extract_reporter(event.description),
        start_time=event.start,
        end_time=event.end,
        is_all_day=event.is_all_day,
        last_updated=event.last_updated,
        summary=event.summary,
        description=event.description,
    )


def classify_events(events: list[RawCalendarEvent]) -> list[AttendanceEvent]:
    """Keep attendance events only, with fields extracted."""
    return [extract_event_info(e) for e in events if is_attendance_event(e.summary)]
