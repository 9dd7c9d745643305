"""
Per-person digest of attendance applications and cancellations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from core.config import CALENDAR_NAME, CALENDAR_TIMEZONE, DEPARTMENT_NAME, SUBJECT_PREFIX
from models.events import AttendanceEvent, ChangeSet

APPLICATIONS = "applications"
CANCELLATIONS = "cancellations"

REPORT_SUBJECT = SUBJECT_PREFIX + "{department}_{report_date}"
REPORT_BODY = """{department}の勤怠連絡です。

【申請】
{applications}

【取消】
{cancellations}

---
このメールは「{calendar_name}」の自動通知メールです。"""


@dataclass
class PersonChanges:
    """One person's entries in the digest."""

    applications: list[dict] = field(default_factory=list)
    cancellations: list[dict] = field(default_factory=list)


def format_report_date(d: datetime, time_zone: str = CALENDAR_TIMEZONE) -> str:
    """Format as 'YYYY/MM/DD-HH時'."""
    local = d.astimezone(ZoneInfo(time_zone)) if d.tzinfo else d
    return f"{local.year}/{local.month:02d}/{local.day:02d}-{local.hour:02d}時"


def format_event_date(d: datetime | None, time_zone: str = CALENDAR_TIMEZONE) -> str:
    """Format as 'YYYY/M/D' in the calendar timezone."""
    if d is None:
        return ""
    local = d.astimezone(ZoneInfo(time_zone)) if d.tzinfo else d
    return f"{local.year}/{local.month}/{local.day}"


def add_person_change(
    person_changes: dict[str, PersonChanges],
    person_name: str,
    change_type: str,
    event: AttendanceEvent,
    time_zone: str = CALENDAR_TIMEZONE,
):
    bucket = person_changes.setdefault(person_name, PersonChanges())
    getattr(bucket, change_type).append(
        {
            "type": event.attendance_type,
            "date": format_event_date(event.start_time, time_zone),
        }
    )


def aggregate_changes_by_person(
    changes: ChangeSet, time_zone: str = CALENDAR_TIMEZONE
) -> dict[str, PersonChanges]:
    """Group changes by person, in the order people first appear."""
    person_changes: dict[str, PersonChanges] = {}

    for event in changes.applications:
        add_person_change(person_changes, event.person_name, APPLICATIONS, event, time_zone)

    for event in changes.cancellations:
        add_person_change(person_changes, event.person_name, CANCELLATIONS, event, time_zone)

    return person_changes


def format_change_section(person_changes: dict[str, PersonChanges], change_type: str) -> str:
    """Indented 'person: type (date)' lines; empty string if nobody has entries."""
    lines = []
    for person, changes in person_changes.items():
        for entry in getattr(changes, change_type):
            lines.append(f"    {person}: {entry['type']} ({entry['date']})")
    return "\n".join(lines)


def create_report_subject(current_time: datetime, time_zone: str = CALENDAR_TIMEZONE) -> str:
    return REPORT_SUBJECT.format(
        department=DEPARTMENT_NAME, report_date=format_report_date(current_time, time_zone)
    )


def create_report_body(person_changes: dict[str, PersonChanges]) -> str:
    return REPORT_BODY.format(
        department=DEPARTMENT_NAME,
        applications=format_change_section(person_changes, APPLICATIONS),
        cancellations=format_change_section(person_changes, CANCELLATIONS),
        calendar_name=CALENDAR_NAME,
    )
