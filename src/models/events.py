"""
Data models for attendance requests and calendar events.

Dataclasses are frozen: a request lives for one command, an event is a
read-only view of what the calendar holds.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum


class AttendanceType(str, Enum):
    """Attendance request types, valued by their display label."""

    FULL_DAY = "全休"
    MORNING_HALF = "午前休"
    AFTERNOON_HALF = "午後休"
    LATE_ARRIVAL = "遅刻"
    EARLY_LEAVE = "早退"
    SPECIAL_LEAVE = "特別休"
    HOLIDAY_WORK = "休出"
    CANCELLATION = "取消"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class TimeWindow:
    """Fixed time-of-day window for timed attendance types."""

    start: time
    end: time


@dataclass(frozen=True)
class TypeConfig:
    """Display settings for one attendance type."""

    title: str
    color: str  # Outlook category name
    window: TimeWindow | None = None


DEFAULT_COLOR = "Purple category"

WORK_START = time(9, 0)
WORK_END = time(17, 30)
LUNCH_START = time(12, 0)
LUNCH_END = time(13, 0)
LATE_END = time(10, 30)
EARLY_LEAVE_START = time(16, 0)

ATTENDANCE_TYPES: dict[AttendanceType, TypeConfig] = {
    AttendanceType.FULL_DAY: TypeConfig("全休", "Red category"),
    AttendanceType.MORNING_HALF: TypeConfig(
        "午前休", "Orange category", TimeWindow(WORK_START, LUNCH_START)
    ),
    AttendanceType.AFTERNOON_HALF: TypeConfig(
        "午後休", "Orange category", TimeWindow(LUNCH_END, WORK_END)
    ),
    AttendanceType.LATE_ARRIVAL: TypeConfig(
        "遅刻", "Yellow category", TimeWindow(WORK_START, LATE_END)
    ),
    AttendanceType.EARLY_LEAVE: TypeConfig(
        "早退", "Yellow category", TimeWindow(EARLY_LEAVE_START, WORK_END)
    ),
    AttendanceType.SPECIAL_LEAVE: TypeConfig("特別休", "Green category"),
    AttendanceType.HOLIDAY_WORK: TypeConfig("休出", "Blue category"),
    AttendanceType.CANCELLATION: TypeConfig("取消", DEFAULT_COLOR),
}

# Labels that mark a calendar event as an attendance event
TARGET_TYPE_LABELS = [t.label for t in AttendanceType if t is not AttendanceType.CANCELLATION]


def get_type_config(attendance_type: AttendanceType) -> TypeConfig:
    """Look up display settings, falling back to full-day."""
    return ATTENDANCE_TYPES.get(attendance_type, ATTENDANCE_TYPES[AttendanceType.FULL_DAY])


@dataclass(frozen=True)
class CalendarDate:
    """A validated calendar date as entered by the user."""

    year: int
    month: int
    day: int

    @property
    def token(self) -> str:
        """Canonical YYYYMMDD form."""
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, d: date) -> "CalendarDate":
        return cls(d.year, d.month, d.day)


@dataclass(frozen=True)
class AttendanceRequest:
    """A parsed and validated attendance message."""

    person_name: str
    type: AttendanceType
    dates: tuple[CalendarDate, ...]
    original_date_text: str
    remarks: str

    @property
    def is_cancellation(self) -> bool:
        return self.type is AttendanceType.CANCELLATION

    def to_message(self) -> str:
        """Render the request back into the structured message template."""
        return (
            "【勤怠連絡】\n"
            f"氏名：{self.person_name}\n"
            f"種別：{self.type.label}\n"
            f"日付：{self.original_date_text}\n"
            f"備考：{self.remarks}"
        )


@dataclass(frozen=True)
class AllDaySpan:
    """All-day event; end is exclusive (the following day)."""

    start: date
    end: date


@dataclass(frozen=True)
class TimedSpan:
    """Timed event anchored in a named timezone."""

    start: datetime
    end: datetime
    time_zone: str


EventSpan = AllDaySpan | TimedSpan


@dataclass(frozen=True)
class EventDescriptor:
    """Everything the calendar store needs to create one event."""

    title: str
    description: str
    color: str
    span: EventSpan


@dataclass(frozen=True)
class RawCalendarEvent:
    """Store-neutral view of one calendar entry."""

    id: str
    summary: str
    description: str
    start: datetime | None
    end: datetime | None
    is_all_day: bool = False
    last_updated: datetime | None = None


@dataclass(frozen=True)
class AttendanceEvent:
    """Attendance event as observed on the calendar."""

    id: str
    person_name: str
    attendance_type: str
    reporter: str
    start_time: datetime | None
    end_time: datetime | None
    is_all_day: bool
    last_updated: datetime | None
    summary: str
    description: str


@dataclass
class ChangeSet:
    """Events that appeared or disappeared between two snapshots."""

    applications: list[AttendanceEvent] = field(default_factory=list)
    cancellations: list[AttendanceEvent] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.applications or self.cancellations)
