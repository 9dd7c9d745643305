"""
Create and cancel attendance events on the calendar.

Each date is handled on its own: a failed insert or delete is counted and
the remaining dates are still processed. A StoreError (calendar
unreachable) aborts the whole command.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from core.config import CALENDAR_TIMEZONE
from core.errors import MutationError
from models.events import (
    AllDaySpan,
    AttendanceRequest,
    CalendarDate,
    EventDescriptor,
    RawCalendarEvent,
    TimedSpan,
    get_type_config,
)
from services.calendar import CalendarStore, day_window
from services.classifier import REPORTER_PATTERN

REPORTER_LABEL = "申請者: "


@dataclass
class MutationSummary:
    """Outcome of one create or cancel command."""

    request: AttendanceRequest
    reporter_name: str
    succeeded: int = 0
    failed: int = 0
    matched_dates: list[CalendarDate] = field(default_factory=list)


def reporter_marker(reporter_name: str) -> str:
    return f"{REPORTER_LABEL}{reporter_name}"


def build_event_descriptor(
    request: AttendanceRequest,
    day: CalendarDate,
    reporter_name: str,
    time_zone: str = CALENDAR_TIMEZONE,
) -> EventDescriptor:
    """Build the calendar event for one requested date."""
    config = get_type_config(request.type)
    event_date = day.to_date()

    if config.window is None:
        span = AllDaySpan(start=event_date, end=event_date + timedelta(days=1))
    else:
        tz = ZoneInfo(time_zone)
        span = TimedSpan(
            start=datetime.combine(event_date, config.window.start, tzinfo=tz),
            end=datetime.combine(event_date, config.window.end, tzinfo=tz),
            time_zone=time_zone,
        )

    return EventDescriptor(
        title=f"{request.person_name} - {config.title}",
        description=f"備考: {request.remarks}\n{reporter_marker(reporter_name)}",
        color=config.color,
        span=span,
    )


async def add_to_calendar(
    store: CalendarStore,
    request: AttendanceRequest,
    reporter_name: str,
    time_zone: str = CALENDAR_TIMEZONE,
) -> MutationSummary:
    """Create one event per requested date."""
    summary = MutationSummary(request=request, reporter_name=reporter_name)

    for day in request.dates:
        descriptor = build_event_descriptor(request, day, reporter_name, time_zone)
        try:
            await store.insert_event(descriptor)
        except MutationError as e:
            print(f"  ERROR adding {descriptor.title} ({day.token}): {e}")
            summary.failed += 1
            continue
        summary.succeeded += 1

    return summary


def _strip_whitespace(value: str) -> str:
    return re.sub(r"\s+", "", value)


def _recorded_reporter(description: str | None) -> str | None:
    match = REPORTER_PATTERN.search(description or "")
    return match.group(1).strip() if match else None


def filter_cancellable_events(
    events: list[RawCalendarEvent], person_name: str, reporter_name: str
) -> list[RawCalendarEvent]:
    """
    Events for person_name that reporter_name filed.

    Names are compared with whitespace removed. The reporter line must match
    reporter_name exactly. Events filed by anyone else are left out, so they
    look the same as no event at all.
    """
    normalized_person = _strip_whitespace(person_name)
    reporter = reporter_name.strip()
    if not reporter:
        return []

    matches = []
    for event in events:
        if not event.summary:
            continue
        if normalized_person not in _strip_whitespace(event.summary):
            continue
        if _recorded_reporter(event.description) != reporter:
            continue
        matches.append(event)
    return matches


async def remove_from_calendar(
    store: CalendarStore,
    request: AttendanceRequest,
    reporter_name: str,
    time_zone: str = CALENDAR_TIMEZONE,
) -> MutationSummary:
    """Delete the caller's own events for the person on each requested date."""
    summary = MutationSummary(request=request, reporter_name=reporter_name)

    for day in request.dates:
        start, end = day_window(day.to_date(), time_zone)
        try:
            events = await store.list_events(start, end)
        except MutationError as e:
            print(f"  ERROR searching {day.token}: {e}")
            summary.failed += 1
            continue

        matches = filter_cancellable_events(events, request.person_name, reporter_name)
        if not matches:
            continue

        for event in matches:
            try:
                await store.delete_event(event.id)
            except MutationError as e:
                print(f"  ERROR deleting {event.summary} ({day.token}): {e}")
                summary.failed += 1
                continue
            summary.succeeded += 1
        summary.matched_dates.append(day)

    return summary
