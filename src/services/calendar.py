"""
Attendance calendar access through MS Graph.
"""

import re
from datetime import datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

import httpx
from azure.core.exceptions import ClientAuthenticationError
from kiota_abstractions.api_error import APIError
from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.date_time_time_zone import DateTimeTimeZone
from msgraph.generated.models.event import Event
from msgraph.generated.models.item_body import ItemBody
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)

from core.config import CALENDAR_ID, CALENDAR_TIMEZONE, CALENDAR_USER_ID
from core.errors import MutationError, StoreError
from core.graph_client import get_graph_client
from models.events import AllDaySpan, EventDescriptor, RawCalendarEvent, TimedSpan

PAGE_SIZE = 100

# Transport and credential failures mean the calendar itself is unreachable
UNREACHABLE_ERRORS = (ClientAuthenticationError, httpx.TransportError, OSError)


class CalendarStore(Protocol):
    """What the attendance services need from a calendar."""

    async def list_events(self, start: datetime, end: datetime) -> list[RawCalendarEvent]: ...

    async def insert_event(self, descriptor: EventDescriptor) -> str: ...

    async def delete_event(self, event_id: str) -> None: ...


class GraphCalendarStore:
    """Single shared calendar owned by one mailbox."""

    def __init__(
        self,
        user_id: str = CALENDAR_USER_ID,
        calendar_id: str = CALENDAR_ID,
        time_zone: str = CALENDAR_TIMEZONE,
        graph=None,
    ):
        self.user_id = user_id
        self.calendar_id = calendar_id
        self.time_zone = time_zone
        self._graph = graph

    @property
    def graph(self):
        if self._graph is None:
            self._graph = get_graph_client()
        return self._graph

    def _calendar(self):
        if not self.user_id or not self.calendar_id:
            raise StoreError("Calendar is not configured (CALENDAR_USER_ID / CALENDAR_ID)")
        return self.graph.users.by_user_id(self.user_id).calendars.by_calendar_id(
            self.calendar_id
        )

    async def list_events(self, start: datetime, end: datetime) -> list[RawCalendarEvent]:
        """Fetch every event overlapping [start, end], recurrences expanded."""
        query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=start.isoformat(),
            end_date_time=end.isoformat(),
            top=PAGE_SIZE,
        )
        config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )
        config.headers.add("Prefer", f'outlook.timezone="{self.time_zone}"')
        config.headers.add("Prefer", 'outlook.body-content-type="text"')

        calendar_view = self._calendar().calendar_view
        events = []
        try:
            response = await calendar_view.get(request_configuration=config)
            while response:
                for event in response.value or []:
                    events.append(parse_event(event, self.time_zone))
                if not response.odata_next_link:
                    break
                response = await calendar_view.with_url(response.odata_next_link).get(
                    request_configuration=config
                )
        except APIError as e:
            raise MutationError("list events", _describe_api_error(e)) from e
        except UNREACHABLE_ERRORS as e:
            raise StoreError(f"Calendar unreachable: {e}") from e

        return events

    async def insert_event(self, descriptor: EventDescriptor) -> str:
        """Create an event and return its id."""
        event = build_graph_event(descriptor, self.time_zone)
        try:
            created = await self._calendar().events.post(event)
        except APIError as e:
            raise MutationError("insert event", _describe_api_error(e)) from e
        except UNREACHABLE_ERRORS as e:
            raise StoreError(f"Calendar unreachable: {e}") from e
        return created.id if created else ""

    async def delete_event(self, event_id: str) -> None:
        try:
            await self._calendar().events.by_event_id(event_id).delete()
        except APIError as e:
            raise MutationError("delete event", _describe_api_error(e)) from e
        except UNREACHABLE_ERRORS as e:
            raise StoreError(f"Calendar unreachable: {e}") from e


def _describe_api_error(e: APIError) -> str:
    error = getattr(e, "error", None)
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(e)
    return f"{code}: {message}" if code else message


def build_graph_event(descriptor: EventDescriptor, time_zone: str) -> Event:
    """Convert an EventDescriptor to an MS Graph Event."""
    event = Event(
        subject=descriptor.title,
        body=ItemBody(content_type=BodyType.Text, content=descriptor.description),
        categories=[descriptor.color],
    )

    span = descriptor.span
    if isinstance(span, AllDaySpan):
        event.is_all_day = True
        event.start = DateTimeTimeZone(
            date_time=f"{span.start.isoformat()}T00:00:00", time_zone=time_zone
        )
        event.end = DateTimeTimeZone(
            date_time=f"{span.end.isoformat()}T00:00:00", time_zone=time_zone
        )
    elif isinstance(span, TimedSpan):
        event.is_all_day = False
        event.start = DateTimeTimeZone(
            date_time=span.start.replace(tzinfo=None).isoformat(timespec="seconds"),
            time_zone=span.time_zone,
        )
        event.end = DateTimeTimeZone(
            date_time=span.end.replace(tzinfo=None).isoformat(timespec="seconds"),
            time_zone=span.time_zone,
        )

    return event


def parse_graph_datetime(value: DateTimeTimeZone | None, default_tz: str) -> datetime | None:
    """Parse a Graph DateTimeTimeZone into an aware datetime."""
    if not value or not value.date_time:
        return None

    raw = value.date_time
    # Graph returns seven fractional digits, fromisoformat accepts up to six
    raw = re.sub(r"(\.\d{6})\d+", r"\1", raw)
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        tz_name = value.time_zone or default_tz
        try:
            tz = ZoneInfo(tz_name)
        except (KeyError, ValueError):
            # Windows zone names ("Tokyo Standard Time") are not IANA keys
            tz = ZoneInfo(default_tz)
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def parse_event(event: Event, time_zone: str) -> RawCalendarEvent:
    """Parse MS Graph event into our format."""
    description = ""
    if event.body and event.body.content:
        description = event.body.content.strip()
        # Handle both plain text and HTML
        if "<" in description:
            description = re.sub(r"<[^>]+>", "\n", description)
            description = re.sub(r"\n{2,}", "\n", description).strip()

    return RawCalendarEvent(
        id=event.id or "",
        summary=event.subject or "",
        description=description,
        start=parse_graph_datetime(event.start, time_zone),
        end=parse_graph_datetime(event.end, time_zone),
        is_all_day=bool(event.is_all_day),
        last_updated=event.last_modified_date_time,
    )


def day_window(day, time_zone: str) -> tuple[datetime, datetime]:
    """Full-day search window [00:00:00, 23:59:59] for a date in a timezone."""
    tz = ZoneInfo(time_zone)
    start = datetime.combine(day, datetime.min.time()).replace(tzinfo=tz)
    end = start + timedelta(days=1) - timedelta(seconds=1)
    return start, end
