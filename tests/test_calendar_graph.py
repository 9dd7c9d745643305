"""Tests for converting between attendance events and MS Graph events."""

import asyncio
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest
from azure.core.exceptions import ClientAuthenticationError
from kiota_abstractions.api_error import APIError
from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.date_time_time_zone import DateTimeTimeZone
from msgraph.generated.models.event import Event
from msgraph.generated.models.item_body import ItemBody

from core.errors import MutationError, StoreError
from fakes import TOKYO
from models.events import AllDaySpan, EventDescriptor, TimedSpan
from services.calendar import (
    GraphCalendarStore,
    build_graph_event,
    day_window,
    parse_event,
    parse_graph_datetime,
)


class TestBuildGraphEvent:
    def test_all_day(self):
        descriptor = EventDescriptor(
            title="山田太郎 - 全休",
            description="備考: 私用\n申請者: 山田太郎",
            color="Red category",
            span=AllDaySpan(date(2025, 1, 15), date(2025, 1, 16)),
        )
        event = build_graph_event(descriptor, "Asia/Tokyo")

        assert event.subject == "山田太郎 - 全休"
        assert event.is_all_day is True
        assert event.start.date_time == "2025-01-15T00:00:00"
        assert event.end.date_time == "2025-01-16T00:00:00"
        assert event.start.time_zone == "Asia/Tokyo"
        assert event.categories == ["Red category"]
        assert event.body.content_type == BodyType.Text
        assert event.body.content == descriptor.description

    def test_timed(self):
        descriptor = EventDescriptor(
            title="山田太郎 - 遅刻",
            description="備考: 電車遅延\n申請者: 山田太郎",
            color="Yellow category",
            span=TimedSpan(
                datetime(2025, 1, 15, 9, 0, tzinfo=TOKYO),
                datetime(2025, 1, 15, 10, 30, tzinfo=TOKYO),
                "Asia/Tokyo",
            ),
        )
        event = build_graph_event(descriptor, "Asia/Tokyo")

        assert event.is_all_day is False
        assert event.start.date_time == "2025-01-15T09:00:00"
        assert event.end.date_time == "2025-01-15T10:30:00"


class TestParseGraphDatetime:
    def test_seven_fractional_digits(self):
        value = DateTimeTimeZone(date_time="2025-01-15T09:00:00.0000000", time_zone="Asia/Tokyo")
        assert parse_graph_datetime(value, "Asia/Tokyo") == datetime(2025, 1, 15, 9, 0, tzinfo=TOKYO)

    def test_utc_zone(self):
        value = DateTimeTimeZone(date_time="2025-01-15T00:00:00.0000000", time_zone="UTC")
        parsed = parse_graph_datetime(value, "Asia/Tokyo")
        assert parsed == datetime(2025, 1, 15, tzinfo=timezone.utc)

    def test_windows_zone_name_falls_back(self):
        value = DateTimeTimeZone(date_time="2025-01-15T09:00:00", time_zone="Tokyo Standard Time")
        assert parse_graph_datetime(value, "Asia/Tokyo").utcoffset() == timedelta(hours=9)

    def test_missing(self):
        assert parse_graph_datetime(None, "Asia/Tokyo") is None


def test_parse_event():
    event = Event(
        id="AAMk-1",
        subject="山田太郎 - 午前休",
        body=ItemBody(content_type=BodyType.Html, content="<p>備考: 通院</p><p>申請者: 山田太郎</p>"),
        start=DateTimeTimeZone(date_time="2025-01-15T09:00:00.0000000", time_zone="Asia/Tokyo"),
        end=DateTimeTimeZone(date_time="2025-01-15T12:00:00.0000000", time_zone="Asia/Tokyo"),
        is_all_day=False,
    )

    raw = parse_event(event, "Asia/Tokyo")

    assert raw.id == "AAMk-1"
    assert raw.summary == "山田太郎 - 午前休"
    assert raw.description == "備考: 通院\n申請者: 山田太郎"
    assert raw.start.hour == 9
    assert raw.is_all_day is False


def test_day_window():
    start, end = day_window(date(2025, 1, 15), "Asia/Tokyo")
    assert start == datetime(2025, 1, 15, 0, 0, tzinfo=TOKYO)
    assert end == datetime(2025, 1, 15, 23, 59, 59, tzinfo=TOKYO)


def test_unconfigured_calendar_is_store_error():
    store = GraphCalendarStore(user_id="", calendar_id="", graph=object())
    with pytest.raises(StoreError):
        asyncio.run(store.delete_event("AAMk-1"))


class FakeCalendarView:
    """Calendar view that serves pre-built pages, keyed by next link."""

    def __init__(self, pages, error=None):
        self.pages = pages
        self.error = error
        self.requested = []
        self._url = None

    def with_url(self, url):
        view = FakeCalendarView(self.pages, self.error)
        view.requested = self.requested
        view._url = url
        return view

    async def get(self, request_configuration=None):
        self.requested.append(self._url)
        if self.error:
            raise self.error
        return self.pages[self._url]


class FakeEvents:
    def __init__(self, error=None):
        self.error = error
        self.posted = []
        self.deleted = []

    async def post(self, event):
        if self.error:
            raise self.error
        self.posted.append(event)
        return Event(id="AAMk-new")

    def by_event_id(self, event_id):
        events = self

        class _Item:
            async def delete(self):
                if events.error:
                    raise events.error
                events.deleted.append(event_id)

        return _Item()


class FakeGraph:
    """Just enough of GraphServiceClient for one user calendar."""

    def __init__(self, calendar_view=None, events=None):
        self.calendar = SimpleNamespace(
            calendar_view=calendar_view or FakeCalendarView({None: None}),
            events=events or FakeEvents(),
        )
        self.users = self

    def by_user_id(self, user_id):
        return SimpleNamespace(
            calendars=SimpleNamespace(by_calendar_id=lambda calendar_id: self.calendar)
        )


def graph_page(event_ids, next_link=None):
    events = [
        Event(
            id=event_id,
            subject="山田太郎 - 全休",
            start=DateTimeTimeZone(date_time="2025-01-15T00:00:00.0000000", time_zone="Asia/Tokyo"),
            end=DateTimeTimeZone(date_time="2025-01-16T00:00:00.0000000", time_zone="Asia/Tokyo"),
            is_all_day=True,
        )
        for event_id in event_ids
    ]
    return SimpleNamespace(value=events, odata_next_link=next_link)


def graph_store(graph):
    return GraphCalendarStore(user_id="bot@example.com", calendar_id="cal-1", graph=graph)


def sample_descriptor():
    return EventDescriptor(
        title="山田太郎 - 全休",
        description="備考: 私用\n申請者: 山田太郎",
        color="Red category",
        span=AllDaySpan(date(2025, 1, 15), date(2025, 1, 16)),
    )


class TestGraphCalendarStore:
    def test_list_events_follows_next_link(self):
        view = FakeCalendarView(
            {
                None: graph_page(["a", "b"], next_link="https://graph/next"),
                "https://graph/next": graph_page(["c"]),
            }
        )
        store = graph_store(FakeGraph(calendar_view=view))
        start, end = day_window(date(2025, 1, 15), "Asia/Tokyo")

        events = asyncio.run(store.list_events(start, end))

        assert [e.id for e in events] == ["a", "b", "c"]
        assert view.requested == [None, "https://graph/next"]

    def test_insert_returns_new_id(self):
        events = FakeEvents()
        store = graph_store(FakeGraph(events=events))

        assert asyncio.run(store.insert_event(sample_descriptor())) == "AAMk-new"
        assert events.posted[0].subject == "山田太郎 - 全休"

    def test_rejected_insert_is_mutation_error(self):
        store = graph_store(FakeGraph(events=FakeEvents(error=APIError("quota exceeded"))))
        with pytest.raises(MutationError):
            asyncio.run(store.insert_event(sample_descriptor()))

    def test_rejected_delete_is_mutation_error(self):
        store = graph_store(FakeGraph(events=FakeEvents(error=APIError("not found"))))
        with pytest.raises(MutationError):
            asyncio.run(store.delete_event("AAMk-1"))

    def test_rejected_listing_is_mutation_error(self):
        view = FakeCalendarView({}, error=APIError("bad request"))
        store = graph_store(FakeGraph(calendar_view=view))
        start, end = day_window(date(2025, 1, 15), "Asia/Tokyo")
        with pytest.raises(MutationError):
            asyncio.run(store.list_events(start, end))

    def test_connection_failure_is_store_error(self):
        error = httpx.ConnectError("connection refused")
        store = graph_store(FakeGraph(events=FakeEvents(error=error)))
        with pytest.raises(StoreError):
            asyncio.run(store.insert_event(sample_descriptor()))

    def test_listing_connection_failure_is_store_error(self):
        view = FakeCalendarView({}, error=httpx.ConnectError("connection refused"))
        store = graph_store(FakeGraph(calendar_view=view))
        start, end = day_window(date(2025, 1, 15), "Asia/Tokyo")
        with pytest.raises(StoreError):
            asyncio.run(store.list_events(start, end))

    def test_auth_failure_is_store_error(self):
        error = ClientAuthenticationError("invalid client secret")
        store = graph_store(FakeGraph(events=FakeEvents(error=error)))
        with pytest.raises(StoreError):
            asyncio.run(store.delete_event("AAMk-1"))
