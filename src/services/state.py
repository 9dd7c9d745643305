"""
Snapshot-diff detection of new and cancelled attendance events.

Each run compares the events currently on the calendar with the snapshot
saved by the previous run, keyed by event id:

    id only in current   -> application
    id only in previous  -> cancellation

Edits that keep the same event id are not detected.
"""

from dataclasses import asdict
from datetime import datetime, timedelta

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from core.config import (
    DEFAULT_SEARCH_DAYS_BACK,
    EVENT_STATE_KEY,
    LAST_EXECUTION_KEY,
    SEARCH_DAYS_FORWARD,
    SNAPSHOT_VERSION,
)
from core.database import KeyValueStore
from core.errors import StoreError
from models.events import AttendanceEvent, ChangeSet
from services.calendar import CalendarStore
from services.classifier import classify_events

EventState = dict[str, AttendanceEvent]


class StoredEvent(BaseModel):
    """Persisted form of an AttendanceEvent (timestamps as ISO 8601)."""

    id: str
    person_name: str
    attendance_type: str
    reporter: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_all_day: bool = False
    last_updated: datetime | None = None
    summary: str = ""
    description: str = ""


class EventStateSnapshot(BaseModel):
    """Versioned snapshot document."""

    version: int = SNAPSHOT_VERSION
    events: dict[str, StoredEvent] = {}


# =============================================================================
# SERIALIZATION
# =============================================================================


def serialize_state(state: EventState) -> str:
    snapshot = EventStateSnapshot(
        events={event_id: StoredEvent(**asdict(event)) for event_id, event in state.items()}
    )
    return snapshot.model_dump_json()


def deserialize_state(payload: str) -> EventState:
    """Parse a stored snapshot; raises ValueError on a bad or foreign payload."""
    snapshot = EventStateSnapshot.model_validate_json(payload)
    if snapshot.version != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version {snapshot.version}")
    return {
        event_id: AttendanceEvent(**stored.model_dump())
        for event_id, stored in snapshot.events.items()
    }


# =============================================================================
# PERSISTED STATE
# =============================================================================


def default_last_execution(now: datetime) -> datetime:
    return now - timedelta(days=DEFAULT_SEARCH_DAYS_BACK)


def get_last_execution_time(kv: KeyValueStore, now: datetime) -> datetime:
    """Previous run time, or the default lookback when unknown."""
    try:
        stored = kv.get(LAST_EXECUTION_KEY)
    except StoreError as e:
        print(f"Failed to read last execution time: {e}")
        return default_last_execution(now)

    if not stored:
        return default_last_execution(now)

    try:
        last = datetime.fromisoformat(stored)
    except ValueError:
        print(f"Ignoring malformed last execution time: {stored!r}")
        return default_last_execution(now)

    if last.tzinfo is None and now.tzinfo is not None:
        last = last.replace(tzinfo=now.tzinfo)
    return last


def update_last_execution_time(kv: KeyValueStore, execution_time: datetime):
    try:
        kv.set(LAST_EXECUTION_KEY, execution_time.isoformat())
    except StoreError as e:
        print(f"Failed to update last execution time: {e}")


def get_previous_event_state(kv: KeyValueStore) -> EventState:
    """Snapshot saved by the previous run; empty when missing or unreadable."""
    try:
        payload = kv.get(EVENT_STATE_KEY)
    except StoreError as e:
        print(f"Failed to read previous event state: {e}")
        return {}

    if not payload:
        return {}

    try:
        return deserialize_state(payload)
    except (SchemaError, ValueError) as e:
        print(f"Discarding unreadable event state: {e}")
        return {}


def save_event_state(kv: KeyValueStore, state: EventState):
    try:
        kv.set(EVENT_STATE_KEY, serialize_state(state))
    except StoreError as e:
        print(f"Failed to save event state: {e}")


def clear_stored_data(kv: KeyValueStore):
    kv.delete(LAST_EXECUTION_KEY)
    kv.delete(EVENT_STATE_KEY)


# =============================================================================
# DIFF
# =============================================================================


def calculate_search_period(
    last_execution_time: datetime | None, current_time: datetime
) -> tuple[datetime, datetime]:
    start = last_execution_time or default_last_execution(current_time)
    end = current_time + timedelta(days=SEARCH_DAYS_FORWARD)
    return start, end


def create_event_state(events: list[AttendanceEvent]) -> EventState:
    return {event.id: event for event in events}


def calculate_changes(previous_state: EventState, current_state: EventState) -> ChangeSet:
    """Applications are ids new in current, cancellations are ids gone from it."""
    changes = ChangeSet()

    for event_id, event in current_state.items():
        if event_id not in previous_state:
            changes.applications.append(event)

    for event_id, event in previous_state.items():
        if event_id not in current_state:
            changes.cancellations.append(event)

    return changes


async def detect_changes(
    store: CalendarStore, kv: KeyValueStore, current_time: datetime
) -> ChangeSet:
    """
    Fetch the calendar, diff against the saved snapshot and save the new one.

    If fetching fails the saved snapshot is left as it was.
    """
    previous_state = get_previous_event_state(kv)
    last_execution_time = get_last_execution_time(kv, current_time)
    start, end = calculate_search_period(last_execution_time, current_time)
    print(f"Searching {start.isoformat()} to {end.isoformat()}")

    raw_events = await store.list_events(start, end)
    current_state = create_event_state(classify_events(raw_events))
    print(f"  Found {len(raw_events)} events, {len(current_state)} attendance events")

    changes = calculate_changes(previous_state, current_state)
    save_event_state(kv, current_state)

    return changes
