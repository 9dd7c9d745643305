"""
Scheduled attendance report: diff the calendar, mail the digest, record the run.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from core.config import CALENDAR_TIMEZONE
from core.database import KeyValueStore
from models.events import ChangeSet
from services.calendar import CalendarStore
from services.email import MailTransport, send_attendance_report, send_error_email
from services.state import detect_changes, update_last_execution_time

ERROR_TYPE = "ATTENDANCE_REPORT"


async def execute_attendance_report(
    store: CalendarStore,
    kv: KeyValueStore,
    transport: MailTransport,
    current_time: datetime | None = None,
) -> ChangeSet:
    """
    Run one report cycle.

    The last execution time is advanced once the snapshot has been taken,
    even when there is nothing to report or sending fails. Any error is
    mailed to the operator and re-raised.
    """
    current_time = current_time or datetime.now(ZoneInfo(CALENDAR_TIMEZONE))

    try:
        changes = await detect_changes(store, kv, current_time)

        try:
            if changes.has_changes:
                print(
                    f"Changes found: {len(changes.applications)} application(s), "
                    f"{len(changes.cancellations)} cancellation(s)"
                )
                await send_attendance_report(transport, changes, current_time)
            else:
                print("No changes since last run")
        finally:
            update_last_execution_time(kv, current_time)

        return changes

    except Exception as e:
        print(f"\nAttendance report error: {e}")
        await send_error_email(transport, ERROR_TYPE, e)
        raise
