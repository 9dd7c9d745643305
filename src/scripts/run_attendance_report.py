#!/usr/bin/env python3
"""
Report new and cancelled attendance requests from the team calendar.

Compares the calendar with the snapshot saved by the previous run and
mails a per-person digest to REPORT_TO_EMAIL when anything changed.
Errors are mailed to ERROR_EMAIL.

Usage:
    uv run python src/scripts/run_attendance_report.py
    uv run python src/scripts/run_attendance_report.py --check-config

Schedule twice a day, e.g. crontab:
    0 9,17 * * * cd /srv/attendance && uv run python src/scripts/run_attendance_report.py
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    CALENDAR_ID,
    CALENDAR_NAME,
    CALENDAR_TIMEZONE,
    CALENDAR_USER_ID,
    DB_PATH,
    DEFAULT_SEARCH_DAYS_BACK,
    ERROR_EMAIL,
    FROM_EMAIL,
    FROM_NAME,
    REPORT_TO_EMAIL,
    SEARCH_DAYS_FORWARD,
)
from core.database import SqliteKeyValueStore
from models.events import TARGET_TYPE_LABELS
from services.calendar import GraphCalendarStore
from services.email import GraphMailTransport
from services.report_job import execute_attendance_report


def check_configuration():
    """Print the effective configuration."""
    print("=== Configuration ===")
    print(f"Calendar user:          {CALENDAR_USER_ID}")
    print(f"Calendar ID:            {CALENDAR_ID}")
    print(f"Calendar name:          {CALENDAR_NAME}")
    print(f"Timezone:               {CALENDAR_TIMEZONE}")
    print(f"Target types:           {', '.join(TARGET_TYPE_LABELS)}")
    print(f"Report to:              {REPORT_TO_EMAIL}")
    print(f"Errors to:              {ERROR_EMAIL}")
    print(f"Search days forward:    {SEARCH_DAYS_FORWARD}")
    print(f"Default days back:      {DEFAULT_SEARCH_DAYS_BACK}")
    print(f"From address:           {FROM_EMAIL}")
    print(f"From name:              {FROM_NAME}")
    print(f"State database:         {DB_PATH}")


async def main():
    """Main entry point."""
    changes = await execute_attendance_report(
        GraphCalendarStore(), SqliteKeyValueStore(), GraphMailTransport()
    )
    print(
        f"\nDone! {len(changes.applications)} application(s), "
        f"{len(changes.cancellations)} cancellation(s)"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send the attendance change report")
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Print the effective configuration and exit",
    )
    args = parser.parse_args()

    if args.check_config:
        check_configuration()
    else:
        asyncio.run(main())
