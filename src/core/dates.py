"""
Date-spec resolution for attendance messages.

Accepted forms:
    20250115                      single date
    20250115,20250116,20250120    comma list (bad tokens are dropped)
    20250115-20250117             inclusive range
"""

import re
from datetime import date, timedelta

from models.events import CalendarDate

DATE_FORMAT = re.compile(r"^\d{8}$", re.ASCII)


def parse_single_date(token: str) -> CalendarDate | None:
    """Parse a YYYYMMDD token, returning None unless it is a real date."""
    if not DATE_FORMAT.match(token):
        return None

    year = int(token[0:4])
    month = int(token[4:6])
    day = int(token[6:8])

    if month < 1 or month > 12 or day < 1 or day > 31:
        return None

    try:
        date(year, month, day)
    except ValueError:
        # e.g. 20250230
        return None

    return CalendarDate(year, month, day)


def generate_date_range(start: CalendarDate, end: CalendarDate) -> list[CalendarDate]:
    """Every date from start to end inclusive; empty if start is after end."""
    start_date = start.to_date()
    end_date = end.to_date()
    if start_date > end_date:
        return []

    dates = []
    current = start_date
    while current <= end_date:
        dates.append(CalendarDate.from_date(current))
        current += timedelta(days=1)
    return dates


def resolve_date_spec(date_spec: str) -> list[CalendarDate]:
    """
    Resolve a date-spec into calendar dates.

    An empty list means the spec could not be resolved. The caller is
    responsible for the maximum-count check.
    """
    text = date_spec.strip()

    if "," in text:
        dates = []
        for token in text.split(","):
            parsed = parse_single_date(token.strip())
            if parsed:
                dates.append(parsed)
        return dates

    if "-" in text:
        parts = [part.strip() for part in text.split("-")]
        if len(parts) != 2:
            return []
        start = parse_single_date(parts[0])
        end = parse_single_date(parts[1])
        if not start or not end:
            return []
        return generate_date_range(start, end)

    parsed = parse_single_date(text)
    return [parsed] if parsed else []
