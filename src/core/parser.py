"""
Structured attendance message parsing.

Expected message (one field per line, full-width colons):

    【勤怠連絡】
    氏名：山田太郎
    種別：全休
    日付：20250115
    備考：私用のため
"""

import re

from core.config import MAX_DATES_COUNT, MAX_NAME_LENGTH, MAX_REMARKS_LENGTH
from core.dates import resolve_date_spec
from models.commands import FormatError, ParseOk, ParseResult, ValidationError
from models.events import AttendanceRequest, AttendanceType

TYPE_ALTERNATION = "|".join(re.escape(t.label) for t in AttendanceType)

ATTENDANCE_MESSAGE = re.compile(
    r"【勤怠連絡】\s*\n"
    r"\s*氏名：\s*([^\s]+(?:\s+[^\s]+)*)\s*\n"
    rf"\s*種別：\s*({TYPE_ALTERNATION})\s*\n"
    r"\s*日付：\s*(.+)\s*\n"
    r"\s*備考：\s*(.+)",
    re.DOTALL,
)

MENTION = re.compile(r"@[A-Za-z0-9_-]+")


def remove_mentions(message: str) -> str:
    """Strip @mentions left in the message text."""
    return MENTION.sub("", message).strip()


def parse_attendance_message(message: str) -> ParseResult:
    """Parse a chat message into an AttendanceRequest."""
    clean_message = remove_mentions(message)

    match = ATTENDANCE_MESSAGE.search(clean_message)
    if not match:
        return FormatError()

    name, type_label, date_input, remarks = match.groups()

    person_name = name.strip()
    remarks = remarks.strip()

    if len(person_name) > MAX_NAME_LENGTH:
        return ValidationError(f"name exceeds {MAX_NAME_LENGTH} characters")
    if len(remarks) > MAX_REMARKS_LENGTH:
        return ValidationError(f"remarks exceed {MAX_REMARKS_LENGTH} characters")

    dates = resolve_date_spec(date_input)
    if not dates:
        return ValidationError(f"no valid dates in '{date_input.strip()}'")
    if len(dates) > MAX_DATES_COUNT:
        return ValidationError(f"{len(dates)} dates requested, maximum is {MAX_DATES_COUNT}")

    return ParseOk(
        AttendanceRequest(
            person_name=person_name,
            type=AttendanceType(type_label),
            dates=tuple(dates),
            original_date_text=date_input.strip(),
            remarks=remarks,
        )
    )
