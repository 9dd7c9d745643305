"""
Result types for parsing a chat command.
"""

from dataclasses import dataclass

from models.events import AttendanceRequest


@dataclass(frozen=True)
class ParseOk:
    """Message matched the template and every field is valid."""

    request: AttendanceRequest


@dataclass(frozen=True)
class FormatError:
    """Message does not match the structured template."""

    message: str = "message does not match the attendance template"


@dataclass(frozen=True)
class ValidationError:
    """Message matched the template but a field failed validation."""

    reason: str


ParseResult = ParseOk | FormatError | ValidationError
