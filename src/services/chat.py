"""
Chat command handling: decide whether to answer, run the command, build the reply.
"""

from dataclasses import dataclass

from core.errors import StoreError
from core.parser import parse_attendance_message
from models.commands import ParseOk, ValidationError
from services.calendar import CalendarStore
from services.mutations import add_to_calendar, remove_from_calendar
from services.replies import (
    create_cancellation_message,
    create_format_error_message,
    create_help_message,
    create_store_error_message,
    create_success_message,
)


@dataclass
class ChatOutcome:
    """Reply text plus what happened, for the request log."""

    outcome: str  # ignored, help, format_error, created, deleted, store_error
    text: str | None = None
    command_type: str | None = None
    succeeded: int = 0
    failed: int = 0
    error_message: str | None = None


async def handle_chat_message(
    store: CalendarStore,
    sender_name: str,
    text: str,
    *,
    is_bot: bool = False,
    is_mentioned: bool = True,
) -> ChatOutcome:
    """
    Handle one inbound chat message.

    Bot-originated, non-mention and anonymous messages get no reply. An
    empty message gets the help text.
    """
    if is_bot or not is_mentioned or not (sender_name or "").strip():
        return ChatOutcome(outcome="ignored")

    user_message = (text or "").strip()
    if not user_message:
        return ChatOutcome(outcome="help", text=create_help_message(sender_name))

    result = parse_attendance_message(user_message)
    if not isinstance(result, ParseOk):
        reason = result.reason if isinstance(result, ValidationError) else result.message
        return ChatOutcome(
            outcome="format_error",
            text=create_format_error_message(),
            error_message=reason,
        )

    request = result.request
    try:
        if request.is_cancellation:
            summary = await remove_from_calendar(store, request, sender_name)
            reply = create_cancellation_message(summary)
            outcome = "deleted"
        else:
            summary = await add_to_calendar(store, request, sender_name)
            reply = create_success_message(summary)
            outcome = "created"
    except StoreError as e:
        print(f"Calendar unavailable: {e}")
        return ChatOutcome(
            outcome="store_error",
            text=create_store_error_message(request.is_cancellation, e),
            command_type=request.type.label,
            error_message=str(e),
        )

    return ChatOutcome(
        outcome=outcome,
        text=reply,
        command_type=request.type.label,
        succeeded=summary.succeeded,
        failed=summary.failed,
    )
