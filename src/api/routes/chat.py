"""Chat bot endpoint."""

import time

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_calendar_store, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import ChatEvent
from services.calendar import CalendarStore
from services.chat import handle_chat_message

router = APIRouter(prefix="/v1")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/chat/events")
async def chat_event_endpoint(
    request: Request,
    event: ChatEvent,
    store: CalendarStore = Depends(get_calendar_store),
    _api_key: str = Depends(verify_api_key),
):
    """
    Handle an inbound chat event.

    Returns {"text": ...} to reply, or {} when the message is ignored.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/chat/events",
        client_ip=get_client_ip(request),
        sender_name=event.user.display_name,
        event_type=event.type,
    )

    try:
        if event.type != "MESSAGE":
            request_log.outcome = "ignored"
            request_log.status_code = 200
            return {}

        outcome = await handle_chat_message(
            store,
            event.user.display_name,
            event.command_text,
            is_bot=event.is_bot,
            is_mentioned=event.is_mentioned,
        )

        request_log.outcome = outcome.outcome
        request_log.command_type = outcome.command_type
        request_log.succeeded_count = outcome.succeeded
        request_log.failed_count = outcome.failed
        request_log.error_message = outcome.error_message
        request_log.status_code = 200

        if outcome.text is None:
            return {}
        return {"text": outcome.text}

    except Exception as e:
        request_log.outcome = "internal_error"
        request_log.status_code = 500
        request_log.error_message = str(e)
        raise

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        # Always log the request
        try:
            log_request(request_log)
        except Exception as e:
            # Don't fail the request if logging fails
            print(f"Failed to log chat request: {e}")
