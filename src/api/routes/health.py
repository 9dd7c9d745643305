"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION, CALENDAR_ID, CALENDAR_USER_ID

router = APIRouter()


def calendar_configured() -> bool:
    return bool(CALENDAR_USER_ID and CALENDAR_ID)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if the attendance calendar is not configured.
    """
    configured = calendar_configured()
    timestamp = datetime.now(timezone.utc).isoformat()

    if configured:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            calendar_configured=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                calendar_configured=False,
                timestamp=timestamp,
                error="Attendance calendar not configured",
            ).model_dump(),
        )
