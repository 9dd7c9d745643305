"""API Pydantic models."""

from .requests import ChatEvent
from .responses import ErrorCodes, ErrorResponse, HealthResponse

__all__ = ["ChatEvent", "HealthResponse", "ErrorResponse", "ErrorCodes"]
