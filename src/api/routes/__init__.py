"""API route modules."""

from .chat import router as chat_router
from .health import router as health_router

__all__ = ["health_router", "chat_router"]
