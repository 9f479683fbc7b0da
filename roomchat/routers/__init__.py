"""Routers package for roomchat."""

from .messages import router as messages_router
from .realtime import router as realtime_router
from .rooms import router as rooms_router

__all__ = ["messages_router", "realtime_router", "rooms_router"]
