"""API route handlers.

This module exports all API routers for the FastAPI application.
"""

from .accounts import router as accounts_router
from .events import router as events_router
from .health import db_router as db_check_router
from .health import router as health_router
from .items import router as items_router
from .payments import router as payments_router

__all__ = [
    "health_router",
    "db_check_router",
    "accounts_router",
    "events_router",
    "items_router",
    "payments_router",
]
