"""API endpoint modules."""

from .admin import router as admin_router
from .confessions import router as confessions_router
from .system import router as system_router

__all__ = [
    "admin_router",
    "confessions_router",
    "system_router",
]
