"""HTTP API for Confession Wall."""

from .endpoints import admin_router, confessions_router, system_router

__all__ = [
    "admin_router",
    "confessions_router",
    "system_router",
]
