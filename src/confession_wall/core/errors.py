"""Domain exceptions shared by the store, the services and the API layer."""

from __future__ import annotations


class ConfessionWallError(RuntimeError):
    """Base exception for all Confession Wall failures."""


class InputValidationError(ConfessionWallError):
    """Raised when a required field is missing or breaks the content policy."""


class NotFoundError(ConfessionWallError):
    """Raised when the target confession does not exist."""


class StoreError(ConfessionWallError):
    """Raised when the underlying database fails.

    The message is safe to show to clients; the original exception is chained
    for logging only.
    """


class MirrorError(ConfessionWallError):
    """Raised by mirror adapters. Never propagated past the dispatcher."""
