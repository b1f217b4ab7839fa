"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .common import ErrorResponse, SuccessResponse
from .confession import (
    ConfessionCreate,
    ConfessionCreated,
    ConfessionResponse,
    ModerationStats,
    StatusUpdate,
)

__all__ = [
    "CommentCreate", "CommentResponse",
    "ConfessionCreate", "ConfessionCreated", "ConfessionResponse",
    "ErrorResponse", "SuccessResponse",
    "ModerationStats", "StatusUpdate",
]
