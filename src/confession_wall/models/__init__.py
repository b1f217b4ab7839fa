"""SQLAlchemy models for the Confession Wall application."""

from .comment import Comment
from .confession import ANONYMOUS_NICKNAME, Confession, ConfessionStatus

__all__ = [
    "ANONYMOUS_NICKNAME",
    "Comment",
    "Confession",
    "ConfessionStatus",
]
