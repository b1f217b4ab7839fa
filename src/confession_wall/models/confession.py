"""SQLAlchemy model for confessions and their moderation status."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confession_wall.db.session import Base
from confession_wall.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment

ANONYMOUS_NICKNAME = "Anonymous"


class ConfessionStatus(str, Enum):
    """Moderation status controlling public visibility."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Confession(Base):
    """Primary user-submitted content entity.

    New confessions start out pending and only reach the public feed once a
    moderator approves them.
    """

    __tablename__ = "confessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    nickname: Mapped[str | None] = mapped_column(Text, nullable=True, default=ANONYMOUS_NICKNAME)
    # Any value may replace any other; transition rules live in ModerationService.
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ConfessionStatus.PENDING.value,
        server_default=ConfessionStatus.PENDING.value,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    reports_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    comments: Mapped[list[Comment]] = relationship(
        back_populates="confession",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
