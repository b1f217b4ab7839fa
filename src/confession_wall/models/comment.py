"""SQLAlchemy model for comments attached to confessions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confession_wall.db.session import Base
from confession_wall.db.time import utcnow

from .confession import ANONYMOUS_NICKNAME

if TYPE_CHECKING:
    from .confession import Confession


class Comment(Base):
    """Reply to a confession. Removed together with its parent."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    confession_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("confessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    nickname: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=ANONYMOUS_NICKNAME,
        server_default=ANONYMOUS_NICKNAME,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    confession: Mapped[Confession] = relationship(back_populates="comments")
