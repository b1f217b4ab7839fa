"""Data access helpers for confessions and comments."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from confession_wall.core.errors import InputValidationError, NotFoundError, StoreError
from confession_wall.models import ANONYMOUS_NICKNAME, Comment, Confession, ConfessionStatus
from confession_wall.services.moderation import visible_clause

__all__ = ["ConfessionRepository"]

logger = logging.getLogger(__name__)

CONFESSION_NOT_FOUND = "Confession not found"


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


def _nickname(value: str | None) -> str:
    return _clean(value) or ANONYMOUS_NICKNAME


class ConfessionRepository:
    """Thin wrapper around database access for confessions and comments.

    Every mutating method commits before returning. Counter updates are issued
    as a single ``UPDATE`` so concurrent requests never lose an increment.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Database error while trying to %s", action)
            raise StoreError(f"Failed to {action}") from exc

    # Confessions

    def create_confession(
        self,
        content: str | None,
        category: str | None,
        nickname: str | None = None,
    ) -> int:
        """Insert a pending confession and return its id.

        Raises:
            InputValidationError: If content or category is empty.
        """
        content, category = _clean(content), _clean(category)
        if not content or not category:
            raise InputValidationError("Content and category are required")

        confession = Confession(
            content=content,
            category=category,
            nickname=_nickname(nickname),
            status=ConfessionStatus.PENDING.value,
            likes=0,
            reports_count=0,
        )
        with self._guard("save confession"):
            self.session.add(confession)
            self.session.commit()
            return confession.id

    def get_confession(self, confession_id: int) -> Confession | None:
        """Return a confession by identifier."""
        with self._guard("load confession"):
            return self.session.get(Confession, confession_id)

    def list_approved(self) -> list[Confession]:
        """Return approved confessions, newest first."""
        stmt = (
            select(Confession)
            .where(visible_clause())
            .order_by(Confession.created_at.desc(), Confession.id.desc())
        )
        with self._guard("fetch confessions"):
            return list(self.session.scalars(stmt))

    def list_all(self, criterion: ColumnElement[bool] | None = None) -> list[Confession]:
        """Return every confession, most reported first, then newest first."""
        stmt = select(Confession)
        if criterion is not None:
            stmt = stmt.where(criterion)
        stmt = stmt.order_by(
            Confession.reports_count.desc(),
            Confession.created_at.desc(),
            Confession.id.desc(),
        )
        with self._guard("fetch confessions for admin"):
            return list(self.session.scalars(stmt))

    def set_status(self, confession_id: int, status: ConfessionStatus | str) -> None:
        """Overwrite the status of a confession.

        Raises:
            NotFoundError: If the confession does not exist.
        """
        value = status.value if isinstance(status, ConfessionStatus) else status
        stmt = update(Confession).where(Confession.id == confession_id).values(status=value)
        with self._guard("update status"):
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                self.session.rollback()
                raise NotFoundError(CONFESSION_NOT_FOUND)
            self.session.commit()

    def delete_confession(self, confession_id: int) -> None:
        """Delete a confession; its comments go with it.

        Raises:
            NotFoundError: If the confession does not exist.
        """
        with self._guard("delete confession"):
            confession = self.session.get(Confession, confession_id)
            if confession is None:
                raise NotFoundError(CONFESSION_NOT_FOUND)
            self.session.delete(confession)
            self.session.commit()

    def increment_likes(self, confession_id: int) -> tuple[str, int]:
        """Add one like and return the confession's content and new like count.

        The count is the value written by this statement, not a later re-read.

        Raises:
            NotFoundError: If the confession does not exist.
        """
        return self._increment(confession_id, "likes", "like")

    def increment_reports(self, confession_id: int) -> None:
        """Add one report.

        Raises:
            NotFoundError: If the confession does not exist.
        """
        self._increment(confession_id, "reports_count", "report confession")

    def _increment(self, confession_id: int, counter: str, action: str) -> tuple[str, int]:
        column = getattr(Confession, counter)
        stmt = (
            update(Confession)
            .where(Confession.id == confession_id)
            .values({counter: column + 1})
        )
        with self._guard(action):
            if self.session.get_bind().dialect.update_returning:
                row = self.session.execute(stmt.returning(Confession.content, column)).one_or_none()
            else:
                result = self.session.execute(stmt)
                row = None
                if result.rowcount:
                    row = self.session.execute(
                        select(Confession.content, column).where(Confession.id == confession_id)
                    ).one()
            if row is None:
                self.session.rollback()
                raise NotFoundError(CONFESSION_NOT_FOUND)
            self.session.commit()
            return row[0], int(row[1])

    def count_by_status(self) -> dict[str, int]:
        """Return the number of confessions per stored status."""
        stmt = select(Confession.status, func.count()).group_by(Confession.status)
        with self._guard("count confessions"):
            return {status: int(total) for status, total in self.session.execute(stmt)}

    def count_reported(self) -> int:
        stmt = select(func.count()).select_from(Confession).where(Confession.reports_count > 0)
        with self._guard("count confessions"):
            return int(self.session.scalar(stmt) or 0)

    # Comments

    def list_comments(self, confession_id: int) -> list[Comment]:
        """Return comments for a confession, oldest first."""
        stmt = (
            select(Comment)
            .where(Comment.confession_id == confession_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        with self._guard("fetch comments"):
            return list(self.session.scalars(stmt))

    def create_comment(
        self,
        confession_id: int,
        content: str | None,
        nickname: str | None = None,
    ) -> int:
        """Attach a comment to an existing confession and return its id.

        Raises:
            InputValidationError: If content is empty.
            NotFoundError: If the confession does not exist.
        """
        content = _clean(content)
        if not content:
            raise InputValidationError("Comment content required")

        with self._guard("save comment"):
            if self.session.get(Confession, confession_id) is None:
                raise NotFoundError(CONFESSION_NOT_FOUND)
            comment = Comment(
                confession_id=confession_id,
                content=content,
                nickname=_nickname(nickname),
            )
            self.session.add(comment)
            self.session.commit()
            return comment.id

    def delete_comment(self, comment_id: int) -> None:
        """Delete a comment. Deleting a missing comment is not an error."""
        with self._guard("delete comment"):
            self.session.execute(delete(Comment).where(Comment.id == comment_id))
            self.session.commit()
