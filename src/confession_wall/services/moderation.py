"""Moderation rules for Confession Wall.

A confession moves between ``pending``, ``approved`` and ``rejected`` only
through explicit moderator actions. Any status may replace any other so a
moderator can undo a mistaken decision. Report counts never change the status;
they only push a confession up the moderation queue.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement

from confession_wall.models import Confession, ConfessionStatus

if TYPE_CHECKING:
    from confession_wall.repositories.confession_repo import ConfessionRepository

logger = logging.getLogger(__name__)


class QueueFilter(str, Enum):
    """Views offered by the moderation dashboard."""

    ALL = "all"
    PENDING = "pending"
    REPORTED = "reported"
    APPROVED = "approved"
    REJECTED = "rejected"


def visible_clause() -> ColumnElement[bool]:
    """Return the public-feed predicate.

    This is the only place that decides public visibility. It is evaluated
    against the stored status on every read.
    """
    return Confession.status == ConfessionStatus.APPROVED.value


def queue_filter_clause(queue_filter: QueueFilter) -> ColumnElement[bool] | None:
    """Translate a dashboard filter into a SQL criterion (None means no filter)."""
    if queue_filter is QueueFilter.ALL:
        return None
    if queue_filter is QueueFilter.REPORTED:
        return Confession.reports_count > 0
    return Confession.status == ConfessionStatus(queue_filter.value).value


class ModerationService:
    """Service handling moderator actions and the moderation queue."""

    def __init__(self, repository: ConfessionRepository) -> None:
        self.repository = repository

    def queue(self, queue_filter: QueueFilter = QueueFilter.ALL) -> list[Confession]:
        """Return confessions for moderators, most reported and newest first."""
        return self.repository.list_all(queue_filter_clause(queue_filter))

    def set_status(self, confession_id: int, new_status: ConfessionStatus) -> None:
        """Set the status of a confession, whatever its current status is.

        Raises:
            NotFoundError: If the confession does not exist.
        """
        self.repository.set_status(confession_id, new_status)
        logger.info("Confession %s moved to %s", confession_id, new_status.value)

    def delete(self, confession_id: int) -> None:
        """Delete a confession and all of its comments."""
        self.repository.delete_confession(confession_id)
        logger.info("Confession %s deleted by moderator", confession_id)

    def delete_comment(self, comment_id: int) -> None:
        self.repository.delete_comment(comment_id)
        logger.info("Comment %s deleted by moderator", comment_id)

    def stats(self) -> dict[str, int]:
        """Return per-status totals plus the number of reported confessions."""
        counts = self.repository.count_by_status()
        summary = {status.value: counts.get(status.value, 0) for status in ConfessionStatus}
        summary["reported"] = self.repository.count_reported()
        summary["total"] = sum(counts.values())
        return summary
