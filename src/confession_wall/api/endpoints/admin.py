"""Moderation endpoints. Every route requires the moderator token."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from confession_wall.api.dependencies import (
    CommentId,
    ConfessionId,
    ModerationDep,
    require_admin,
)
from confession_wall.models import Confession
from confession_wall.schemas import (
    ConfessionResponse,
    ErrorResponse,
    ModerationStats,
    StatusUpdate,
    SuccessResponse,
)
from confession_wall.services.moderation import QueueFilter

router = APIRouter(
    prefix="/admin",
    tags=["moderation"],
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("/confessions", response_model=list[ConfessionResponse])
async def get_moderation_queue(
    moderation: ModerationDep,
    queue_filter: QueueFilter = Query(
        QueueFilter.ALL,
        alias="filter",
        description="Restrict the queue to one status, or to reported confessions",
    ),
) -> list[Confession]:
    """List confessions of any status, most reported first, then newest first."""
    return moderation.queue(queue_filter)


@router.get("/stats", response_model=ModerationStats)
async def get_moderation_stats(moderation: ModerationDep) -> dict[str, int]:
    return moderation.stats()


@router.patch("/confessions/{confession_id}", response_model=SuccessResponse)
async def update_confession_status(
    confession_id: ConfessionId,
    payload: StatusUpdate,
    moderation: ModerationDep,
) -> SuccessResponse:
    """Approve, reject or re-queue a confession."""
    moderation.set_status(confession_id, payload.status)
    return SuccessResponse()


@router.delete("/confessions/{confession_id}", response_model=SuccessResponse)
async def delete_confession(
    confession_id: ConfessionId,
    moderation: ModerationDep,
) -> SuccessResponse:
    """Permanently delete a confession and its comments."""
    moderation.delete(confession_id)
    return SuccessResponse()


@router.delete("/comments/{comment_id}", response_model=SuccessResponse)
async def delete_comment(comment_id: CommentId, moderation: ModerationDep) -> SuccessResponse:
    moderation.delete_comment(comment_id)
    return SuccessResponse()
