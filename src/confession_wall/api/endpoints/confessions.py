"""Public confession endpoints: feed, submission, likes, reports and comments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks

from confession_wall.api.dependencies import ConfessionId, MirrorDep, PolicyDep, RepositoryDep
from confession_wall.models import Comment, Confession
from confession_wall.schemas import (
    CommentCreate,
    CommentResponse,
    ConfessionCreate,
    ConfessionCreated,
    ConfessionResponse,
    ErrorResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/confessions",
    tags=["confessions"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("", response_model=list[ConfessionResponse])
async def list_confessions(repository: RepositoryDep) -> list[Confession]:
    """Return the public feed: approved confessions, newest first."""
    return repository.list_approved()


@router.post("", response_model=ConfessionCreated)
async def create_confession(
    payload: ConfessionCreate,
    repository: RepositoryDep,
    policy: PolicyDep,
    mirror: MirrorDep,
    background_tasks: BackgroundTasks,
) -> ConfessionCreated:
    """Submit a confession. It stays out of the feed until approved.

    Raises:
        InputValidationError: If content or category is missing or too long.
    """
    policy.check_confession(payload.content, payload.category, payload.nickname)
    confession_id = repository.create_confession(
        payload.content,
        payload.category,
        payload.nickname,
    )
    logger.info("Confession %s created in category %s", confession_id, payload.category)

    if mirror.enabled:
        background_tasks.add_task(mirror.confession_created, (payload.content or "").strip())

    return ConfessionCreated(id=confession_id)


@router.get("/{confession_id}/comments", response_model=list[CommentResponse])
async def list_comments(confession_id: ConfessionId, repository: RepositoryDep) -> list[Comment]:
    """Return comments on a confession, oldest first."""
    return repository.list_comments(confession_id)


@router.post("/{confession_id}/comments", response_model=SuccessResponse)
async def create_comment(
    confession_id: ConfessionId,
    payload: CommentCreate,
    repository: RepositoryDep,
    policy: PolicyDep,
) -> SuccessResponse:
    """Add a comment to a confession."""
    policy.check_comment(payload.content, payload.nickname)
    repository.create_comment(confession_id, payload.content, payload.nickname)
    return SuccessResponse()


@router.post("/{confession_id}/report", response_model=SuccessResponse)
async def report_confession(
    confession_id: ConfessionId,
    repository: RepositoryDep,
) -> SuccessResponse:
    """Flag a confession for moderator attention."""
    repository.increment_reports(confession_id)
    logger.info("Confession %s reported", confession_id)
    return SuccessResponse()


@router.post("/{confession_id}/like", response_model=SuccessResponse)
async def like_confession(
    confession_id: ConfessionId,
    repository: RepositoryDep,
    mirror: MirrorDep,
    background_tasks: BackgroundTasks,
) -> SuccessResponse:
    """Add one like to a confession."""
    content, likes = repository.increment_likes(confession_id)

    # Background tasks from concurrent likes may reach the mirror out of order;
    # its count can lag the local one until the next like.
    if mirror.enabled:
        background_tasks.add_task(mirror.likes_updated, content, likes)

    return SuccessResponse()
