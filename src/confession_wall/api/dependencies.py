"""Shared API dependencies for moderation access and injected services."""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from confession_wall.core.settings import Settings
from confession_wall.db.session import get_db
from confession_wall.repositories import ConfessionRepository
from confession_wall.services.mirror import MirrorDispatcher
from confession_wall.services.moderation import ModerationService
from confession_wall.services.policy import ContentPolicy

# HTTP Bearer scheme for the moderator token; errors are raised by require_admin
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

# Row ids are signed 64-bit integers in every supported database
MAX_ROW_ID = 2**63 - 1
ConfessionId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
CommentId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


def get_settings(request: Request) -> Settings:
    """Return the settings the running app was built with."""
    return request.app.state.settings


def get_repository(db: SessionDep) -> ConfessionRepository:
    return ConfessionRepository(db)


RepositoryDep = Annotated[ConfessionRepository, Depends(get_repository)]


def get_moderation_service(repository: RepositoryDep) -> ModerationService:
    return ModerationService(repository)


def get_mirror(request: Request) -> MirrorDispatcher:
    return request.app.state.mirror


def get_content_policy(request: Request) -> ContentPolicy:
    return request.app.state.content_policy


SettingsDep = Annotated[Settings, Depends(get_settings)]
ModerationDep = Annotated[ModerationService, Depends(get_moderation_service)]
MirrorDep = Annotated[MirrorDispatcher, Depends(get_mirror)]
PolicyDep = Annotated[ContentPolicy, Depends(get_content_policy)]


def require_admin(
    app_settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> None:
    """Reject requests that do not carry the configured moderator token.

    Raises:
        HTTPException: 503 when no token is configured, 401 when the supplied
            token is missing or wrong.
    """
    if not app_settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Moderation is not configured",
        )
    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode(),
        app_settings.admin_token.encode(),
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid moderator credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
