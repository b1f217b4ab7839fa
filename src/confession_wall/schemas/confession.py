"""Confession-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from confession_wall.models import ConfessionStatus


class ConfessionCreate(BaseModel):
    """Schema for submitting a confession.

    Fields are optional here so that a missing value reaches the store's own
    presence check and produces its error message.
    """

    content: str | None = Field(None, description="Confession text")
    category: str | None = Field(None, description="Category identifier")
    nickname: str | None = Field(None, description="Display name; defaults to Anonymous")


class ConfessionCreated(BaseModel):
    """Identifier of a newly stored confession."""

    id: int


class ConfessionResponse(BaseModel):
    """Schema for confession information returned by the API."""

    id: int
    content: str
    category: str
    nickname: str | None
    status: str
    created_at: datetime
    likes: int
    reports_count: int

    model_config = ConfigDict(from_attributes=True)


class StatusUpdate(BaseModel):
    """Moderator request to change a confession's status."""

    status: ConfessionStatus


class ModerationStats(BaseModel):
    """Totals shown on the moderation dashboard."""

    pending: int
    approved: int
    rejected: int
    reported: int
    total: int
