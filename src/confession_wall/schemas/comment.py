"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for posting a comment on a confession."""

    content: str | None = Field(None, description="Comment text")
    nickname: str | None = Field(None, description="Display name; defaults to Anonymous")


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    confession_id: int
    content: str
    nickname: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
