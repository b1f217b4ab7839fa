"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Acknowledgement returned by mutating endpoints."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Short, client-safe error message.")
