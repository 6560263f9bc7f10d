"""
Snapgram Backend — Shared Response Schemas
============================================

What:  Response shapes used across several routers: errors, plain messages,
       health status, and the compact user summary embedded in posts/comments.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StrictRequest(BaseModel):
    """
    Base for every request body.

    Unknown fields are rejected (400 validation_error) rather than silently
    dropped, so a client typo such as "captoin" never looks like success.
    """

    model_config = ConfigDict(extra="forbid")


class UserSummary(BaseModel):
    """Owner / author block embedded in posts, feed items and comments."""
    id: uuid.UUID
    username: str
    profile_picture: str = ""

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str = Field(description="Human-readable result")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "error": "domain_rejection",
            "message": "You already liked this post",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
