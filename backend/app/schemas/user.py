"""
Snapgram Backend — User & Auth Schemas
========================================

What:  Request bodies for registration, login and profile edits, and the
       profile shapes returned by the auth and user routers.
Why:   The password hash lives on the ORM model only. None of the response
       models below has a field for it, so it cannot leak by accident.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import StrictRequest
from app.schemas.post import PostResponse

USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(StrictRequest):
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(StrictRequest):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ProfileUpdateRequest(StrictRequest):
    """
    Selective profile update.

    Only the fields present (and not null) in the body replace stored values;
    omitted fields keep their current value.
    """
    username: Optional[str] = Field(
        default=None, min_length=3, max_length=50, pattern=USERNAME_PATTERN
    )
    description: Optional[str] = Field(default=None, max_length=1000)
    profile_picture: Optional[str] = Field(default=None, max_length=512)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class FriendSummary(BaseModel):
    id: uuid.UUID
    username: str
    profile_picture: str = ""
    description: str = ""

    model_config = ConfigDict(from_attributes=True)


class UserProfile(BaseModel):
    """Public profile. Deliberately has no password/password_hash field."""
    id: uuid.UUID
    username: str
    email: str
    description: str = ""
    profile_picture: str = ""
    friends: List[FriendSummary] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""
    message: str
    token: str = Field(description="Bearer token; send as 'Authorization: Bearer <token>'")
    token_type: str = "bearer"
    user: UserProfile


class ProfileResponse(BaseModel):
    """GET /api/user/profile/{id}: the user plus their posts, newest first."""
    user: UserProfile
    posts: List[PostResponse]


class ProfileUpdateResponse(BaseModel):
    message: str = "Profile updated successfully"
    user: UserProfile
