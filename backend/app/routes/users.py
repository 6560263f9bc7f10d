"""
Snapgram Backend — User Routes
================================

    GET    /api/user/profile/{user_id}          profile + posts
    GET    /api/user/all                        every profile
    PUT    /api/user/profile/edit               selective update of the caller
    POST   /api/user/add-friend/{friend_id}     mutual friendship
    DELETE /api/user/remove-friend/{friend_id}  end the friendship on both sides

All routes require a bearer token. Profiles never include the password hash.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.user import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    UserProfile,
)
from app.security import get_current_user
from app.services.friend_service import friend_service
from app.services.user_service import user_service

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.get(
    "/profile/{user_id}",
    response_model=ProfileResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="A user's profile and posts",
)
async def get_profile(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    return await user_service.get_profile(db, user_id)


@router.get("/all", response_model=List[UserProfile], summary="Every registered user")
async def list_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserProfile]:
    return await user_service.list_users(db)


@router.put(
    "/profile/edit",
    response_model=ProfileUpdateResponse,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        409: {"description": "Username already taken", "model": ErrorResponse},
    },
    summary="Update the caller's profile",
)
async def edit_profile(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileUpdateResponse:
    return await user_service.update_profile(db, current_user, body)


@router.post(
    "/add-friend/{friend_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Already friends, or yourself", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Add a friend",
)
async def add_friend(
    friend_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await friend_service.add_friend(db, current_user, friend_id)


@router.delete(
    "/remove-friend/{friend_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Not friends", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Remove a friend",
)
async def remove_friend(
    friend_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await friend_service.remove_friend(db, current_user, friend_id)
