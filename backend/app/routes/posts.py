"""
Snapgram Backend — Post Routes
================================

What:  Upload, feed, likes and comments. Every route requires a bearer token.

Route Inventory:
    POST   /api/posts/upload                          multipart image + caption → 201
    GET    /api/posts/feed                            every post, newest first
    POST   /api/posts/{post_id}/like                  like → updated post
    DELETE /api/posts/{post_id}/like                  unlike → updated post
    POST   /api/posts/{post_id}/comments              add comment → 201
    GET    /api/posts/comments/{comment_id}           single comment
    DELETE /api/posts/{post_id}/comments/{comment_id} owner-only delete

Routes stay thin: read the request, call a service, return its model. Errors
are raised by the services and formatted by the global handlers in main.py.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import ValidationError
from app.models.user import User
from app.schemas.common import ErrorResponse
from app.schemas.post import CommentCreateRequest, CommentResponse, FeedItem, PostResponse
from app.security import get_current_user
from app.services.comment_service import comment_service
from app.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["Posts"])


# ── Posts ─────────────────────────────────────────────────────────────────

@router.post(
    "/upload",
    status_code=201,
    response_model=PostResponse,
    responses={
        400: {"description": "Missing or invalid image", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Upload a photo post",
    description="Multipart upload with an `image` file part (JPEG, PNG, GIF or WEBP) and an optional `caption`.",
)
async def upload_post(
    image: Optional[UploadFile] = File(None, description="Image file"),
    caption: str = Form("", max_length=2200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    if image is None:
        raise ValidationError(message="An image file is required", field="image")

    try:
        content = await image.read()
        logger.info(
            "Upload from %s: filename=%s, size=%d bytes",
            current_user.id, image.filename or "unknown", len(content),
        )
        return await post_service.upload_post(
            db=db,
            user=current_user,
            filename=image.filename or "upload",
            content=content,
            caption=caption,
            content_length=image.size,
        )
    finally:
        await image.close()


@router.get("/feed", response_model=List[FeedItem], summary="Every post, newest first")
async def get_feed(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[FeedItem]:
    return await post_service.get_feed(db)


# ── Likes ─────────────────────────────────────────────────────────────────

@router.post(
    "/{post_id}/like",
    response_model=PostResponse,
    responses={
        400: {"description": "Already liked", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Like a post",
)
async def like_post(
    post_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.like_post(db, current_user, post_id)


@router.delete(
    "/{post_id}/like",
    response_model=PostResponse,
    responses={
        400: {"description": "Not liked", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Remove a like",
)
async def unlike_post(
    post_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.unlike_post(db, current_user, post_id)


# ── Comments ──────────────────────────────────────────────────────────────

@router.post(
    "/{post_id}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Comment on a post",
)
async def create_comment(
    post_id: uuid.UUID,
    body: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(db, current_user, post_id, body.content)


@router.get(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
    summary="Fetch a single comment",
)
async def get_comment(
    comment_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.get_comment(db, comment_id)


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_model=CommentResponse,
    responses={
        403: {"description": "Not the comment's author", "model": ErrorResponse},
        404: {"description": "Post or comment not found", "model": ErrorResponse},
    },
    summary="Delete your own comment",
)
async def delete_comment(
    post_id: uuid.UUID,
    comment_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.delete_comment(db, current_user, post_id, comment_id)
