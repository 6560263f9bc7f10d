"""
Snapgram Backend — Post Service (Uploads, Likes, Feed)
========================================================

What:  Creates photo posts, toggles likes, and assembles the feed.
Why:   Encapsulates the post rules independent of HTTP concerns.
How:   Composes FileService (image bytes on disk) with the ORM session.
Who:   Called by the posts router; build_post_response is reused by the
       profile page in UserService.

Upload Flow (POST /api/posts/upload):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐
    │  Upload  │───▶│  Validate   │───▶│  Insert Post │
    │  (Route) │    │  & Store    │    │  (DB flush)  │
    └──────────┘    │  (FileServ) │    └──────────────┘
                    └─────────────┘
    If the insert fails the stored image is removed again.

Likes:
    The like set is the source of truth (no counter column). like() rejects a
    user already in the set, unlike() rejects one who is not. The composite
    primary key on post_likes turns a concurrent double-like into an
    IntegrityError, reported as the same rejection. unlike() deletes the link
    row directly and rejects when the delete removed nothing, which also covers
    a concurrent unlike that got there first.

Feed Assembly (GET /api/posts/feed):
    SELECT posts ORDER BY created_at DESC, with owner, likers and comments
    (plus each comment's author) loaded by selectin queries: 5 queries in
    total regardless of feed size. Every post is visible to every
    authenticated caller; no pagination.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    DatabaseError,
    DomainRejectionError,
    NotFoundError,
    SnapgramError,
)
from app.models.comment import Comment
from app.models.post import Post, post_likes
from app.models.user import User
from app.schemas.common import UserSummary
from app.schemas.post import FeedItem, PostResponse
from app.services.comment_service import build_comment_response
from app.services.file_service import file_service

logger = logging.getLogger(__name__)


def build_post_response(post: Post) -> PostResponse:
    """Requires `post.liked_by` and `post.comments` to be loaded."""
    likes = [user.id for user in post.liked_by]
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        image_url=post.image_url,
        caption=post.caption or "",
        likes=likes,
        like_count=len(likes),
        comments=[comment.id for comment in post.comments],
        created_at=post.created_at,
    )


def build_feed_item(post: Post) -> FeedItem:
    likes = [user.id for user in post.liked_by]
    return FeedItem(
        id=post.id,
        image_url=post.image_url,
        caption=post.caption or "",
        created_at=post.created_at,
        user=UserSummary.model_validate(post.owner),
        likes=likes,
        like_count=len(likes),
        comments=[build_comment_response(comment) for comment in post.comments],
    )


class PostService:
    """
    Business logic for posts.

    Responsibilities:
        - upload_post(): validate + store image, insert post
        - get_feed(): every post, newest first, fully joined
        - like_post() / unlike_post(): set membership with rejection on no-op
    """

    async def _get_post_for_update(self, db: AsyncSession, post_id: uuid.UUID) -> Post:
        result = await db.execute(
            select(Post)
            .where(Post.id == post_id)
            .options(selectinload(Post.liked_by), selectinload(Post.comments))
        )
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return post

    async def upload_post(
        self,
        db: AsyncSession,
        user: User,
        filename: str,
        content: bytes,
        caption: Optional[str] = None,
        content_length: Optional[int] = None,
    ) -> PostResponse:
        """
        Store the image and create the post.

        Raises:
            ValidationError: bad extension, size or image content (→ 400)
            FileStorageError: disk write failed (→ 500)
            DatabaseError: post insert failed (→ 500, image removed)
        """
        absolute_path: Optional[str] = None

        try:
            absolute_path, relative_path = await file_service.validate_and_store(
                filename=filename,
                content=content,
                content_length=content_length,
            )

            post = Post(
                user_id=user.id,
                image_path=relative_path,
                caption=caption or "",
                liked_by=[],
                comments=[],
            )
            db.add(post)
            await db.flush()
            logger.info("Post %s created by %s (%s)", post.id, user.id, relative_path)

            return build_post_response(post)

        except SnapgramError:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            raise
        except Exception as e:
            if absolute_path:
                await file_service.cleanup_file(absolute_path)
            logger.error("Unexpected error in upload_post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while saving your post. Please try again.",
                context={"original_error": type(e).__name__},
            )

    async def get_feed(self, db: AsyncSession) -> List[FeedItem]:
        try:
            result = await db.execute(
                select(Post)
                .order_by(Post.created_at.desc())
                .options(
                    selectinload(Post.owner),
                    selectinload(Post.liked_by),
                    selectinload(Post.comments).selectinload(Comment.author),
                )
            )
            posts = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error assembling feed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load the feed. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [build_feed_item(post) for post in posts]

    async def like_post(self, db: AsyncSession, user: User, post_id: uuid.UUID) -> PostResponse:
        """
        Add `user` to the post's like set.

        Raises:
            NotFoundError: no such post (→ 404)
            DomainRejectionError: already liked (→ 400); the set is unchanged
        """
        post = await self._get_post_for_update(db, post_id)

        if any(liker.id == user.id for liker in post.liked_by):
            raise DomainRejectionError(message="You already liked this post")

        post.liked_by.append(user)
        try:
            await db.flush()
        except IntegrityError:
            raise DomainRejectionError(message="You already liked this post")

        logger.info("User %s liked post %s", user.id, post.id)
        return build_post_response(post)

    async def unlike_post(self, db: AsyncSession, user: User, post_id: uuid.UUID) -> PostResponse:
        """
        Remove `user` from the post's like set.

        Raises:
            NotFoundError: no such post (→ 404)
            DomainRejectionError: not liked (→ 400)
        """
        post = await self._get_post_for_update(db, post_id)

        # rowcount, not the loaded set, decides: a concurrent unlike may have
        # removed the row since the post was read
        result = await db.execute(
            delete(post_likes).where(
                post_likes.c.post_id == post.id,
                post_likes.c.user_id == user.id,
            )
        )
        if result.rowcount == 0:
            raise DomainRejectionError(message="You have not liked this post")

        db.expire(post, ["liked_by"])
        post = await self._get_post_for_update(db, post_id)

        logger.info("User %s unliked post %s", user.id, post.id)
        return build_post_response(post)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
