"""
Snapgram Backend — Comment Service
====================================

What:  Create, fetch and delete comments on posts.
Who:   Called by the posts router; build_comment_response is also used by
       the feed assembler.

Write model:
    A comment row carries its post_id, and a post's comment list is read from
    that column. Creating a comment is one insert, so there is no window in
    which the comment exists but the post does not list it. Deleting removes
    the row and with it the list entry.

Ownership:
    Only the author may delete. The check compares user ids; there is no
    moderator override.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import ForbiddenError, NotFoundError
from app.models.comment import Comment
from app.models.post import Post
from app.models.user import User
from app.schemas.common import UserSummary
from app.schemas.post import CommentResponse

logger = logging.getLogger(__name__)


def build_comment_response(comment: Comment) -> CommentResponse:
    """Requires `comment.author` to be loaded."""
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=UserSummary.model_validate(comment.author),
    )


class CommentService:

    async def _get_comment(self, db: AsyncSession, comment_id: uuid.UUID) -> Comment:
        result = await db.execute(
            select(Comment)
            .where(Comment.id == comment_id)
            .options(selectinload(Comment.author))
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError(resource="comment", resource_id=str(comment_id))
        return comment

    async def create_comment(
        self,
        db: AsyncSession,
        user: User,
        post_id: uuid.UUID,
        content: str,
    ) -> CommentResponse:
        """
        Add a comment to a post.

        Raises:
            NotFoundError: the post does not exist (→ 404)
        """
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))

        comment = Comment(post_id=post.id, user_id=user.id, content=content, author=user)
        db.add(comment)
        await db.flush()

        logger.info("Comment %s added to post %s by %s", comment.id, post.id, user.id)
        return build_comment_response(comment)

    async def get_comment(self, db: AsyncSession, comment_id: uuid.UUID) -> CommentResponse:
        comment = await self._get_comment(db, comment_id)
        return build_comment_response(comment)

    async def delete_comment(
        self,
        db: AsyncSession,
        user: User,
        post_id: uuid.UUID,
        comment_id: uuid.UUID,
    ) -> CommentResponse:
        """
        Delete a comment owned by `user` and return it as it was.

        Raises:
            NotFoundError: post missing, comment missing, or the comment
                           belongs to a different post (→ 404)
            ForbiddenError: caller is not the author (→ 403)
        """
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))

        comment = await self._get_comment(db, comment_id)
        if comment.post_id != post.id:
            raise NotFoundError(resource="comment", resource_id=str(comment_id))

        if comment.user_id != user.id:
            logger.warning(
                "User %s tried to delete comment %s owned by %s",
                user.id, comment.id, comment.user_id,
            )
            raise ForbiddenError(message="You do not have permission to delete this comment")

        deleted = build_comment_response(comment)
        await db.delete(comment)
        await db.flush()

        logger.info("Comment %s deleted from post %s", comment_id, post_id)
        return deleted


# ── Singleton Instance ────────────────────────────────────────────────────
comment_service = CommentService()
