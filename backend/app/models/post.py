"""
Snapgram Backend — Post SQLAlchemy Model
==========================================

What:  ORM model for the `posts` table plus the `post_likes` link table.
Why:   A post is one uploaded photo with a caption, its likes and comments.
Who:   Used by PostService (upload, feed, like/unlike) and UserService (profile).

Table Design Rationale:
    - image_path: relative path from STORAGE_ROOT (YYYY/MM/DD/<uuid>.<ext>);
      the file itself lives on disk and is served under /uploads/
    - post_likes: composite primary key (post_id, user_id), so a user can like a
      post at most once even if two like requests race
    - comments: derived from comments.post_id and ordered by creation time

Index on created_at DESC:
    The feed and profile pages always read newest first.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.user import User


post_likes = Table(
    "post_likes",
    Base.metadata,
    Column(
        "post_id",
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Post(Base):
    """
    A photo post.

    Lifecycle:
        1. Created by POST /api/posts/upload after the image is stored on disk
        2. liked_by grows/shrinks through like/unlike
        3. comments grow/shrink through the comment endpoints
        4. Never edited or deleted otherwise
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # No ondelete cascade: what happens to posts of a removed account is undecided
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    image_path: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Relative path from storage root to the uploaded image",
    )

    caption: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    owner: Mapped["User"] = relationship("User")

    liked_by: Mapped[List["User"]] = relationship(
        "User",
        secondary=post_likes,
    )

    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        order_by="Comment.created_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    @property
    def image_url(self) -> str:
        return f"/uploads/{self.image_path}"

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id}, created_at='{self.created_at}')>"
