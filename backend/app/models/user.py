"""
Snapgram Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table plus the `friendships` link table.
Why:   Holds identity, hashed credentials, profile fields and the friend graph.
Who:   Used by the user, friend and post services, the auth gate, and Alembic.

Table Design Rationale:
    - UUID primary key: non-sequential, safe to expose in URLs
    - username / email: UNIQUE constraints back up the service pre-check, so a
      registration race still cannot store two identical handles
    - password_hash: bcrypt output only; the plaintext never reaches the database
    - friendships: one row per direction. A friendship between A and B is the
      pair (A, B) + (B, A), always written and deleted in the same transaction.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


# Directed link rows; symmetry is maintained by friend_service
friendships = Table(
    "friendships",
    Base.metadata,
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "friend_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created by POST /api/auth/register (password hashed before insert)
        2. Profile fields updated selectively by PUT /api/user/profile/edit
        3. Friend links added/removed in pairs
        4. Never deleted through the API
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Public handle, globally unique",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login identifier, globally unique",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash (salted); never returned by the API",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Free-form bio",
    )

    profile_picture: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        default="",
        comment="Avatar reference (URL or path)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    friends: Mapped[List["User"]] = relationship(
        "User",
        secondary=friendships,
        primaryjoin=lambda: User.id == friendships.c.user_id,
        secondaryjoin=lambda: User.id == friendships.c.friend_id,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
