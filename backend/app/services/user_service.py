"""
Snapgram Backend — User Service (Credential Store)
====================================================

What:  Registration, login, profile reads and selective profile updates.
Why:   Keeps credential rules (uniqueness, hashing, never exposing the hash)
       in one place, independent of HTTP concerns.
Who:   Called by the auth and user routers.

Uniqueness:
    Username and email are checked before insert so the common case returns a
    precise message. The UNIQUE constraints catch the race where two requests
    pass the check at once; the IntegrityError is mapped to the same 409.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from app.models.post import Post
from app.models.user import User
from app.schemas.user import (
    AuthResponse,
    FriendSummary,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    UserProfile,
)
from app.security import hash_password, verify_password
from app.services.post_service import build_post_response
from app.services.token_service import token_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def build_user_profile(user: User) -> UserProfile:
    """Requires `user.friends` to be loaded."""
    return UserProfile(
        id=user.id,
        username=user.username,
        email=user.email,
        description=user.description or "",
        profile_picture=user.profile_picture or "",
        friends=[
            FriendSummary(
                id=friend.id,
                username=friend.username,
                profile_picture=friend.profile_picture or "",
                description=friend.description or "",
            )
            for friend in user.friends
        ],
        created_at=user.created_at,
    )


class UserService:
    """
    Business logic for accounts and profiles.

    Responsibilities:
        - register(): create account, return token
        - authenticate(): verify credentials, return token
        - get_profile(): profile + friends + posts
        - list_users(): every profile
        - update_profile(): selective field replacement
    """

    async def _ensure_unique(
        self,
        db: AsyncSession,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        conditions = []
        if username is not None:
            conditions.append(User.username == username)
        if email is not None:
            conditions.append(User.email == email)
        if not conditions:
            return

        query = select(User).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)

        result = await db.execute(query)
        for existing in result.scalars().all():
            if username is not None and existing.username == username:
                raise ConflictError(message="Username is already taken", field="username")
            if email is not None and existing.email == email:
                raise ConflictError(message="Email is already registered", field="email")

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
    ) -> AuthResponse:
        """
        Create a new account.

        Raises:
            ConflictError: username or email already exists (→ 409)
        """
        email = email.lower()
        await self._ensure_unique(db, username=username, email=email)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            friends=[],
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            logger.info("Registration race lost for username=%s", username)
            raise ConflictError(message="Username or email is already registered")

        logger.info("User registered: %s (%s)", user.username, user.id)
        return AuthResponse(
            message="User registered successfully",
            token=token_service.issue(user.id),
            user=build_user_profile(user),
        )

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> AuthResponse:
        """
        Verify credentials and issue a token.

        Unknown email and wrong password produce the same message so the
        endpoint cannot be used to probe which emails are registered.
        """
        result = await db.execute(
            select(User)
            .where(User.email == email.lower())
            .options(selectinload(User.friends))
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user.id)
        return AuthResponse(
            message="Login successful",
            token=token_service.issue(user.id),
            user=build_user_profile(user),
        )

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> ProfileResponse:
        """
        Profile (without secrets) plus the user's posts, newest first.

        Raises:
            NotFoundError: no such user (→ 404)
        """
        try:
            result = await db.execute(
                select(User)
                .where(User.id == user_id)
                .options(selectinload(User.friends))
            )
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id))

            posts_result = await db.execute(
                select(Post)
                .where(Post.user_id == user_id)
                .order_by(Post.created_at.desc())
                .options(selectinload(Post.liked_by), selectinload(Post.comments))
            )
            posts = posts_result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the profile. Please try again.",
                context={"user_id": str(user_id)},
            )

        return ProfileResponse(
            user=build_user_profile(user),
            posts=[build_post_response(post) for post in posts],
        )

    async def list_users(self, db: AsyncSession) -> List[UserProfile]:
        result = await db.execute(
            select(User)
            .order_by(User.created_at)
            .options(selectinload(User.friends))
        )
        return [build_user_profile(user) for user in result.scalars().all()]

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        changes: ProfileUpdateRequest,
    ) -> ProfileUpdateResponse:
        """
        Replace only the fields present in the request.

        Fields omitted or sent as null keep their stored value. A new password
        is re-hashed before it is stored.

        Raises:
            ConflictError: the new username belongs to someone else (→ 409)
        """
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        if "username" in fields and fields["username"] != user.username:
            await self._ensure_unique(db, username=fields["username"], exclude_id=user.id)
            user.username = fields["username"]
        if "description" in fields:
            user.description = fields["description"]
        if "profile_picture" in fields:
            user.profile_picture = fields["profile_picture"]
        if "password" in fields:
            user.password_hash = hash_password(fields["password"])

        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError(message="Username is already taken", field="username")

        # The caller came from the auth gate without friends; the selectin
        # load fills that collection on the identity-mapped instance
        result = await db.execute(
            select(User)
            .where(User.id == user.id)
            .options(selectinload(User.friends))
        )
        refreshed = result.scalar_one()

        logger.info("Profile updated for %s: %s", user.id, sorted(fields))
        return ProfileUpdateResponse(
            message="Profile updated successfully",
            user=build_user_profile(refreshed),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
