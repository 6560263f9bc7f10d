"""
Snapgram Backend — Friend Service
===================================

Friendship is mutual. Each friendship is stored as two directed rows in the
`friendships` table (a→b and b→a), inserted or deleted by one statement, so
one side never exists without the other once the request commits.

The service writes the link rows directly instead of going through the
User.friends collections. The primary key on (user_id, friend_id) rejects a
second insert of the same pair, and the delete's rowcount says whether there
was anything to remove, so two racing requests end in one success and one
rejection.
"""

import logging
import uuid

from sqlalchemy import and_, delete, insert, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DomainRejectionError, NotFoundError
from app.models.user import User, friendships
from app.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

ALREADY_FRIENDS = "You are already friends"
NOT_FRIENDS = "You are not friends with this user"


def _pair_condition(a: uuid.UUID, b: uuid.UUID):
    return or_(
        and_(friendships.c.user_id == a, friendships.c.friend_id == b),
        and_(friendships.c.user_id == b, friendships.c.friend_id == a),
    )


class FriendService:

    async def _get_target(self, db: AsyncSession, user: User, friend_id: uuid.UUID) -> User:
        if friend_id == user.id:
            raise DomainRejectionError(message="You cannot be friends with yourself")

        friend = await db.get(User, friend_id)
        if friend is None:
            raise NotFoundError(resource="user", resource_id=str(friend_id))
        return friend

    async def _are_friends(self, db: AsyncSession, user_id: uuid.UUID, friend_id: uuid.UUID) -> bool:
        result = await db.execute(
            select(friendships.c.user_id).where(
                friendships.c.user_id == user_id,
                friendships.c.friend_id == friend_id,
            )
        )
        return result.first() is not None

    async def add_friend(self, db: AsyncSession, user: User, friend_id: uuid.UUID) -> MessageResponse:
        """
        Raises:
            DomainRejectionError: self-friendship or already friends (→ 400)
            NotFoundError: no such user (→ 404)
        """
        friend = await self._get_target(db, user, friend_id)

        if await self._are_friends(db, user.id, friend.id):
            raise DomainRejectionError(message=ALREADY_FRIENDS)

        try:
            await db.execute(
                insert(friendships),
                [
                    {"user_id": user.id, "friend_id": friend.id},
                    {"user_id": friend.id, "friend_id": user.id},
                ],
            )
        except IntegrityError:
            raise DomainRejectionError(message=ALREADY_FRIENDS)

        logger.info("Friendship created: %s <-> %s", user.id, friend.id)
        return MessageResponse(message="Friend added successfully")

    async def remove_friend(self, db: AsyncSession, user: User, friend_id: uuid.UUID) -> MessageResponse:
        """
        Raises:
            DomainRejectionError: self or not friends (→ 400)
            NotFoundError: no such user (→ 404)
        """
        friend = await self._get_target(db, user, friend_id)

        result = await db.execute(delete(friendships).where(_pair_condition(user.id, friend.id)))
        if result.rowcount == 0:
            raise DomainRejectionError(message=NOT_FRIENDS)

        logger.info("Friendship removed: %s <-> %s", user.id, friend.id)
        return MessageResponse(message="Friend removed successfully")


# ── Singleton Instance ────────────────────────────────────────────────────
friend_service = FriendService()
