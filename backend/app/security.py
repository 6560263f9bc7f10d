"""
Snapgram Backend — Password Hashing & Auth Gate
=================================================

What:  Two security primitives shared by services and routes:
       1. Password hashing (bcrypt via passlib's CryptContext)
       2. The auth gate: a FastAPI dependency that turns an
          `Authorization: Bearer <token>` header into a User row
Who:   UserService hashes/verifies passwords; every protected route declares
       `current_user: User = Depends(get_current_user)`.

Auth gate flow (per request, stateless):
    header missing / not Bearer  → 401 "Not authorized, no token"
    token invalid / expired      → 401 (from TokenService.verify)
    user id no longer exists     → 401 "User no longer exists"
    otherwise                    → User handed to the route handler

The gate shares the request's database session (FastAPI caches
`get_db_session` per request), so the returned User belongs to the same
unit of work as everything the handler does afterwards.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import AuthenticationError
from app.models.user import User
from app.services.token_service import token_service

logger = logging.getLogger(__name__)

# bcrypt generates a fresh random salt for every hash; the cost factor is configurable
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# auto_error=False: we raise our own AuthenticationError so the 401 body
# matches every other error response
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the bearer token on the request to the calling user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Not authorized, no token")

    user_id = token_service.verify(credentials.credentials)

    user = await db.get(User, user_id)
    if user is None:
        logger.info("Token for missing user %s rejected", user_id)
        raise AuthenticationError(message="User no longer exists")

    return user
