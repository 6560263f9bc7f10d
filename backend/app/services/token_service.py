"""
Snapgram Backend — Token Service
==================================

What:  Issues and verifies signed, time-limited bearer tokens (JWT).
Why:   Lets every request prove who the caller is without server-side sessions.
How:   PyJWT with a shared HMAC secret. The token carries the user id in `sub`
       plus `iat`/`exp`; verification checks signature and expiry only.
Who:   UserService (issue at register/login) and the auth gate (verify).

Token lifecycle:
    issue()  → valid until `exp` (ACCESS_TOKEN_EXPIRE_MINUTES)
    verify() → UUID of the user, or AuthenticationError

    There is no refresh, rotation, or revocation list: a token stays valid
    until it expires, even if the password changes.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenService:
    """Stateless JWT issuer/verifier bound to one secret and algorithm."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ):
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_minutes = expire_minutes or settings.access_token_expire_minutes

    def issue(self, user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token for `user_id`.

        Args:
            user_id: The authenticated user's id (stored as string `sub`)
            expires_delta: Override the configured lifetime (tests use a
                           negative delta to mint an already-expired token)
        """
        now = datetime.now(timezone.utc)
        lifetime = expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> uuid.UUID:
        """
        Validate signature and expiry and return the embedded user id.

        Raises:
            AuthenticationError: expired, badly signed, malformed, or missing `sub`
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(message="Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", type(e).__name__)
            raise AuthenticationError(message="Invalid token")

        try:
            return uuid.UUID(payload["sub"])
        except (ValueError, TypeError, AttributeError):
            raise AuthenticationError(message="Invalid token")


# ── Singleton Instance ────────────────────────────────────────────────────
token_service = TokenService()
