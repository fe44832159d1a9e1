"""
Markpad Backend — Bearer Token Identity Resolver
==================================================

What:  Resolves `Authorization: Bearer <jwt>` to a User row.
How:   HS256 JWT verified with python-jose; the user id is the `sub` claim.
Who:   `get_current_user` is a FastAPI dependency on every notes/bookmarks route.

Failure modes (all → AuthenticationError → 401):
    no bearer credentials            "No token provided. Authentication required."
    bad signature / expired / junk   "Invalid token. Please authenticate."
    valid token, unknown user        "Invalid token. User not found."

Token values are never logged.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import AuthenticationError
from app.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported with our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: uuid.UUID, expires_minutes: Optional[int] = None) -> str:
    """Sign a token for `user_id`. Used by operators and the test suite."""
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET is not set")
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes or settings.jwt_exp_minutes)
    payload = {"sub": str(user_id), "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> uuid.UUID:
    """
    Verify `token` and return the user id it was issued for.

    Raises:
        AuthenticationError: signature, expiry or subject is invalid, or
            no secret is configured.
    """
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured; rejecting bearer token")
        raise AuthenticationError()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError) as e:
        logger.info("Rejected bearer token: %s", type(e).__name__)
        raise AuthenticationError()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """FastAPI dependency: the authenticated User for this request."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided. Authentication required.")

    user_id = decode_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None:
        logger.info("Token subject %s has no user record", user_id)
        raise AuthenticationError("Invalid token. User not found.")
    return user
