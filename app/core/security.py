"""Password hashing and JWT helpers.

Passwords are hashed with bcrypt.  Access and refresh tokens are HS256 JWTs
signed with separate secrets from ``settings``; both carry the user id in
``_id`` and a ``type`` claim so one can never be used in place of the other.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenType(str, Enum):
    """JWT flavours issued by the API."""
    access = "access"
    refresh = "refresh"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a plain-text password with a fresh bcrypt salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    """Check *password* against a stored bcrypt hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("password_hash_malformed")
        return False


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def _secret_for(token_type: TokenType) -> str:
    if token_type is TokenType.access:
        return settings.ACCESS_TOKEN_SECRET
    return settings.REFRESH_TOKEN_SECRET


def create_access_token(user: dict[str, Any]) -> str:
    """Issue an access token embedding the public identity of *user*."""
    now = datetime.now(timezone.utc)
    payload = {
        "_id": str(user["_id"]),
        "email": user.get("email"),
        "user_name": user.get("user_name"),
        "full_name": user.get("full_name"),
        "type": TokenType.access.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(user: dict[str, Any]) -> str:
    """Issue a refresh token carrying only the user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "_id": str(user["_id"]),
        "type": TokenType.refresh.value,
        "iat": now,
        "exp": now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(payload, settings.REFRESH_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, token_type: TokenType = TokenType.access) -> dict[str, Any]:
    """Verify *token* and return its claims.

    Raises:
        AuthenticationError: expired, malformed, wrongly signed, or of the
            wrong type.
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError(f"Invalid {token_type.value} token") from exc

    if payload.get("type") != token_type.value or not payload.get("_id"):
        raise AuthenticationError(f"Invalid {token_type.value} token")
    return payload
