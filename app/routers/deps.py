"""Authentication dependencies shared by the routers.

The access token is read from an ``Authorization: Bearer`` header, falling
back to the ``accessToken`` cookie.  ``get_current_user`` rejects anonymous
callers; ``get_optional_viewer`` lets listings run without a viewer.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import AuthenticationError, UserNotFound
from app.core.security import TokenType, decode_token
from app.services.users import get_user

bearer = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get("accessToken")


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> dict[str, Any]:
    """Return the authenticated user document (without private fields)."""
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError()

    claims = decode_token(token, TokenType.access)
    if not ObjectId.is_valid(claims["_id"]):
        raise AuthenticationError("Invalid access token")
    try:
        return get_user(ObjectId(claims["_id"]))
    except UserNotFound as exc:
        raise AuthenticationError("Invalid access token") from exc


def get_optional_viewer(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> ObjectId | None:
    """Return the viewer id when a valid token is present, ``None`` otherwise.

    A token that is present but invalid is still rejected.
    """
    if not _extract_token(request, credentials):
        return None
    return get_current_user(request, credentials)["_id"]
