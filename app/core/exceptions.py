"""Error taxonomy for the reels API.

Every failure a service can report is an ``ApiError`` subclass carrying an
HTTP status code, a stable ``error_code`` and a human-readable message.  The
handlers registered in ``app.main`` render them as the error envelope
``{success, statusCode, message, errors}``; nothing here is retried.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code: int = 400
    error_code: str = "API_ERROR"
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        errors: list[Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON error envelope for this error."""
        return {
            "success": False,
            "statusCode": self.status_code,
            "message": self.message,
            "errors": self.errors,
        }


# ---------------------------------------------------------------------------
# Caller input
# ---------------------------------------------------------------------------

class MissingIdentifier(ApiError):
    error_code = "MISSING_IDENTIFIER"
    default_message = "ID is missing"


class InvalidIdentifier(ApiError):
    error_code = "INVALID_IDENTIFIER"
    default_message = "ID is invalid"


class ValidationFailed(ApiError):
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class EmptyText(ApiError):
    error_code = "EMPTY_TEXT"
    default_message = "Comment is missing"


class SelfFollowRejected(ApiError):
    error_code = "SELF_FOLLOW_REJECTED"
    default_message = "You cannot follow yourself"


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class TargetNotFound(ApiError):
    status_code = 404
    error_code = "TARGET_NOT_FOUND"
    default_message = "Not found"


class ReelNotFound(TargetNotFound):
    error_code = "REEL_NOT_FOUND"
    default_message = "Reel not found"


class CommentNotFound(TargetNotFound):
    error_code = "COMMENT_NOT_FOUND"
    default_message = "Comment not found"


class ParentNotFound(TargetNotFound):
    error_code = "PARENT_NOT_FOUND"
    default_message = "Parent comment not found"


class UserNotFound(TargetNotFound):
    error_code = "USER_NOT_FOUND"
    default_message = "User not found"


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

class UserAlreadyExists(ApiError):
    status_code = 409
    error_code = "USER_ALREADY_EXISTS"
    default_message = "User with email or username already exists"


class AuthenticationError(ApiError):
    status_code = 401
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Unauthorized request"


class InvalidCredentials(AuthenticationError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid user credentials"


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class PersistenceFailure(ApiError):
    """An insert or update unexpectedly returned no document."""

    status_code = 500
    error_code = "PERSISTENCE_FAILURE"
    default_message = "Something went wrong while saving data"
