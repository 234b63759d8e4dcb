"""Identifier and text validation applied before any query runs.

Pure functions: no I/O, no side effects.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId

from app.core.exceptions import EmptyText, InvalidIdentifier, MissingIdentifier


def validate_id(value: Any, label: str = "") -> ObjectId:
    """Return *value* as an ``ObjectId``.

    Args:
        value: Raw identifier from a path parameter or request body.
        label: Entity name used in the error message, e.g. ``"Reel"``.

    Raises:
        MissingIdentifier: value is absent or blank.
        InvalidIdentifier: value is not a 24-character hex ObjectId.
    """
    prefix = f"{label} ID" if label else "ID"
    if isinstance(value, ObjectId):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingIdentifier(f"{prefix} is missing")
    if not isinstance(value, str) or not ObjectId.is_valid(value.strip()):
        raise InvalidIdentifier(f"{prefix} is invalid")
    return ObjectId(value.strip())


def require_text(value: str | None, message: str = "Comment is missing") -> str:
    """Return *value* trimmed, or raise ``EmptyText`` when it is blank."""
    if value is None or not value.strip():
        raise EmptyText(message)
    return value.strip()
