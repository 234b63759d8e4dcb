"""Like toggles for reels and comments.

A like targets exactly one of a reel or a comment; the other reference is
stored as ``None`` so the unique ``(liked_by, reel_id, comment_id)`` index
covers both kinds.
"""

from __future__ import annotations

from bson import ObjectId

from app.core.constants import COMMENTS, LIKES, REELS
from app.core.exceptions import CommentNotFound, ReelNotFound
from app.db.mongo import get_collection
from app.services.toggle import ToggleEngine
from app.services.validators import validate_id

like_toggle = ToggleEngine(LIKES)


def toggle_reel_like(reel_id: str, user_id: ObjectId) -> bool:
    """Like or unlike a reel; returns the new liked state."""
    reel_oid = validate_id(reel_id, "Reel")
    if get_collection(REELS).find_one({"_id": reel_oid}, {"_id": 1}) is None:
        raise ReelNotFound()

    result = like_toggle.toggle({"reel_id": reel_oid, "comment_id": None, "liked_by": user_id})
    return result.active


def toggle_comment_like(comment_id: str, user_id: ObjectId) -> bool:
    """Like or unlike a comment; returns the new liked state."""
    comment_oid = validate_id(comment_id, "Comment")
    if get_collection(COMMENTS).find_one({"_id": comment_oid}, {"_id": 1}) is None:
        raise CommentNotFound()

    result = like_toggle.toggle({"reel_id": None, "comment_id": comment_oid, "liked_by": user_id})
    return result.active
