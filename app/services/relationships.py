"""Follow toggles and follower / following listings."""

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId

from app.core.constants import RELATIONSHIPS, USERS
from app.core.exceptions import SelfFollowRejected
from app.db.mongo import get_collection
from app.models.relationship import FollowerEntry, FollowingEntry
from app.services.toggle import ToggleEngine
from app.services.users import resolve_user_id, user_summary
from app.services.validators import validate_id

logger = logging.getLogger(__name__)

follow_toggle = ToggleEngine(RELATIONSHIPS)


def toggle_follow(actor_id: ObjectId, target_user_id: str) -> bool:
    """Follow or unfollow *target_user_id*; returns the new followed state.

    Raises:
        SelfFollowRejected: the actor targets itself.  Checked before any
            query, so nothing is written.
        UserNotFound: the target does not exist.
    """
    target_oid = validate_id(target_user_id, "User")
    if target_oid == actor_id:
        raise SelfFollowRejected()

    resolve_user_id(target_oid)
    result = follow_toggle.toggle({"follower": actor_id, "following": target_oid})
    return result.active


def _followed_by(viewer_id: ObjectId | None, user_ids: list[ObjectId]) -> set[ObjectId]:
    """Return the subset of *user_ids* that *viewer_id* follows."""
    if viewer_id is None or not user_ids:
        return set()
    cursor = get_collection(RELATIONSHIPS).find(
        {"follower": viewer_id, "following": {"$in": user_ids}},
        {"following": 1},
    )
    return {rel["following"] for rel in cursor}


def _related_users(match: dict[str, Any], local_field: str) -> list[dict[str, Any]]:
    pipeline: list[dict[str, Any]] = [
        {"$match": match},
        {"$sort": {"_id": 1}},
        {
            "$lookup": {
                "from": USERS,
                "localField": local_field,
                "foreignField": "_id",
                "as": "related_user",
            },
        },
        {"$unwind": {"path": "$related_user"}},
    ]
    return list(get_collection(RELATIONSHIPS).aggregate(pipeline))


def get_followers(user_id: str, viewer_id: ObjectId | None) -> list[FollowerEntry]:
    """Users following *user_id*, each flagged with whether the viewer follows them."""
    user_oid = resolve_user_id(user_id)
    docs = _related_users({"following": user_oid}, "follower")
    followed = _followed_by(viewer_id, [doc["follower"] for doc in docs])
    return [
        FollowerEntry(
            id=str(doc["_id"]),
            follower=user_summary(doc["related_user"]),
            is_following=doc["follower"] in followed,
        )
        for doc in docs
    ]


def get_followings(user_id: str, viewer_id: ObjectId | None) -> list[FollowingEntry]:
    """Users *user_id* follows, each flagged with whether the viewer follows them."""
    user_oid = resolve_user_id(user_id)
    docs = _related_users({"follower": user_oid}, "following")
    followed = _followed_by(viewer_id, [doc["following"] for doc in docs])
    return [
        FollowingEntry(
            id=str(doc["_id"]),
            followed_user=user_summary(doc["related_user"]),
            is_following=doc["following"] in followed,
        )
        for doc in docs
    ]
