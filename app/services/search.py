"""Search for top-liked reels and top-followed creators.

Both searches optionally narrow to users whose handle contains a
case-insensitive fragment; a fragment that matches no handle is an error
rather than an empty result.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId

from app.core.constants import RELATIONSHIPS, USERS
from app.core.exceptions import UserNotFound
from app.db.mongo import get_collection
from app.models.reel import AnnotatedReel
from app.models.user import CreatorRanking
from app.services.feed import get_most_liked_reels, search_reels_by_owner_handle
from app.services.users import find_user_ids_by_handle

NO_MATCHING_USERS = "No users found with the given username"


def search_top_liked_reels(user_name: str | None, viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    """Reels sorted by likes, optionally limited to owners matching *user_name*."""
    if not user_name or not user_name.strip():
        return get_most_liked_reels(viewer_id)
    try:
        return search_reels_by_owner_handle(user_name, viewer_id)
    except UserNotFound as exc:
        raise UserNotFound(NO_MATCHING_USERS) from exc


def search_top_followed_creators(user_name: str | None) -> list[CreatorRanking]:
    """Users sorted by follower count, optionally limited to handles matching *user_name*."""
    match: dict[str, Any] = {}
    if user_name and user_name.strip():
        user_ids = find_user_ids_by_handle(user_name)
        if not user_ids:
            raise UserNotFound(NO_MATCHING_USERS)
        match = {"_id": {"$in": user_ids}}

    pipeline: list[dict[str, Any]] = [
        {"$match": match},
        {"$sort": {"_id": 1}},
        {
            "$lookup": {
                "from": RELATIONSHIPS,
                "localField": "_id",
                "foreignField": "following",
                "as": "followers",
            },
        },
        {"$addFields": {"followers_count": {"$size": "$followers"}}},
        {"$sort": {"followers_count": -1, "_id": 1}},
    ]
    return [
        CreatorRanking(
            id=str(doc["_id"]),
            full_name=doc["full_name"],
            user_name=doc["user_name"],
            avatar=doc.get("avatar"),
            followers_count=doc["followers_count"],
        )
        for doc in get_collection(USERS).aggregate(pipeline)
    ]
