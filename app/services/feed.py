"""Reel listings annotated for a viewer.

Every listing is one aggregation pipeline over ``reels``: a ``ReelFilter``
picks the ``$match`` (and optionally the likes ordering), then the owner,
the owner's followers, the likes and the comments of each reel are joined
and counted.  Viewer-relative flags are read off the joined records.

``is_saved`` reports whether the reel is in its *owner's* ``saved_reels``
list, not the viewer's.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from bson import ObjectId
from pymongo.errors import PyMongoError

from app.core.constants import COMMENTS, LIKES, REELS, RELATIONSHIPS, USERS
from app.core.exceptions import PersistenceFailure, ReelNotFound, UserNotFound
from app.db.mongo import get_collection, utcnow
from app.models.reel import AnnotatedReel, Reel, ReelCreate
from app.services.toggle import has_actor
from app.services.users import find_user_ids_by_handle, resolve_user_id, user_summary
from app.services.validators import require_text, validate_id

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReelFilter:
    """Selects which reels a listing returns and in what order."""
    match: dict[str, Any] = field(default_factory=dict)
    sort_by_likes: bool = False

    @classmethod
    def everything(cls) -> ReelFilter:
        return cls()

    @classmethod
    def by_owner(cls, owner_id: ObjectId) -> ReelFilter:
        return cls(match={"owner": owner_id})

    @classmethod
    def by_owners(cls, owner_ids: list[ObjectId], *, sort_by_likes: bool = False) -> ReelFilter:
        return cls(match={"owner": {"$in": owner_ids}}, sort_by_likes=sort_by_likes)

    @classmethod
    def by_ids(cls, reel_ids: list[ObjectId]) -> ReelFilter:
        return cls(match={"_id": {"$in": reel_ids}})

    @classmethod
    def most_liked(cls) -> ReelFilter:
        return cls(sort_by_likes=True)


def build_reel_pipeline(reel_filter: ReelFilter) -> list[dict[str, Any]]:
    """Return the aggregation pipeline for *reel_filter*.

    Reels come back in insertion order unless the filter sorts by
    ``likes_count`` (descending, ties in insertion order).
    """
    pipeline: list[dict[str, Any]] = [
        {"$match": reel_filter.match},
        {"$sort": {"_id": 1}},
        {
            "$lookup": {
                "from": RELATIONSHIPS,
                "localField": "owner",
                "foreignField": "following",
                "as": "owner_followers",
            },
        },
        {
            "$lookup": {
                "from": USERS,
                "localField": "owner",
                "foreignField": "_id",
                "as": "owner",
            },
        },
        {"$unwind": {"path": "$owner"}},
        {
            "$lookup": {
                "from": LIKES,
                "localField": "_id",
                "foreignField": "reel_id",
                "as": "reel_liked_by",
            },
        },
        {
            "$lookup": {
                "from": COMMENTS,
                "localField": "_id",
                "foreignField": "reel_id",
                "as": "comments",
            },
        },
        {
            "$addFields": {
                "likes_count": {"$size": "$reel_liked_by"},
                "comments_count": {"$size": "$comments"},
            },
        },
        {"$project": {"comments": 0}},
    ]
    if reel_filter.sort_by_likes:
        pipeline.append({"$sort": {"likes_count": -1, "_id": 1}})
    return pipeline


def _annotate(doc: dict[str, Any], viewer_id: ObjectId | None) -> AnnotatedReel:
    owner = doc["owner"]
    return AnnotatedReel(
        id=str(doc["_id"]),
        reel_url=doc["reel_url"],
        reel_thumbnail_url=doc.get("reel_thumbnail_url"),
        caption=doc.get("caption", ""),
        duration=doc.get("duration", 0),
        owner=user_summary(owner),
        likes_count=doc.get("likes_count", 0),
        is_liked=has_actor(doc.get("reel_liked_by"), "liked_by", viewer_id),
        comments_count=doc.get("comments_count", 0),
        is_saved=doc["_id"] in owner.get("saved_reels", []),
        is_following=has_actor(doc.get("owner_followers"), "follower", viewer_id),
    )


def list_reels(reel_filter: ReelFilter, viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    """Run the listing pipeline for *reel_filter* and annotate for *viewer_id*."""
    docs = get_collection(REELS).aggregate(build_reel_pipeline(reel_filter))
    return [_annotate(doc, viewer_id) for doc in docs]


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def get_user_reels(user_id: str, viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    """Reels posted by *user_id*."""
    owner_oid = resolve_user_id(user_id)
    return list_reels(ReelFilter.by_owner(owner_oid), viewer_id)


def get_all_reels(viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    return list_reels(ReelFilter.everything(), viewer_id)


def get_following_reels(viewer_id: ObjectId) -> list[AnnotatedReel]:
    """Reels posted by the users *viewer_id* follows."""
    followed = [
        rel["following"]
        for rel in get_collection(RELATIONSHIPS).find({"follower": viewer_id}, {"following": 1})
    ]
    if not followed:
        return []
    return list_reels(ReelFilter.by_owners(followed), viewer_id)


def get_most_liked_reels(viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    return list_reels(ReelFilter.most_liked(), viewer_id)


def search_reels_by_owner_handle(fragment: str, viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    """Reels whose owner handle contains *fragment*, most liked first.

    Raises:
        UserNotFound: no handle contains *fragment*.
    """
    owner_ids = find_user_ids_by_handle(fragment)
    if not owner_ids:
        raise UserNotFound()
    return list_reels(ReelFilter.by_owners(owner_ids, sort_by_likes=True), viewer_id)


def get_saved_reels(user_id: str, viewer_id: ObjectId | None) -> list[AnnotatedReel]:
    """Reels in the ``saved_reels`` list of *user_id*."""
    user_oid = resolve_user_id(user_id)
    user = get_collection(USERS).find_one({"_id": user_oid}, {"saved_reels": 1})
    saved = (user or {}).get("saved_reels", [])
    if not saved:
        return []
    return list_reels(ReelFilter.by_ids(saved), viewer_id)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def toggle_saved_reel(reel_id: str, user_id: ObjectId) -> bool:
    """Add the reel to the user's saved list, or remove it when present.

    Returns the new saved state.
    """
    reel_oid = validate_id(reel_id, "Reel")
    if get_collection(REELS).find_one({"_id": reel_oid}, {"_id": 1}) is None:
        raise ReelNotFound()

    users = get_collection(USERS)
    user = users.find_one({"_id": user_id}, {"saved_reels": 1})
    if user is None:
        raise UserNotFound()

    if reel_oid in user.get("saved_reels", []):
        users.update_one({"_id": user_id}, {"$pull": {"saved_reels": reel_oid}})
        is_saved = False
    else:
        users.update_one({"_id": user_id}, {"$addToSet": {"saved_reels": reel_oid}})
        is_saved = True

    logger.info(
        "saved_reel_toggled",
        extra={"reel_id": str(reel_oid), "user_id": str(user_id), "is_saved": is_saved},
    )
    return is_saved


def create_reel(owner_id: ObjectId, payload: ReelCreate) -> Reel:
    """Store the metadata of a reel whose video and thumbnail are already hosted."""
    caption = require_text(payload.caption, "Caption is required")
    reel_url = require_text(payload.reel_url, "Reel video is required")
    thumbnail_url = require_text(payload.reel_thumbnail_url, "Reel thumbnail is required")

    reels = get_collection(REELS)
    now = utcnow()
    try:
        result = reels.insert_one(
            {
                "reel_url": reel_url,
                "reel_thumbnail_url": thumbnail_url,
                "caption": caption,
                "duration": payload.duration,
                "owner": owner_id,
                "created_at": now,
                "updated_at": now,
            }
        )
    except PyMongoError as exc:
        logger.error("reel_insert_failed", extra={"owner_id": str(owner_id)}, exc_info=True)
        raise PersistenceFailure("Something went wrong while uploading reel") from exc

    created = reels.find_one({"_id": result.inserted_id})
    if created is None:
        raise PersistenceFailure("Something went wrong while uploading reel")

    logger.info("reel_created", extra={"reel_id": str(created["_id"]), "owner_id": str(owner_id)})
    return Reel(
        id=str(created["_id"]),
        reel_url=created["reel_url"],
        reel_thumbnail_url=created["reel_thumbnail_url"],
        caption=created["caption"],
        duration=created["duration"],
        owner=str(created["owner"]),
        created_at=created.get("created_at"),
        updated_at=created.get("updated_at"),
    )
