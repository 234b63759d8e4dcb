"""Comment threads: top-level comments on a reel and their replies.

Listings are single aggregation pipelines over ``comments`` joining the
author, the likes of each comment and (for top-level comments) the replies,
then deriving ``likes_count`` and ``replies_count``.  ``is_liked`` is read
off the joined like records for the requesting viewer.

Lifecycle of a comment: created, edited any number of times (``is_Edited``
becomes true), deleted.  Deleting a top-level comment deletes its direct
replies first.
"""

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.client_session import ClientSession

from app.core.constants import COMMENTS, LIKES, REELS, USERS
from app.core.exceptions import (
    CommentNotFound,
    ParentNotFound,
    PersistenceFailure,
    ReelNotFound,
)
from app.db.mongo import get_collection, run_in_transaction, utcnow
from app.models.comment import CommentReply, CommentThread
from app.services.toggle import has_actor
from app.services.users import user_summary
from app.services.validators import require_text, validate_id

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

def build_comment_pipeline(
    match: dict[str, Any],
    *,
    with_replies: bool,
) -> list[dict[str, Any]]:
    """Return the aggregation pipeline listing comments selected by *match*.

    Comments come back in insertion order with the author joined in place of
    ``commented_by``, the like records in ``liked_by_users`` and the like /
    reply counters added.
    """
    pipeline: list[dict[str, Any]] = [
        {"$match": match},
        {"$sort": {"_id": 1}},
        {
            "$lookup": {
                "from": USERS,
                "localField": "commented_by",
                "foreignField": "_id",
                "as": "commented_by",
            },
        },
        {"$unwind": {"path": "$commented_by"}},
        {
            "$lookup": {
                "from": LIKES,
                "localField": "_id",
                "foreignField": "comment_id",
                "as": "liked_by_users",
            },
        },
    ]
    derived: dict[str, Any] = {"likes_count": {"$size": "$liked_by_users"}}
    if with_replies:
        pipeline.append(
            {
                "$lookup": {
                    "from": COMMENTS,
                    "localField": "_id",
                    "foreignField": "parent_comment_id",
                    "as": "replies",
                },
            }
        )
        derived["replies_count"] = {"$size": "$replies"}

    pipeline.append({"$addFields": derived})
    if with_replies:
        pipeline.append({"$project": {"replies": 0}})
    return pipeline


def _reply_fields(doc: dict[str, Any], viewer_id: ObjectId | None) -> dict[str, Any]:
    return {
        "id": str(doc["_id"]),
        "comment": doc["comment"],
        "is_Edited": bool(doc.get("is_Edited", False)),
        "commented_by": user_summary(doc["commented_by"]),
        "likes_count": doc.get("likes_count", 0),
        "is_liked": has_actor(doc.get("liked_by_users"), "liked_by", viewer_id),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def list_top_level(reel_id: str, viewer_id: ObjectId | None) -> list[CommentThread]:
    """Return the top-level comments of a reel, oldest first.

    Raises:
        ReelNotFound: the reel does not exist.
    """
    reel_oid = validate_id(reel_id, "Reel")
    if get_collection(REELS).find_one({"_id": reel_oid}, {"_id": 1}) is None:
        raise ReelNotFound()

    pipeline = build_comment_pipeline(
        {"reel_id": reel_oid, "parent_comment_id": None},
        with_replies=True,
    )
    docs = get_collection(COMMENTS).aggregate(pipeline)
    return [
        CommentThread(**_reply_fields(doc, viewer_id), replies_count=doc.get("replies_count", 0))
        for doc in docs
    ]


def list_replies(parent_id: str, viewer_id: ObjectId | None) -> list[CommentReply]:
    """Return the replies of a comment, oldest first.

    A parent removed by ``delete`` counts as absent, so its replies cannot be
    listed afterwards; the cascade leaves none in the store.

    Raises:
        ParentNotFound: the parent comment does not exist.
    """
    parent_oid = validate_id(parent_id, "Parent comment")
    if get_collection(COMMENTS).find_one({"_id": parent_oid}, {"_id": 1}) is None:
        raise ParentNotFound()

    pipeline = build_comment_pipeline(
        {"parent_comment_id": parent_oid},
        with_replies=False,
    )
    docs = get_collection(COMMENTS).aggregate(pipeline)
    return [CommentReply(**_reply_fields(doc, viewer_id)) for doc in docs]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _insert_comment(
    reel_oid: ObjectId,
    author_id: ObjectId,
    text: str,
    parent_oid: ObjectId | None,
) -> ObjectId:
    now = utcnow()
    result = get_collection(COMMENTS).insert_one(
        {
            "reel_id": reel_oid,
            "comment": text,
            "parent_comment_id": parent_oid,
            "commented_by": author_id,
            "is_Edited": False,
            "created_at": now,
            "updated_at": now,
        }
    )
    if result.inserted_id is None:
        raise PersistenceFailure("Error creating comment")
    return result.inserted_id


def create(reel_id: str, author_id: ObjectId, text: str | None) -> ObjectId:
    """Post a top-level comment on a reel and return its id."""
    reel_oid = validate_id(reel_id, "Reel")
    body = require_text(text)

    if get_collection(REELS).find_one({"_id": reel_oid}, {"_id": 1}) is None:
        raise ReelNotFound()

    comment_id = _insert_comment(reel_oid, author_id, body, None)
    logger.info(
        "comment_created",
        extra={"comment_id": str(comment_id), "reel_id": str(reel_oid)},
    )
    return comment_id


def reply(
    reel_id: str,
    parent_id: str | None,
    author_id: ObjectId,
    text: str | None,
) -> ObjectId:
    """Reply to a comment and return the reply id.

    The parent is looked up on its own, so a parent that belongs to another
    reel is accepted, and so is a parent that is itself a reply. Such a
    reply is only reachable through ``list_replies`` on that reply.

    Raises:
        EmptyText: blank text.
        ReelNotFound: the reel does not exist.
        ParentNotFound: the parent comment does not exist.
    """
    reel_oid = validate_id(reel_id, "Reel")
    body = require_text(text)
    parent_oid = validate_id(parent_id, "Parent comment")

    if get_collection(REELS).find_one({"_id": reel_oid}, {"_id": 1}) is None:
        raise ReelNotFound()

    if get_collection(COMMENTS).find_one({"_id": parent_oid}, {"_id": 1}) is None:
        raise ParentNotFound()

    comment_id = _insert_comment(reel_oid, author_id, body, parent_oid)
    logger.info(
        "reply_created",
        extra={"comment_id": str(comment_id), "parent_comment_id": str(parent_oid)},
    )
    return comment_id


def edit(comment_id: str, text: str | None) -> ObjectId:
    """Replace the text of a comment and flag it as edited."""
    comment_oid = validate_id(comment_id, "Comment")
    body = require_text(text)

    comments = get_collection(COMMENTS)
    if comments.find_one({"_id": comment_oid}, {"_id": 1}) is None:
        raise CommentNotFound()

    updated = comments.find_one_and_update(
        {"_id": comment_oid},
        {"$set": {"comment": body, "is_Edited": True, "updated_at": utcnow()}},
        projection={"_id": 1},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise PersistenceFailure("Error updating comment")

    logger.info("comment_edited", extra={"comment_id": str(comment_oid)})
    return updated["_id"]


def delete(comment_id: str) -> ObjectId:
    """Delete a comment together with its direct replies.

    Both deletes share a transaction when ``MONGODB_TRANSACTIONS`` is on;
    otherwise a failure between them leaves the parent without its replies.
    """
    comment_oid = validate_id(comment_id, "Comment")

    comments = get_collection(COMMENTS)
    if comments.find_one({"_id": comment_oid}, {"_id": 1}) is None:
        raise CommentNotFound()

    def _cascade(session: ClientSession | None) -> tuple[int, int]:
        options = {"session": session} if session is not None else {}
        replies = comments.delete_many({"parent_comment_id": comment_oid}, **options)
        deleted = comments.delete_one({"_id": comment_oid}, **options)
        return replies.deleted_count, deleted.deleted_count

    replies_deleted, deleted = run_in_transaction(_cascade)
    if not deleted:
        raise CommentNotFound()

    logger.info(
        "comment_deleted",
        extra={"comment_id": str(comment_oid), "replies_deleted": replies_deleted},
    )
    return comment_oid
