"""Idempotent create-or-delete toggle shared by likes and follows.

A toggle looks for the record matching ``selector``; if it exists it is
deleted (``active=False``), otherwise one is inserted (``active=True``).

The lookup and the write are two separate operations.  The unique compound
indexes created by ``app.db.mongo.ensure_indexes`` reject a second insert for
the same (actor, target) pair, and the engine reports that rejection as
"already active", so two interleaved first-time toggles leave exactly one
record.  Without those indexes both inserts succeed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.db.mongo import get_collection, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of one toggle call."""
    active: bool
    record_id: ObjectId | None = None


class ToggleEngine:
    """Toggle records of one collection keyed by an (actor, target) selector."""

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    def _find_existing(self, selector: dict[str, Any]) -> dict[str, Any] | None:
        return get_collection(self.collection_name).find_one(selector)

    def toggle(self, selector: dict[str, Any]) -> ToggleResult:
        """Delete the matching record if present, insert it otherwise."""
        collection = get_collection(self.collection_name)
        existing = self._find_existing(selector)

        if existing is not None:
            collection.delete_one({"_id": existing["_id"]})
            logger.info(
                "toggle_deactivated",
                extra={"collection": self.collection_name, "record_id": str(existing["_id"])},
            )
            return ToggleResult(active=False, record_id=existing["_id"])

        now = utcnow()
        try:
            result = collection.insert_one({**selector, "created_at": now, "updated_at": now})
        except DuplicateKeyError:
            # A concurrent call inserted the same pair first.
            logger.info(
                "toggle_duplicate_insert",
                extra={"collection": self.collection_name},
            )
            return ToggleResult(active=True)

        logger.info(
            "toggle_activated",
            extra={"collection": self.collection_name, "record_id": str(result.inserted_id)},
        )
        return ToggleResult(active=True, record_id=result.inserted_id)


def has_actor(records: list[dict[str, Any]] | None, field: str, actor_id: ObjectId | None) -> bool:
    """Return True when *actor_id* owns one of the joined toggle *records*.

    Anonymous viewers (``actor_id is None``) are never counted.
    """
    if actor_id is None or not records:
        return False
    return any(record.get(field) == actor_id for record in records)
