"""MongoDB client singleton.

Provides ``get_database()`` which returns the application database from a
lazily-initialized, process-wide ``MongoClient`` built from ``settings``,
plus the startup index bootstrap and the transaction helper used by
multi-step writes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from pymongo import ASCENDING, MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database

from app.core.config import settings
from app.core.constants import INDEXES

logger = logging.getLogger(__name__)

T = TypeVar("T")

_client: MongoClient | None = None


def get_client() -> MongoClient:
    """Return the singleton MongoDB client, creating it on first call."""
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGODB_URI, tz_aware=True)
    return _client


def get_database() -> Database:
    """Return the application database."""
    return get_client()[settings.DATABASE_NAME]


def get_collection(name: str) -> Collection:
    """Return a collection of the application database."""
    return get_database()[name]


def close_client() -> None:
    """Close and forget the singleton client."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def utcnow() -> datetime:
    """Timestamp used for ``created_at`` / ``updated_at`` fields."""
    return datetime.now(timezone.utc)


def ensure_indexes() -> None:
    """Create the unique and lookup indexes the services rely on.

    The compound unique indexes on ``likes`` and ``relationships`` are what
    make the toggles race-free; see ``app.services.toggle``.
    """
    db = get_database()
    for collection, keys, unique in INDEXES:
        db[collection].create_index(
            [(field, ASCENDING) for field, _ in keys],
            unique=unique,
        )
    logger.info("indexes_ensured", extra={"count": len(INDEXES)})


def ping() -> bool:
    """Return True when the server answers a ``ping`` command."""
    get_database().command("ping")
    return True


def run_in_transaction(callback: Callable[[ClientSession | None], T]) -> T:
    """Run *callback* inside a multi-document transaction when enabled.

    With ``MONGODB_TRANSACTIONS`` off (standalone servers cannot run
    transactions) the callback receives ``None`` and its writes are applied
    one by one.
    """
    if not settings.MONGODB_TRANSACTIONS:
        return callback(None)

    with get_client().start_session() as session:
        return session.with_transaction(callback)
