"""Shared test fixtures.

Installs a ``mongomock`` client as the process-wide MongoDB client for every
test, and provides document factories, auth headers and a FastAPI
``test_client``.
"""

import os
from collections.abc import Callable, Generator
from typing import Any

# Token secrets are required settings; they must exist before ``app`` imports.
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from pymongo.database import Database  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_client() -> Generator[mongomock.MongoClient, None, None]:
    """Replace the MongoDB client singleton with an in-memory one."""
    import app.db.mongo as mongo_mod

    client = mongomock.MongoClient()
    mongo_mod._client = client
    yield client
    mongo_mod._client = None


@pytest.fixture()
def db(mongo_client: mongomock.MongoClient) -> Database:
    """The application database, without indexes."""
    from app.core.config import settings

    return mongo_client[settings.DATABASE_NAME]


@pytest.fixture()
def indexed_db(db: Database) -> Database:
    """The application database with the unique and lookup indexes created."""
    from app.db.mongo import ensure_indexes

    ensure_indexes()
    return db


@pytest.fixture()
def make_user(db: Database) -> Callable[..., dict[str, Any]]:
    """Insert a user document directly and return it."""
    from app.db.mongo import utcnow

    def _make(user_name: str = "alice", **fields: Any) -> dict[str, Any]:
        now = utcnow()
        doc: dict[str, Any] = {
            "full_name": user_name.title(),
            "user_name": user_name,
            "email": f"{user_name}@example.com",
            "profile_tag": "creator",
            "avatar": f"https://cdn.example.com/{user_name}.png",
            "saved_reels": [],
            "password": "",
            "refresh_token": "",
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        db["users"].insert_one(doc)
        return doc

    return _make


@pytest.fixture()
def make_reel(db: Database) -> Callable[..., dict[str, Any]]:
    """Insert a reel document owned by ``owner`` and return it."""
    from app.db.mongo import utcnow

    def _make(owner: dict[str, Any], caption: str = "a reel", **fields: Any) -> dict[str, Any]:
        now = utcnow()
        doc: dict[str, Any] = {
            "reel_url": "https://cdn.example.com/reel.mp4",
            "reel_thumbnail_url": "https://cdn.example.com/reel.jpg",
            "caption": caption,
            "duration": 12.5,
            "owner": owner["_id"],
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        db["reels"].insert_one(doc)
        return doc

    return _make


@pytest.fixture()
def auth_headers() -> Callable[[dict[str, Any]], dict[str, str]]:
    """Build an ``Authorization`` header carrying an access token for a user."""
    from app.core.security import create_access_token

    def _headers(user: dict[str, Any]) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
