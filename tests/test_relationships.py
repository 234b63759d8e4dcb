"""Tests for the follow toggle and follower / following listings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from bson import ObjectId
from pymongo.database import Database


class TestToggleFollow:
    def test_alternates(self, indexed_db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.services.relationships import toggle_follow

        alice, bob = make_user("alice"), make_user("bob")

        assert toggle_follow(alice["_id"], str(bob["_id"])) is True
        assert toggle_follow(alice["_id"], str(bob["_id"])) is False
        assert toggle_follow(alice["_id"], str(bob["_id"])) is True
        assert indexed_db["relationships"].count_documents({}) == 1

    def test_self_follow_writes_nothing(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.core.exceptions import SelfFollowRejected
        from app.services.relationships import toggle_follow

        alice = make_user("alice")
        with pytest.raises(SelfFollowRejected, match="You cannot follow yourself"):
            toggle_follow(alice["_id"], str(alice["_id"]))
        assert db["relationships"].count_documents({}) == 0

    def test_unknown_target(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.core.exceptions import UserNotFound
        from app.services.relationships import toggle_follow

        with pytest.raises(UserNotFound):
            toggle_follow(make_user()["_id"], str(ObjectId()))

    def test_invalid_target(self, db: Database) -> None:
        from app.core.exceptions import InvalidIdentifier
        from app.services.relationships import toggle_follow

        with pytest.raises(InvalidIdentifier, match="User ID is invalid"):
            toggle_follow(ObjectId(), "nope")


class TestListings:
    def test_followers_with_viewer_flag(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.relationships import get_followers, toggle_follow

        star, fan1, fan2, viewer = (make_user(n) for n in ("star", "fan1", "fan2", "viewer"))
        toggle_follow(fan1["_id"], str(star["_id"]))
        toggle_follow(fan2["_id"], str(star["_id"]))
        toggle_follow(viewer["_id"], str(fan2["_id"]))

        entries = get_followers(str(star["_id"]), viewer["_id"])
        assert [(e.follower.user_name, e.is_following) for e in entries] == [
            ("fan1", False),
            ("fan2", True),
        ]

    def test_followings(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.services.relationships import get_followings, toggle_follow

        alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
        toggle_follow(alice["_id"], str(bob["_id"]))
        toggle_follow(alice["_id"], str(carol["_id"]))

        entries = get_followings(str(alice["_id"]), alice["_id"])
        assert [e.followed_user.user_name for e in entries] == ["bob", "carol"]
        assert all(e.is_following for e in entries)

        assert all(not e.is_following for e in get_followings(str(alice["_id"]), None))

    def test_unknown_user(self, db: Database) -> None:
        from app.core.exceptions import UserNotFound
        from app.services.relationships import get_followers

        with pytest.raises(UserNotFound):
            get_followers(str(ObjectId()), None)
