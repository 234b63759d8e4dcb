"""Tests for annotated reel listings and the saved-reel toggle."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from bson import ObjectId
from pymongo.database import Database


def _like(db: Database, reel: dict[str, Any], user: dict[str, Any]) -> None:
    db["likes"].insert_one({"reel_id": reel["_id"], "comment_id": None, "liked_by": user["_id"]})


def _follow(db: Database, follower: dict[str, Any], following: dict[str, Any]) -> None:
    db["relationships"].insert_one({"follower": follower["_id"], "following": following["_id"]})


class TestPipeline:
    def test_default_order_is_insertion(self) -> None:
        from app.services.feed import ReelFilter, build_reel_pipeline

        stages = [next(iter(stage)) for stage in build_reel_pipeline(ReelFilter.everything())]
        assert stages[0] == "$match"
        assert stages.count("$sort") == 1

    def test_most_liked_sorts_by_likes(self) -> None:
        from app.services.feed import ReelFilter, build_reel_pipeline

        pipeline = build_reel_pipeline(ReelFilter.most_liked())
        assert pipeline[-1] == {"$sort": {"likes_count": -1, "_id": 1}}


class TestAnnotations:
    def test_counts_and_viewer_flags(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services import comments
        from app.services.feed import get_all_reels

        owner, viewer, other = make_user("owner"), make_user("viewer"), make_user("other")
        reel = make_reel(owner)
        _like(db, reel, viewer)
        _like(db, reel, other)
        _follow(db, viewer, owner)
        parent = comments.create(str(reel["_id"]), other["_id"], "top")
        comments.reply(str(reel["_id"]), str(parent), viewer["_id"], "reply")

        [as_viewer] = get_all_reels(viewer["_id"])
        assert as_viewer.owner.user_name == "owner"
        assert as_viewer.likes_count == 2
        assert as_viewer.comments_count == 2
        assert as_viewer.is_liked is True
        assert as_viewer.is_following is True

        [as_anonymous] = get_all_reels(None)
        assert as_anonymous.is_liked is False
        assert as_anonymous.is_following is False

    def test_is_saved_reflects_the_owners_saved_list(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.feed import get_all_reels

        owner, viewer = make_user("owner"), make_user("viewer")
        saved_by_owner = make_reel(owner, caption="owner saved")
        saved_by_viewer = make_reel(owner, caption="viewer saved")
        db["users"].update_one({"_id": owner["_id"]}, {"$set": {"saved_reels": [saved_by_owner["_id"]]}})
        db["users"].update_one({"_id": viewer["_id"]}, {"$set": {"saved_reels": [saved_by_viewer["_id"]]}})

        flags = {reel.caption: reel.is_saved for reel in get_all_reels(viewer["_id"])}
        assert flags == {"owner saved": True, "viewer saved": False}


class TestListings:
    def test_user_reels(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.feed import get_user_reels

        alice, bob = make_user("alice"), make_user("bob")
        first = make_reel(alice, caption="first")
        second = make_reel(alice, caption="second")
        make_reel(bob, caption="bob's")

        reels = get_user_reels(str(alice["_id"]), None)
        assert [r.id for r in reels] == [str(first["_id"]), str(second["_id"])]

    def test_user_reels_unknown_user(self, db: Database) -> None:
        from app.core.exceptions import UserNotFound
        from app.services.feed import get_user_reels

        with pytest.raises(UserNotFound):
            get_user_reels(str(ObjectId()), None)

    def test_following_reels(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.feed import get_following_reels

        viewer, followed, stranger = make_user("viewer"), make_user("followed"), make_user("stranger")
        make_reel(followed, caption="followed")
        make_reel(stranger, caption="stranger")

        assert get_following_reels(viewer["_id"]) == []
        _follow(db, viewer, followed)
        assert [r.caption for r in get_following_reels(viewer["_id"])] == ["followed"]

    def test_most_liked(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.feed import get_most_liked_reels

        owner, fans = make_user("owner"), [make_user(f"fan{i}") for i in range(3)]
        make_reel(owner, caption="quiet")
        popular = make_reel(owner, caption="popular")
        middling = make_reel(owner, caption="middling")
        for fan in fans:
            _like(db, popular, fan)
        _like(db, middling, fans[0])

        reels = get_most_liked_reels(None)
        assert [r.caption for r in reels] == ["popular", "middling", "quiet"]
        assert [r.likes_count for r in reels] == [3, 1, 0]


class TestSavedReels:
    def test_toggle_and_list(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.feed import get_saved_reels, toggle_saved_reel

        owner, fan = make_user("owner"), make_user("fan")
        reel = make_reel(owner)

        assert toggle_saved_reel(str(reel["_id"]), fan["_id"]) is True
        assert [r.id for r in get_saved_reels(str(fan["_id"]), None)] == [str(reel["_id"])]

        assert toggle_saved_reel(str(reel["_id"]), fan["_id"]) is False
        assert get_saved_reels(str(fan["_id"]), None) == []

    def test_unknown_reel(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.core.exceptions import ReelNotFound
        from app.services.feed import toggle_saved_reel

        with pytest.raises(ReelNotFound):
            toggle_saved_reel(str(ObjectId()), make_user()["_id"])


class TestCreateReel:
    def test_create(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.models.reel import ReelCreate
        from app.services.feed import create_reel

        owner = make_user("owner")
        reel = create_reel(
            owner["_id"],
            ReelCreate(
                reel_url="https://cdn.example.com/v.mp4",
                reel_thumbnail_url="https://cdn.example.com/v.jpg",
                caption="  sunset  ",
                duration=9.5,
            ),
        )
        assert reel.caption == "sunset"
        assert reel.owner == str(owner["_id"])
        assert db["reels"].count_documents({"owner": owner["_id"]}) == 1

    def test_blank_caption(self, db: Database) -> None:
        from app.core.exceptions import EmptyText
        from app.models.reel import ReelCreate
        from app.services.feed import create_reel

        payload = ReelCreate(reel_url="u", reel_thumbnail_url="t", caption=" ", duration=1)
        with pytest.raises(EmptyText, match="Caption is required"):
            create_reel(ObjectId(), payload)
