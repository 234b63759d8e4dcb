"""Tests for top-liked reel and top-followed creator searches."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from pymongo.database import Database


class TestTopLikedReels:
    def test_filters_by_handle_substring_and_sorts(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.likes import toggle_reel_like
        from app.services.search import search_top_liked_reels

        cook, bookworm, other = make_user("cook"), make_user("bookworm"), make_user("zed")
        make_reel(cook, caption="plain")
        liked = make_reel(bookworm, caption="liked")
        make_reel(other, caption="other")
        toggle_reel_like(str(liked["_id"]), other["_id"])

        reels = search_top_liked_reels("OOK", None)
        assert [r.caption for r in reels] == ["liked", "plain"]

    def test_no_handle_means_all_reels(
        self,
        db: Database,
        make_user: Callable[..., dict[str, Any]],
        make_reel: Callable[..., dict[str, Any]],
    ) -> None:
        from app.services.search import search_top_liked_reels

        owner = make_user("owner")
        make_reel(owner)
        make_reel(owner)

        assert len(search_top_liked_reels(None, None)) == 2

    def test_unmatched_handle(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.core.exceptions import UserNotFound
        from app.services.search import search_top_liked_reels

        make_user("alice")
        with pytest.raises(UserNotFound, match="No users found"):
            search_top_liked_reels("zzz", None)


class TestTopFollowedCreators:
    def test_sorted_by_followers(self, db: Database, make_user: Callable[..., dict[str, Any]]) -> None:
        from app.services.relationships import toggle_follow
        from app.services.search import search_top_followed_creators

        quiet, star, fan1, fan2 = (make_user(n) for n in ("quiet", "star", "fan1", "fan2"))
        toggle_follow(fan1["_id"], str(star["_id"]))
        toggle_follow(fan2["_id"], str(star["_id"]))
        toggle_follow(fan1["_id"], str(quiet["_id"]))

        creators = search_top_followed_creators(None)
        assert [(c.user_name, c.followers_count) for c in creators[:2]] == [("star", 2), ("quiet", 1)]

        assert [c.user_name for c in search_top_followed_creators("fan")] == ["fan1", "fan2"]

    def test_unmatched_handle(self, db: Database) -> None:
        from app.core.exceptions import UserNotFound
        from app.services.search import search_top_followed_creators

        with pytest.raises(UserNotFound):
            search_top_followed_creators("nobody")
