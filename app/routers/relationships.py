"""Follow toggle and follower / following listings."""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.models.common import ApiResponse
from app.models.relationship import FollowerEntry, FollowingEntry, FollowToggle
from app.routers.deps import get_current_user, get_optional_viewer
from app.services import relationships

router = APIRouter()


@router.post("/toggle/u/{user_id}", response_model=ApiResponse[FollowToggle])
def toggle_follow(
    user_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[FollowToggle]:
    is_followed = relationships.toggle_follow(current_user["_id"], user_id)
    message = "User followed successfully" if is_followed else "User unfollowed successfully"
    return ApiResponse.ok(FollowToggle(is_followed=is_followed, user_id=user_id), message)


@router.get("/followers/u/{user_id}", response_model=ApiResponse[list[FollowerEntry]])
def followers(
    user_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[FollowerEntry]]:
    entries = relationships.get_followers(user_id, viewer_id)
    return ApiResponse.ok(entries, "Followers fetched successfully" if entries else "No followers found")


@router.get("/followings/u/{user_id}", response_model=ApiResponse[list[FollowingEntry]])
def followings(
    user_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[FollowingEntry]]:
    entries = relationships.get_followings(user_id, viewer_id)
    return ApiResponse.ok(entries, "Followings fetched successfully" if entries else "No followings found")
