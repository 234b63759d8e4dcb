"""Reel endpoints: posting, feeds and the saved-reel toggle."""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.models.common import ApiResponse
from app.models.reel import AnnotatedReel, Reel, ReelCreate, SavedToggle
from app.routers.deps import get_current_user, get_optional_viewer
from app.services import feed

router = APIRouter()


def _listing(reels: list[AnnotatedReel], message: str) -> ApiResponse[list[AnnotatedReel]]:
    return ApiResponse.ok(reels, message if reels else "No reels found")


@router.post("/post-reel", status_code=201, response_model=ApiResponse[Reel])
def post_reel(
    payload: ReelCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[Reel]:
    reel = feed.create_reel(current_user["_id"], payload)
    return ApiResponse.ok(reel, "Reel uploaded successfully", status_code=201)


@router.get("/get-reels/u/{user_id}", response_model=ApiResponse[list[AnnotatedReel]])
def user_reels(
    user_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[AnnotatedReel]]:
    return _listing(feed.get_user_reels(user_id, viewer_id), "Reels fetched successfully")


@router.get("/get-reels", response_model=ApiResponse[list[AnnotatedReel]])
def all_reels(
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[AnnotatedReel]]:
    return _listing(feed.get_all_reels(viewer_id), "Reels fetched successfully")


@router.get("/get-following-reels", response_model=ApiResponse[list[AnnotatedReel]])
def following_reels(
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[list[AnnotatedReel]]:
    reels = feed.get_following_reels(current_user["_id"])
    return _listing(reels, "Following reels fetched successfully")


@router.get("/get-most-liked-reels", response_model=ApiResponse[list[AnnotatedReel]])
def most_liked_reels(
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[AnnotatedReel]]:
    return _listing(feed.get_most_liked_reels(viewer_id), "Most liked reels fetched successfully")


@router.post("/toggle-saved/r/{reel_id}", response_model=ApiResponse[SavedToggle])
def toggle_saved_reel(
    reel_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[SavedToggle]:
    is_saved = feed.toggle_saved_reel(reel_id, current_user["_id"])
    message = "Reel saved successfully" if is_saved else "Reel removed from saved"
    return ApiResponse.ok(SavedToggle(is_saved=is_saved), message)


@router.get("/get-saved-reels/u/{user_id}", response_model=ApiResponse[list[AnnotatedReel]])
def saved_reels(
    user_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[AnnotatedReel]]:
    return _listing(feed.get_saved_reels(user_id, viewer_id), "Saved reels fetched successfully")
