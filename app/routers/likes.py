"""Like toggles for reels and comments."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.models.common import ApiResponse
from app.models.like import LikeToggle
from app.routers.deps import get_current_user
from app.services import likes

router = APIRouter()


@router.post("/toggle/{reel_id}", response_model=ApiResponse[LikeToggle])
def toggle_reel_like(
    reel_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[LikeToggle]:
    is_liked = likes.toggle_reel_like(reel_id, current_user["_id"])
    message = "Reel liked successfully" if is_liked else "Reel unliked successfully"
    return ApiResponse.ok(LikeToggle(is_liked=is_liked), message)


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[LikeToggle])
def toggle_comment_like(
    comment_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[LikeToggle]:
    is_liked = likes.toggle_comment_like(comment_id, current_user["_id"])
    message = "Comment liked successfully" if is_liked else "Comment unliked successfully"
    return ApiResponse.ok(LikeToggle(is_liked=is_liked), message)
