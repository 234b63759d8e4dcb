"""Search endpoints.  The trailing ``{user_name}`` segment is optional."""

from __future__ import annotations

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.models.common import ApiResponse
from app.models.reel import AnnotatedReel
from app.models.user import CreatorRanking
from app.routers.deps import get_optional_viewer
from app.services import search

router = APIRouter()


@router.get("/top-liked-reels/u", response_model=ApiResponse[list[AnnotatedReel]])
@router.get("/top-liked-reels/u/{user_name}", response_model=ApiResponse[list[AnnotatedReel]])
def top_liked_reels(
    user_name: str | None = None,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[AnnotatedReel]]:
    reels = search.search_top_liked_reels(user_name, viewer_id)
    return ApiResponse.ok(reels, "Searched reels fetched successfully" if reels else "No reels found")


@router.get("/top-followed-creators/u", response_model=ApiResponse[list[CreatorRanking]])
@router.get("/top-followed-creators/u/{user_name}", response_model=ApiResponse[list[CreatorRanking]])
def top_followed_creators(user_name: str | None = None) -> ApiResponse[list[CreatorRanking]]:
    creators = search.search_top_followed_creators(user_name)
    return ApiResponse.ok(creators, "Searched users fetched successfully" if creators else "No user found")
