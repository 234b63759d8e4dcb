"""Comment endpoints.

``GET /{reel_id}`` lists top-level comments, ``GET /r/{parent_comment_id}``
lists replies; writes live under ``/c`` (comments) and ``/r`` (replies).
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi import APIRouter, Depends

from app.models.comment import CommentCreate, CommentReply, CommentThread, ReplyCreate
from app.models.common import ApiResponse, IdRef
from app.routers.deps import get_current_user, get_optional_viewer
from app.services import comments

router = APIRouter()


@router.get("/r/{parent_comment_id}", response_model=ApiResponse[list[CommentReply]])
def reply_comments(
    parent_comment_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[CommentReply]]:
    replies = comments.list_replies(parent_comment_id, viewer_id)
    return ApiResponse.ok(replies, "Replies fetched successfully" if replies else "No replies found")


@router.get("/{reel_id}", response_model=ApiResponse[list[CommentThread]])
def reel_comments(
    reel_id: str,
    viewer_id: ObjectId | None = Depends(get_optional_viewer),
) -> ApiResponse[list[CommentThread]]:
    threads = comments.list_top_level(reel_id, viewer_id)
    return ApiResponse.ok(threads, "Comments fetched successfully" if threads else "No comments found")


@router.post("/c/{reel_id}", status_code=201, response_model=ApiResponse[IdRef])
def post_comment(
    reel_id: str,
    payload: CommentCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[IdRef]:
    comment_id = comments.create(reel_id, current_user["_id"], payload.comment)
    return ApiResponse.ok(IdRef(id=str(comment_id)), "Comment posted successfully", status_code=201)


@router.post("/r/{reel_id}", status_code=201, response_model=ApiResponse[IdRef])
def post_reply(
    reel_id: str,
    payload: ReplyCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[IdRef]:
    comment_id = comments.reply(
        reel_id,
        payload.parent_comment_id,
        current_user["_id"],
        payload.comment,
    )
    return ApiResponse.ok(IdRef(id=str(comment_id)), "Reply posted successfully", status_code=201)


@router.patch("/c/{comment_id}", response_model=ApiResponse[IdRef])
def edit_comment(
    comment_id: str,
    payload: CommentCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[IdRef]:
    """Any authenticated user may edit a comment; authorship is not checked."""
    edited = comments.edit(comment_id, payload.comment)
    return ApiResponse.ok(IdRef(id=str(edited)), "Comment edited successfully")


@router.delete("/c/{comment_id}", response_model=ApiResponse[IdRef])
def delete_comment(
    comment_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[IdRef]:
    """Any authenticated user may delete a comment; authorship is not checked."""
    deleted = comments.delete(comment_id)
    return ApiResponse.ok(IdRef(id=str(deleted)), "Comment deleted successfully")
