"""Pydantic models for the ``comments`` collection."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserSummary


class CommentCreate(BaseModel):
    comment: str | None = None


class ReplyCreate(BaseModel):
    comment: str | None = None
    parent_comment_id: str | None = None


class CommentReply(BaseModel):
    """A comment as listed under its parent (or a reel), with like info."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    comment: str
    is_Edited: bool = False
    commented_by: UserSummary
    likes_count: int = 0
    is_liked: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommentThread(CommentReply):
    """A top-level comment; additionally reports how many replies it has."""
    replies_count: int = 0
