"""Pydantic models for follow toggles and follow listings."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserSummary


class FollowToggle(BaseModel):
    is_followed: bool
    user_id: str


class FollowerEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    follower: UserSummary
    is_following: bool = False


class FollowingEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    followed_user: UserSummary
    is_following: bool = False
