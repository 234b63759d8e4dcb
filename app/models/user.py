"""Pydantic models for the ``users`` collection and account endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Registration payload.  ``avatar`` is the URL of an already hosted image."""
    full_name: str = ""
    user_name: str = ""
    email: str = ""
    profile_tag: str = ""
    password: str = ""
    avatar: str = ""


class UserLogin(BaseModel):
    email: str = ""
    password: str = ""


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class PasswordChange(BaseModel):
    old_password: str = ""
    new_password: str = ""


class AccountUpdate(BaseModel):
    full_name: str = ""
    user_name: str = ""
    email: str = ""
    profile_tag: str = ""


class AvatarUpdate(BaseModel):
    avatar: str = ""


class UserSummary(BaseModel):
    """Minimal user card embedded in reels, comments and follow lists."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user_name: str
    avatar: str | None = None


class UserPublic(BaseModel):
    """User record without password hash or refresh token."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    full_name: str
    user_name: str
    email: str
    profile_tag: str
    avatar: str | None = None
    saved_reels: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class LoginResult(TokenPair):
    user: UserPublic


class UserProfile(BaseModel):
    """Public profile with follow and engagement counters."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    full_name: str
    user_name: str
    email: str
    profile_tag: str
    avatar: str | None = None
    profile_followers_count: int = 0
    profile_follows_to_count: int = 0
    is_following: bool = False
    posts_count: int = 0
    posts_likes_count: int = 0


class UsernameExists(BaseModel):
    exists: bool


class CreatorRanking(BaseModel):
    """A creator in the top-followed search results."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    full_name: str
    user_name: str
    avatar: str | None = None
    followers_count: int = 0
