"""Pydantic models for the ``reels`` collection and feed listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserSummary


class ReelCreate(BaseModel):
    """Payload for posting a reel whose media is already hosted."""
    reel_url: str
    reel_thumbnail_url: str
    caption: str = ""
    duration: float = Field(ge=0)


class Reel(BaseModel):
    """Full reel record."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    reel_url: str
    reel_thumbnail_url: str
    caption: str
    duration: float
    owner: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AnnotatedReel(BaseModel):
    """A reel enriched with owner card and viewer-relative flags."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    reel_url: str
    reel_thumbnail_url: str | None = None
    caption: str
    duration: float
    owner: UserSummary
    likes_count: int = 0
    is_liked: bool = False
    comments_count: int = 0
    is_saved: bool = False
    is_following: bool = False


class SavedToggle(BaseModel):
    is_saved: bool
