"""Pydantic models for like toggles."""

from pydantic import BaseModel


class LikeToggle(BaseModel):
    is_liked: bool
