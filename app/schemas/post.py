"""Pydantic schemas for Post."""
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.user import UserPublic


class MediaItem(BaseModel):
    url: str = Field(..., min_length=1)
    type: Literal["image", "video"] = "image"


class PostCreate(BaseModel):
    content: str = ""
    media: list[MediaItem] = Field(default_factory=list, max_length=10)

    @model_validator(mode="after")
    def require_content_or_media(self) -> "PostCreate":
        self.content = self.content.strip()
        if not self.content and not self.media:
            raise ValueError("Post must have content or media")
        return self


class PostUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Post content cannot be empty")
        return value


class PostResponse(BaseModel):
    id: int
    user_id: int
    content: str = ""
    media: list[MediaItem] = Field(default_factory=list)
    likes_count: int = 0
    comments_count: int = 0
    reposts_count: int = 0
    created_at: int
    updated_at: int | None = None
    user: UserPublic | None = None
    is_liked: bool = False
    is_reposted: bool = False

    model_config = {"from_attributes": True}


class SavedPostResponse(PostResponse):
    saved_at: int


class LikeToggleResponse(BaseModel):
    liked: bool


class SavedStatus(BaseModel):
    is_saved: bool
