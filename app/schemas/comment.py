"""Pydantic schemas for Comment."""
from pydantic import BaseModel, Field

from app.schemas.user import UserPublic


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    parent_id: int | None = None


class CommentResponse(BaseModel):
    id: int
    user_id: int
    post_id: int
    parent_id: int | None = None
    content: str
    replies_count: int = 0
    created_at: int
    user: UserPublic | None = None
    replies: list["CommentResponse"] = Field(default_factory=list)

    model_config = {"from_attributes": True}
