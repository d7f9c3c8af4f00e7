"""Pydantic schemas for User."""
from pydantic import BaseModel


class UserPublic(BaseModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    university_handle: str | None = None
    profile_image_url: str | None = None
    is_verified: bool = False

    model_config = {"from_attributes": True}


class FollowerStats(BaseModel):
    count: int
    is_following: bool = False


class FollowResponse(BaseModel):
    following: bool
