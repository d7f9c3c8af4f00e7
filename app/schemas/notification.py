"""Pydantic schemas for derived notifications."""
from typing import Literal

from pydantic import BaseModel

NotificationType = Literal["comment", "like", "follow"]


class NotificationActor(BaseModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class NotificationEvent(BaseModel):
    id: int  # id of the underlying comment / like / follow row
    type: NotificationType
    message: str
    user: NotificationActor
    created_at: int
    is_read: bool = False
    post_id: int | None = None
