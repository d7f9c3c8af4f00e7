"""Pydantic schemas for Repost."""
from pydantic import BaseModel


class RepostToggleResponse(BaseModel):
    is_reposted: bool
    reposts_count: int
