"""Ranked home feed."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.config import settings
from app.models.user import User
from app.schemas.post import PostResponse
from app.services.feed_service import get_feed as get_feed_svc

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=list[PostResponse])
async def get_feed(
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.FEED_DEFAULT_LIMIT, ge=1, le=100),
    mode: str = Query(settings.FEED_DEFAULT_MODE, pattern="^(algorithm|recent|popular)$"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_feed_svc(db, current_user.id, limit=limit, offset=offset, mode=mode)
