"""Follow graph operations."""
import logging

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import unix_now
from app.models.engagement import Follow

logger = logging.getLogger(__name__)


async def is_following(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    result = await db.execute(
        select(Follow.id).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def follow_user(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    """Create the follow edge. Returns False for self-follows; already-following is a no-op."""
    if follower_id == following_id:
        return False
    if not await is_following(db, follower_id, following_id):
        await db.execute(
            insert(Follow).values(follower_id=follower_id, following_id=following_id, created_at=unix_now())
        )
        logger.info("User %s followed user %s", follower_id, following_id)
    return True


async def unfollow_user(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    """Remove the follow edge. Returns True if an edge was removed."""
    result = await db.execute(
        delete(Follow).where(Follow.follower_id == follower_id, Follow.following_id == following_id)
    )
    return bool(result.rowcount)


async def get_follower_count(db: AsyncSession, user_id: int) -> int:
    count = await db.scalar(select(func.count(Follow.id)).where(Follow.following_id == user_id))
    return count or 0


async def get_following_count(db: AsyncSession, user_id: int) -> int:
    count = await db.scalar(select(func.count(Follow.id)).where(Follow.follower_id == user_id))
    return count or 0
