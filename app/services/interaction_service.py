"""Like toggling and like/repost membership lookups."""
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import unix_now
from app.models.engagement import Like, Repost
from app.services.counter_service import adjust_post_counter

logger = logging.getLogger(__name__)


async def _remove_like(db: AsyncSession, user_id: int, post_id: int) -> bool:
    """Delete the membership row; decrement only if a row was actually removed."""
    result = await db.execute(delete(Like).where(Like.user_id == user_id, Like.post_id == post_id))
    if not result.rowcount:
        return False
    await adjust_post_counter(db, post_id, "likes_count", -1)
    return True


async def toggle_like(db: AsyncSession, user_id: int, post_id: int) -> bool:
    """Flip the like membership of (user, post). Returns the new state (True = liked).

    Both the row change and the counter change run in the caller's transaction.
    A concurrent duplicate insert violates uq_likes_user_post and raises
    IntegrityError, which rolls back the whole unit.
    """
    if await is_post_liked(db, user_id, post_id):
        await _remove_like(db, user_id, post_id)
        logger.debug("User %s unliked post %s", user_id, post_id)
        return False
    await db.execute(insert(Like).values(user_id=user_id, post_id=post_id, created_at=unix_now()))
    await adjust_post_counter(db, post_id, "likes_count", 1)
    logger.debug("User %s liked post %s", user_id, post_id)
    return True


async def unlike_post(db: AsyncSession, user_id: int, post_id: int) -> bool:
    """Idempotent unlike. Returns True if a like was removed."""
    return await _remove_like(db, user_id, post_id)


async def is_post_liked(db: AsyncSession, user_id: int, post_id: int) -> bool:
    result = await db.execute(
        select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def is_post_reposted(db: AsyncSession, user_id: int, post_id: int) -> bool:
    result = await db.execute(
        select(Repost.id).where(Repost.user_id == user_id, Repost.post_id == post_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_user_liked_post_ids(
    db: AsyncSession,
    user_id: int,
    post_ids: list[int],
) -> set[int]:
    """Return set of post IDs that the user has liked."""
    if not post_ids:
        return set()
    result = await db.execute(
        select(Like.post_id).where(
            Like.user_id == user_id,
            Like.post_id.in_(post_ids),
        )
    )
    return set(row[0] for row in result.all() if row[0])


async def get_user_reposted_post_ids(
    db: AsyncSession,
    user_id: int,
    post_ids: list[int],
) -> set[int]:
    """Return set of post IDs that the user has reposted."""
    if not post_ids:
        return set()
    result = await db.execute(
        select(Repost.post_id).where(
            Repost.user_id == user_id,
            Repost.post_id.in_(post_ids),
        )
    )
    return set(row[0] for row in result.all() if row[0])
