"""Repost business logic."""
import logging

from sqlalchemy import delete, desc, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.session import unix_now
from app.models.engagement import Repost
from app.models.post import Post
from app.services.counter_service import adjust_post_counter, get_post_counter
from app.services.interaction_service import is_post_reposted

logger = logging.getLogger(__name__)


async def toggle_repost(db: AsyncSession, user_id: int, post_id: int) -> tuple[bool, int]:
    """Flip the repost membership of (user, post).

    Returns (is_reposted, reposts_count) where the count is read back after the
    relative update so callers get the stored value, not a client-side guess.
    """
    if await is_post_reposted(db, user_id, post_id):
        result = await db.execute(delete(Repost).where(Repost.user_id == user_id, Repost.post_id == post_id))
        if result.rowcount:
            await adjust_post_counter(db, post_id, "reposts_count", -1)
        is_reposted = False
    else:
        await db.execute(insert(Repost).values(user_id=user_id, post_id=post_id, created_at=unix_now()))
        await adjust_post_counter(db, post_id, "reposts_count", 1)
        is_reposted = True
    reposts_count = await get_post_counter(db, post_id, "reposts_count")
    logger.debug("User %s repost toggle on post %s -> %s (%d)", user_id, post_id, is_reposted, reposts_count)
    return is_reposted, reposts_count


async def get_user_reposts(
    db: AsyncSession,
    user_id: int,
    skip: int = 0,
    limit: int = 50,
) -> list[Post]:
    """Posts the user has reposted, most recent repost first."""
    result = await db.execute(
        select(Post)
        .join(Repost, Repost.post_id == Post.id)
        .where(Repost.user_id == user_id)
        .order_by(desc(Repost.created_at), desc(Repost.id))
        .offset(skip)
        .limit(limit)
        .options(selectinload(Post.user))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
