"""Saved (bookmarked) posts."""
from sqlalchemy import delete, desc, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.session import unix_now
from app.models.engagement import SavedPost
from app.models.post import Post


async def is_post_saved(db: AsyncSession, user_id: int, post_id: int) -> bool:
    result = await db.execute(
        select(SavedPost.id).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def save_post(db: AsyncSession, user_id: int, post_id: int) -> bool:
    """Returns False if the post was already saved."""
    if await is_post_saved(db, user_id, post_id):
        return False
    await db.execute(insert(SavedPost).values(user_id=user_id, post_id=post_id, created_at=unix_now()))
    return True


async def unsave_post(db: AsyncSession, user_id: int, post_id: int) -> bool:
    result = await db.execute(
        delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
    )
    return bool(result.rowcount)


async def get_saved_posts(db: AsyncSession, user_id: int) -> list[tuple[Post, int]]:
    """(post, saved_at) pairs, most recently saved first."""
    result = await db.execute(
        select(Post, SavedPost.created_at)
        .join(SavedPost, SavedPost.post_id == Post.id)
        .where(SavedPost.user_id == user_id)
        .order_by(desc(SavedPost.created_at), desc(SavedPost.id))
        .options(selectinload(Post.user))
        .execution_options(populate_existing=True)
    )
    return [(post, saved_at) for post, saved_at in result.all()]
