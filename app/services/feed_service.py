"""Feed and post business logic."""
import logging
import random

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.db.session import unix_now
from app.models.comment import Comment
from app.models.engagement import Like, Repost, SavedPost
from app.models.post import Post
from app.schemas.post import MediaItem, PostCreate, PostResponse
from app.schemas.user import UserPublic
from app.services.interaction_service import get_user_liked_post_ids, get_user_reposted_post_ids
from app.services.ranking import FeedMode, RankingParams, rank_posts

logger = logging.getLogger(__name__)


async def create_post(db: AsyncSession, user_id: int, data: PostCreate) -> Post:
    now = unix_now()
    post = Post(
        user_id=user_id,
        content=data.content,
        media=[m.model_dump() for m in data.media],
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    await db.flush()
    await db.refresh(post, ["user"])
    logger.info("User %s created post %s", user_id, post.id)
    return post


async def get_post(db: AsyncSession, post_id: int) -> Post | None:
    result = await db.execute(
        select(Post)
        .where(Post.id == post_id)
        .options(selectinload(Post.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update_post(db: AsyncSession, post_id: int, owner_id: int, content: str) -> Post | None:
    """Edit a post's text. Returns None if the post is missing or not owned by owner_id."""
    post = await get_post(db, post_id)
    if not post or post.user_id != owner_id:
        return None
    post.content = content.strip()
    post.updated_at = unix_now()
    await db.flush()
    return post


async def delete_post(db: AsyncSession, post_id: int, owner_id: int) -> bool:
    """Delete a post with its likes, comments, reposts and saved entries.

    Returns False if the post is missing or not owned by owner_id.
    """
    result = await db.execute(
        select(Post).where(Post.id == post_id, Post.user_id == owner_id)
    )
    post = result.scalar_one_or_none()
    if not post:
        return False
    # Replies before top-level comments so the comments.parent_id FK never dangles
    await db.execute(delete(Comment).where(Comment.post_id == post_id, Comment.parent_id.is_not(None)))
    await db.execute(delete(Comment).where(Comment.post_id == post_id))
    await db.execute(delete(Like).where(Like.post_id == post_id))
    await db.execute(delete(Repost).where(Repost.post_id == post_id))
    await db.execute(delete(SavedPost).where(SavedPost.post_id == post_id))
    await db.delete(post)
    await db.flush()
    logger.info("User %s deleted post %s", owner_id, post_id)
    return True


async def get_all_posts(db: AsyncSession) -> list[Post]:
    result = await db.execute(
        select(Post)
        .order_by(desc(Post.created_at), desc(Post.id))
        .options(selectinload(Post.user))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_feed(
    db: AsyncSession,
    viewer_id: int,
    limit: int = 20,
    offset: int = 0,
    mode: FeedMode | str = FeedMode.ALGORITHM,
    *,
    rng: random.Random | None = None,
) -> list[PostResponse]:
    """Rank every post, slice the requested page and annotate it for the viewer."""
    posts = await get_all_posts(db)
    page = rank_posts(
        posts,
        mode,
        offset,
        limit,
        rng=rng,
        params=RankingParams.from_settings(settings),
    )
    return await annotate_posts(db, viewer_id, page)


async def get_user_posts(
    db: AsyncSession,
    author_id: int,
    skip: int = 0,
    limit: int = 50,
) -> list[Post]:
    result = await db.execute(
        select(Post)
        .where(Post.user_id == author_id)
        .order_by(desc(Post.created_at), desc(Post.id))
        .offset(skip)
        .limit(limit)
        .options(selectinload(Post.user))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def annotate_posts(db: AsyncSession, viewer_id: int | None, posts: list[Post]) -> list[PostResponse]:
    """Attach is_liked / is_reposted for the viewer with one query per flag."""
    if viewer_id is None:
        return [post_to_response(p) for p in posts]
    post_ids = [p.id for p in posts]
    liked_ids = await get_user_liked_post_ids(db, viewer_id, post_ids)
    reposted_ids = await get_user_reposted_post_ids(db, viewer_id, post_ids)
    return [
        post_to_response(p, is_liked=p.id in liked_ids, is_reposted=p.id in reposted_ids)
        for p in posts
    ]


def post_to_response(post: Post, is_liked: bool = False, is_reposted: bool = False) -> PostResponse:
    user = post.user
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        content=post.content or "",
        media=[MediaItem.model_validate(m) for m in (post.media or [])],
        likes_count=post.likes_count or 0,
        comments_count=post.comments_count or 0,
        reposts_count=post.reposts_count or 0,
        created_at=post.created_at or 0,
        updated_at=post.updated_at,
        user=UserPublic.model_validate(user) if user else None,
        is_liked=is_liked,
        is_reposted=is_reposted,
    )
