"""Notifications derived from comments, likes and follows.

Nothing is stored: each call unions three capped queries and re-sorts them.
There is no read ledger, so every event is reported unread.
"""
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.comment import Comment
from app.models.engagement import Follow, Like
from app.models.post import Post
from app.models.user import User
from app.schemas.notification import NotificationActor, NotificationEvent

MESSAGES = {
    "comment": "commented on your post",
    "like": "liked your post",
    "follow": "followed you",
}


def _event(notification_type: str, row, post_id: int | None) -> NotificationEvent:
    return NotificationEvent(
        id=row.id,
        type=notification_type,
        message=MESSAGES[notification_type],
        user=NotificationActor(
            id=row.actor_id,
            first_name=row.first_name,
            last_name=row.last_name,
            profile_image_url=row.profile_image_url,
        ),
        created_at=row.created_at or 0,
        is_read=False,
        post_id=post_id,
    )


async def _comment_events(db: AsyncSession, user_id: int, cap: int) -> list[NotificationEvent]:
    result = await db.execute(
        select(
            Comment.id,
            Comment.created_at,
            Comment.post_id,
            Comment.user_id.label("actor_id"),
            User.first_name,
            User.last_name,
            User.profile_image_url,
        )
        .join(Post, Comment.post_id == Post.id)
        .join(User, Comment.user_id == User.id)
        .where(Post.user_id == user_id, Comment.user_id != user_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .limit(cap)
    )
    return [_event("comment", row, row.post_id) for row in result.all()]


async def _like_events(db: AsyncSession, user_id: int, cap: int) -> list[NotificationEvent]:
    result = await db.execute(
        select(
            Like.id,
            Like.created_at,
            Like.post_id,
            Like.user_id.label("actor_id"),
            User.first_name,
            User.last_name,
            User.profile_image_url,
        )
        .join(Post, Like.post_id == Post.id)
        .join(User, Like.user_id == User.id)
        .where(Post.user_id == user_id, Like.user_id != user_id)
        .order_by(desc(Like.created_at), desc(Like.id))
        .limit(cap)
    )
    return [_event("like", row, row.post_id) for row in result.all()]


async def _follow_events(db: AsyncSession, user_id: int, cap: int) -> list[NotificationEvent]:
    result = await db.execute(
        select(
            Follow.id,
            Follow.created_at,
            Follow.follower_id.label("actor_id"),
            User.first_name,
            User.last_name,
            User.profile_image_url,
        )
        .join(User, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id, Follow.follower_id != user_id)
        .order_by(desc(Follow.created_at), desc(Follow.id))
        .limit(cap)
    )
    return [_event("follow", row, None) for row in result.all()]


async def get_notifications(
    db: AsyncSession,
    user_id: int,
    *,
    per_source: int | None = None,
    limit: int | None = None,
) -> list[NotificationEvent]:
    """Comments, likes and follows aimed at user_id by other users, newest first."""
    if per_source is None:
        per_source = settings.NOTIFICATIONS_PER_SOURCE
    if limit is None:
        limit = settings.NOTIFICATIONS_LIMIT
    events = (
        await _comment_events(db, user_id, per_source)
        + await _like_events(db, user_id, per_source)
        + await _follow_events(db, user_id, per_source)
    )
    events.sort(key=lambda e: e.created_at, reverse=True)
    return events[:limit]
