"""Denormalized post and comment counters.

Counters are a cache of join-table cardinality.  Every write is a relative
update evaluated by the database against the stored value, issued in the same
transaction as the row insert/delete it mirrors.  Decrements are floored at 0.
"""
import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.comment import Comment
from app.models.engagement import Like, Repost
from app.models.post import Post

logger = logging.getLogger(__name__)

POST_COUNTERS = ("likes_count", "comments_count", "reposts_count")


async def adjust_post_counter(db: AsyncSession, post_id: int, counter: str, delta: int) -> None:
    """Apply ``counter = counter + delta`` on one post, never going below zero."""
    if counter not in POST_COUNTERS:
        raise ValueError(f"Unknown post counter: {counter}")
    column = getattr(Post, counter)
    if delta >= 0:
        new_value = column + delta
    else:
        new_value = case((column + delta > 0, column + delta), else_=0)
    await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values({counter: new_value})
        .execution_options(synchronize_session=False)
    )


async def get_post_counter(db: AsyncSession, post_id: int, counter: str) -> int:
    if counter not in POST_COUNTERS:
        raise ValueError(f"Unknown post counter: {counter}")
    value = await db.scalar(select(getattr(Post, counter)).where(Post.id == post_id))
    return value or 0


async def increment_replies_count(db: AsyncSession, comment_id: int) -> None:
    await db.execute(
        update(Comment)
        .where(Comment.id == comment_id)
        .values(replies_count=Comment.replies_count + 1)
        .execution_options(synchronize_session=False)
    )


async def reconcile_post_counters(db: AsyncSession, post_id: int | None = None) -> int:
    """Recompute counters from the join tables and fix any drift.

    Maintenance only: run from the Celery beat task or the CLI script, never
    while serving a request.  Returns the number of rows corrected.
    """
    like_counts = select(Like.post_id, func.count(Like.id).label("n")).group_by(Like.post_id)
    comment_counts = select(Comment.post_id, func.count(Comment.id).label("n")).group_by(Comment.post_id)
    repost_counts = select(Repost.post_id, func.count(Repost.id).label("n")).group_by(Repost.post_id)
    reply_counts = (
        select(Comment.parent_id, func.count(Comment.id).label("n"))
        .where(Comment.parent_id.is_not(None))
        .group_by(Comment.parent_id)
    )
    if post_id is not None:
        like_counts = like_counts.where(Like.post_id == post_id)
        comment_counts = comment_counts.where(Comment.post_id == post_id)
        repost_counts = repost_counts.where(Repost.post_id == post_id)
        reply_counts = reply_counts.where(Comment.post_id == post_id)

    likes = {pid: n for pid, n in (await db.execute(like_counts)).all()}
    comments = {pid: n for pid, n in (await db.execute(comment_counts)).all()}
    reposts = {pid: n for pid, n in (await db.execute(repost_counts)).all()}
    replies = {cid: n for cid, n in (await db.execute(reply_counts)).all()}

    post_q = select(Post.id, Post.likes_count, Post.comments_count, Post.reposts_count)
    comment_q = select(Comment.id, Comment.replies_count)
    if post_id is not None:
        post_q = post_q.where(Post.id == post_id)
        comment_q = comment_q.where(Comment.post_id == post_id)

    fixed = 0
    for pid, likes_count, comments_count, reposts_count in (await db.execute(post_q)).all():
        expected = {
            "likes_count": likes.get(pid, 0),
            "comments_count": comments.get(pid, 0),
            "reposts_count": reposts.get(pid, 0),
        }
        stored = {"likes_count": likes_count, "comments_count": comments_count, "reposts_count": reposts_count}
        if expected != stored:
            logger.warning("Counter drift on post %s: stored=%s expected=%s", pid, stored, expected)
            await db.execute(
                update(Post).where(Post.id == pid).values(**expected).execution_options(synchronize_session=False)
            )
            fixed += 1

    for cid, replies_count in (await db.execute(comment_q)).all():
        expected_replies = replies.get(cid, 0)
        if replies_count != expected_replies:
            logger.warning("Reply count drift on comment %s: stored=%s expected=%s", cid, replies_count, expected_replies)
            await db.execute(
                update(Comment)
                .where(Comment.id == cid)
                .values(replies_count=expected_replies)
                .execution_options(synchronize_session=False)
            )
            fixed += 1

    logger.info("Counter reconciliation finished: %d row(s) corrected", fixed)
    return fixed
