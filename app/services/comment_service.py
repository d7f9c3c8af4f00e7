"""Two-level comment threads: top-level comments and their replies."""
import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.comment import Comment
from app.models.post import Post
from app.schemas.comment import CommentResponse
from app.schemas.user import UserPublic
from app.services.counter_service import adjust_post_counter, increment_replies_count

logger = logging.getLogger(__name__)


def comment_to_response(comment: Comment, replies: list[CommentResponse] | None = None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        user_id=comment.user_id,
        post_id=comment.post_id,
        parent_id=comment.parent_id,
        content=comment.content,
        replies_count=comment.replies_count or 0,
        created_at=comment.created_at,
        user=UserPublic.model_validate(comment.user) if comment.user else None,
        replies=replies or [],
    )


async def _resolve_parent(db: AsyncSession, post_id: int, parent_id: int) -> int | None:
    """Return the top-level comment a reply should hang off, or None if invalid.

    A parent that is itself a reply is flattened to its own parent so threads
    never grow past two levels.
    """
    row = (
        await db.execute(select(Comment.post_id, Comment.parent_id).where(Comment.id == parent_id))
    ).one_or_none()
    if row is None or row.post_id != post_id:
        return None
    if row.parent_id is not None:
        return row.parent_id
    return parent_id


async def create_comment(
    db: AsyncSession,
    user_id: int,
    post_id: int,
    content: str,
    parent_id: int | None = None,
) -> Comment | None:
    """Insert a comment and bump the post's comments_count (and the parent's replies_count).

    Returns None if the post does not exist or parent_id is not a comment on it.
    """
    post_exists = await db.scalar(select(Post.id).where(Post.id == post_id))
    if post_exists is None:
        return None
    if parent_id is not None:
        resolved = await _resolve_parent(db, post_id, parent_id)
        if resolved is None:
            return None
        if resolved != parent_id:
            logger.debug("Flattened reply parent %s -> %s on post %s", parent_id, resolved, post_id)
        parent_id = resolved

    comment = Comment(user_id=user_id, post_id=post_id, parent_id=parent_id, content=content)
    db.add(comment)
    await db.flush()
    await adjust_post_counter(db, post_id, "comments_count", 1)
    if parent_id is not None:
        await increment_replies_count(db, parent_id)
    await db.refresh(comment, ["user"])
    logger.info("User %s commented on post %s (comment %s, parent %s)", user_id, post_id, comment.id, parent_id)
    return comment


async def get_thread(db: AsyncSession, post_id: int) -> list[CommentResponse]:
    """Top-level comments newest first, each with its replies oldest first.

    All comments of the post are fetched in one query and grouped by parent in
    a single pass.
    """
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
        .options(selectinload(Comment.user))
        .execution_options(populate_existing=True)
    )
    comments = list(result.scalars().all())
    by_id = {c.id: c for c in comments}

    top_level: list[Comment] = []
    replies_by_parent: dict[int, list[Comment]] = defaultdict(list)
    for c in comments:
        if c.parent_id is None:
            top_level.append(c)
            continue
        # Rows nested deeper than two levels (written before flattening) are
        # attached to their top-level ancestor.
        root = by_id.get(c.parent_id)
        hops = 0
        while root is not None and root.parent_id is not None and hops < len(comments):
            root = by_id.get(root.parent_id)
            hops += 1
        if root is None or root.parent_id is not None:
            continue
        replies_by_parent[root.id].append(c)

    top_level.reverse()
    return [
        comment_to_response(c, [comment_to_response(r) for r in replies_by_parent.get(c.id, [])])
        for c in top_level
    ]
