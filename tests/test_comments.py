"""Comment creation and thread assembly."""
from app.models.comment import Comment
from app.services.comment_service import create_comment, get_thread
from app.services.counter_service import get_post_counter
from tests.conftest import make_post, make_user


async def _replies_count(db, comment_id: int) -> int:
    comment = await db.get(Comment, comment_id, populate_existing=True)
    return comment.replies_count


async def test_top_level_and_reply_bump_counters(db) -> None:
    author = await make_user(db)
    commenter = await make_user(db)
    post = await make_post(db, author)

    top = await create_comment(db, commenter.id, post.id, "first!")
    assert top is not None and top.parent_id is None
    assert await get_post_counter(db, post.id, "comments_count") == 1

    reply = await create_comment(db, author.id, post.id, "thanks", parent_id=top.id)
    assert reply.parent_id == top.id
    assert await get_post_counter(db, post.id, "comments_count") == 2
    assert await _replies_count(db, top.id) == 1


async def test_reply_to_reply_is_flattened(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    top = await create_comment(db, author.id, post.id, "top")
    reply = await create_comment(db, author.id, post.id, "reply", parent_id=top.id)

    nested = await create_comment(db, author.id, post.id, "reply to reply", parent_id=reply.id)
    assert nested.parent_id == top.id
    assert await _replies_count(db, top.id) == 2
    assert await _replies_count(db, reply.id) == 0


async def test_missing_post_or_parent_returns_none(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    other = await make_post(db, author)
    foreign = await create_comment(db, author.id, other.id, "elsewhere")

    assert await create_comment(db, author.id, 999_999, "nope") is None
    assert await create_comment(db, author.id, post.id, "nope", parent_id=999_999) is None
    assert await create_comment(db, author.id, post.id, "nope", parent_id=foreign.id) is None
    assert await get_post_counter(db, post.id, "comments_count") == 0


async def test_thread_orders_top_level_newest_first_and_replies_oldest_first(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    c1 = await create_comment(db, author.id, post.id, "c1")
    r1 = await create_comment(db, author.id, post.id, "r1", parent_id=c1.id)
    r2 = await create_comment(db, author.id, post.id, "r2", parent_id=c1.id)
    c2 = await create_comment(db, author.id, post.id, "c2")
    r3 = await create_comment(db, author.id, post.id, "r3", parent_id=c1.id)

    thread = await get_thread(db, post.id)
    assert [c.id for c in thread] == [c2.id, c1.id]
    assert [r.id for r in thread[1].replies] == [r1.id, r2.id, r3.id]
    assert thread[1].replies_count == 3
    assert thread[0].replies == []
    assert thread[0].user.id == author.id


async def test_thread_uses_timestamps_before_ids(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    later = Comment(user_id=author.id, post_id=post.id, content="later", created_at=200)
    earlier = Comment(user_id=author.id, post_id=post.id, content="earlier", created_at=100)
    db.add_all([later, earlier])
    await db.flush()

    thread = await get_thread(db, post.id)
    assert [c.content for c in thread] == ["later", "earlier"]


async def test_legacy_deep_rows_attach_to_top_level_ancestor(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    top = Comment(user_id=author.id, post_id=post.id, content="top", created_at=1)
    db.add(top)
    await db.flush()
    mid = Comment(user_id=author.id, post_id=post.id, parent_id=top.id, content="mid", created_at=2)
    db.add(mid)
    await db.flush()
    deep = Comment(user_id=author.id, post_id=post.id, parent_id=mid.id, content="deep", created_at=3)
    db.add(deep)
    await db.flush()

    thread = await get_thread(db, post.id)
    assert len(thread) == 1
    assert [r.content for r in thread[0].replies] == ["mid", "deep"]


async def test_empty_thread(db) -> None:
    author = await make_user(db)
    post = await make_post(db, author)
    assert await get_thread(db, post.id) == []
