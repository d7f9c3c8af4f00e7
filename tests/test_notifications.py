"""Derived notifications."""
from app.models.comment import Comment
from app.models.engagement import Follow, Like
from app.services.notification_service import get_notifications
from tests.conftest import make_post, make_user


async def test_merges_sources_newest_first(db) -> None:
    me = await make_user(db)
    alice = await make_user(db, first_name="Alice")
    bob = await make_user(db, first_name="Bob")
    post = await make_post(db, me)

    db.add_all(
        [
            Comment(user_id=alice.id, post_id=post.id, content="nice", created_at=300),
            Like(user_id=bob.id, post_id=post.id, created_at=100),
            Follow(follower_id=alice.id, following_id=me.id, created_at=200),
        ]
    )
    await db.flush()

    events = await get_notifications(db, me.id)
    assert [(e.type, e.created_at) for e in events] == [("comment", 300), ("follow", 200), ("like", 100)]
    assert events[0].message == "commented on your post"
    assert events[0].user.first_name == "Alice"
    assert events[0].post_id == post.id
    assert events[1].post_id is None
    assert events[2].message == "liked your post"
    assert all(e.is_read is False for e in events)


async def test_own_actions_are_excluded(db) -> None:
    me = await make_user(db)
    post = await make_post(db, me)
    db.add_all(
        [
            Comment(user_id=me.id, post_id=post.id, content="bump"),
            Like(user_id=me.id, post_id=post.id),
            Follow(follower_id=me.id, following_id=me.id),
        ]
    )
    await db.flush()

    assert await get_notifications(db, me.id) == []


async def test_only_events_on_my_content(db) -> None:
    me = await make_user(db)
    other = await make_user(db)
    fan = await make_user(db)
    other_post = await make_post(db, other)
    db.add_all(
        [
            Like(user_id=fan.id, post_id=other_post.id),
            Follow(follower_id=fan.id, following_id=other.id),
        ]
    )
    await db.flush()

    assert await get_notifications(db, me.id) == []
    assert len(await get_notifications(db, other.id)) == 2


async def test_per_source_cap_and_total_limit(db) -> None:
    me = await make_user(db)
    post = await make_post(db, me)
    fans = [await make_user(db) for _ in range(4)]
    for i, fan in enumerate(fans):
        db.add(Like(user_id=fan.id, post_id=post.id, created_at=1000 + i))
        db.add(Follow(follower_id=fan.id, following_id=me.id, created_at=2000 + i))
    await db.flush()

    capped = await get_notifications(db, me.id, per_source=2)
    assert [(e.type, e.created_at) for e in capped] == [
        ("follow", 2003),
        ("follow", 2002),
        ("like", 1003),
        ("like", 1002),
    ]

    limited = await get_notifications(db, me.id, limit=3)
    assert [e.created_at for e in limited] == [2003, 2002, 2001]


async def test_zero_caps_are_honoured(db) -> None:
    me = await make_user(db)
    fan = await make_user(db)
    post = await make_post(db, me)
    db.add(Like(user_id=fan.id, post_id=post.id))
    await db.flush()

    assert await get_notifications(db, me.id, per_source=0) == []
    assert await get_notifications(db, me.id, limit=0) == []
    assert len(await get_notifications(db, me.id)) == 1
