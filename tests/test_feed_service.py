"""Posts, feed assembly, follows and saved posts."""
import random

from sqlalchemy import func, select

from app.models.comment import Comment
from app.models.engagement import Like, SavedPost
from app.models.post import Post
from app.schemas.post import MediaItem, PostCreate
from app.services.comment_service import create_comment
from app.services.feed_service import create_post, delete_post, get_feed, get_post, get_user_posts, update_post
from app.services.follow_service import (
    follow_user,
    get_follower_count,
    get_following_count,
    is_following,
    unfollow_user,
)
from app.services.interaction_service import toggle_like
from app.services.repost_service import toggle_repost
from app.services.saved_post_service import get_saved_posts, is_post_saved, save_post, unsave_post
from tests.conftest import make_post, make_user


class TestPostLifecycle:
    async def test_create_post_starts_with_zero_counters(self, db) -> None:
        author = await make_user(db)
        post = await create_post(
            db, author.id, PostCreate(content="  lunch  ", media=[MediaItem(url="https://cdn/x.jpg")])
        )
        assert post.content == "lunch"
        assert post.media == [{"url": "https://cdn/x.jpg", "type": "image"}]
        assert (post.likes_count, post.comments_count, post.reposts_count) == (0, 0, 0)
        assert post.user.id == author.id

    async def test_update_requires_owner(self, db) -> None:
        author = await make_user(db)
        stranger = await make_user(db)
        post = await make_post(db, author)

        assert await update_post(db, post.id, stranger.id, "hacked") is None
        updated = await update_post(db, post.id, author.id, " edited ")
        assert updated.content == "edited"
        assert await update_post(db, 999_999, author.id, "x") is None

    async def test_delete_removes_dependents(self, db) -> None:
        author = await make_user(db)
        fan = await make_user(db)
        post = await make_post(db, author)
        keep = await make_post(db, author)
        await toggle_like(db, fan.id, post.id)
        await toggle_repost(db, fan.id, post.id)
        await save_post(db, fan.id, post.id)
        top = await create_comment(db, fan.id, post.id, "top")
        await create_comment(db, author.id, post.id, "reply", parent_id=top.id)
        await toggle_like(db, fan.id, keep.id)

        assert await delete_post(db, post.id, fan.id) is False
        assert await delete_post(db, post.id, author.id) is True

        assert await get_post(db, post.id) is None
        assert await db.scalar(select(func.count(Comment.id)).where(Comment.post_id == post.id)) == 0
        assert await db.scalar(select(func.count(Like.id)).where(Like.post_id == post.id)) == 0
        assert await db.scalar(select(func.count(SavedPost.id))) == 0
        assert await db.scalar(select(func.count(Like.id))) == 1
        assert await get_post(db, keep.id) is not None

    async def test_user_posts_newest_first(self, db) -> None:
        author = await make_user(db)
        other = await make_user(db)
        old = await make_post(db, author, created_at=100)
        new = await make_post(db, author, created_at=200)
        await make_post(db, other)

        posts = await get_user_posts(db, author.id)
        assert [p.id for p in posts] == [new.id, old.id]
        assert [p.id for p in await get_user_posts(db, author.id, skip=1, limit=1)] == [old.id]


class TestGetFeed:
    async def test_recent_mode_with_viewer_flags(self, db) -> None:
        author = await make_user(db)
        viewer = await make_user(db)
        p1 = await make_post(db, author, created_at=100)
        p2 = await make_post(db, author, created_at=300)
        p3 = await make_post(db, author, created_at=200)
        await toggle_like(db, viewer.id, p3.id)
        await toggle_repost(db, viewer.id, p1.id)

        feed = await get_feed(db, viewer.id, limit=10, offset=0, mode="recent")
        assert [p.id for p in feed] == [p2.id, p3.id, p1.id]
        flags = {p.id: (p.is_liked, p.is_reposted) for p in feed}
        assert flags == {p1.id: (False, True), p2.id: (False, False), p3.id: (True, False)}
        assert feed[1].likes_count == 1
        assert feed[0].user.id == author.id

    async def test_popular_mode_sees_fresh_counters(self, db) -> None:
        author = await make_user(db)
        fans = [await make_user(db) for _ in range(3)]
        quiet = await make_post(db, author, created_at=200)
        busy = await make_post(db, author, created_at=100)
        assert [p.id for p in await get_feed(db, author.id, mode="popular")] == [quiet.id, busy.id]

        for fan in fans:
            await toggle_like(db, fan.id, busy.id)
        feed = await get_feed(db, author.id, mode="popular")
        assert [p.id for p in feed] == [busy.id, quiet.id]
        assert feed[0].likes_count == 3

    async def test_algorithm_pages_are_subsets(self, db) -> None:
        author = await make_user(db)
        ids = {(await make_post(db, author)).id for _ in range(6)}

        page = await get_feed(db, author.id, limit=4, offset=0, rng=random.Random(5))
        assert len(page) == 4
        assert {p.id for p in page} <= ids
        assert await get_feed(db, author.id, limit=4, offset=10) == []

    async def test_empty_feed(self, db) -> None:
        viewer = await make_user(db)
        assert await get_feed(db, viewer.id) == []


class TestFollows:
    async def test_follow_unfollow(self, db) -> None:
        a = await make_user(db)
        b = await make_user(db)

        assert await follow_user(db, a.id, b.id) is True
        assert await follow_user(db, a.id, b.id) is True
        assert await is_following(db, a.id, b.id)
        assert not await is_following(db, b.id, a.id)
        assert await get_follower_count(db, b.id) == 1
        assert await get_following_count(db, a.id) == 1

        assert await unfollow_user(db, a.id, b.id) is True
        assert await unfollow_user(db, a.id, b.id) is False
        assert await get_follower_count(db, b.id) == 0

    async def test_cannot_follow_self(self, db) -> None:
        a = await make_user(db)
        assert await follow_user(db, a.id, a.id) is False
        assert await get_follower_count(db, a.id) == 0


class TestSavedPosts:
    async def test_save_list_unsave(self, db) -> None:
        author = await make_user(db)
        reader = await make_user(db)
        first = await make_post(db, author)
        second = await make_post(db, author)

        assert await save_post(db, reader.id, first.id) is True
        assert await save_post(db, reader.id, first.id) is False
        db.add(SavedPost(user_id=reader.id, post_id=second.id, created_at=10**10))
        await db.flush()

        saved = await get_saved_posts(db, reader.id)
        assert [(p.id, isinstance(ts, int)) for p, ts in saved] == [(second.id, True), (first.id, True)]
        assert await is_post_saved(db, reader.id, first.id)

        assert await unsave_post(db, reader.id, first.id) is True
        assert await unsave_post(db, reader.id, first.id) is False
        assert [p.id for p, _ in await get_saved_posts(db, reader.id)] == [second.id]

    async def test_saving_does_not_touch_counters(self, db) -> None:
        author = await make_user(db)
        post = await make_post(db, author)
        await save_post(db, author.id, post.id)
        fresh = await db.scalar(select(Post.likes_count).where(Post.id == post.id))
        assert fresh == 0
