"""User timelines, follows and saved posts."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.post import PostResponse, SavedPostResponse
from app.schemas.user import FollowerStats, FollowResponse, UserPublic
from app.services.feed_service import annotate_posts, get_user_posts
from app.services.follow_service import follow_user, get_follower_count, is_following, unfollow_user
from app.services.repost_service import get_user_reposts
from app.services.saved_post_service import get_saved_posts

router = APIRouter(prefix="/users", tags=["users"])


async def _require_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/me/saved-posts", response_model=list[SavedPostResponse])
async def list_saved_posts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await get_saved_posts(db, current_user.id)
    annotated = await annotate_posts(db, current_user.id, [post for post, _ in rows])
    return [
        SavedPostResponse(**response.model_dump(), saved_at=saved_at or 0)
        for response, (_, saved_at) in zip(annotated, rows)
    ]


@router.get("/{user_id}", response_model=UserPublic)
async def get_user_profile(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _require_user(db, user_id)


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def list_user_posts(
    user_id: int,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    posts = await get_user_posts(db, user_id, skip=skip, limit=limit)
    return await annotate_posts(db, current_user.id, posts)


@router.get("/{user_id}/reposts", response_model=list[PostResponse])
async def list_user_reposts(
    user_id: int,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    posts = await get_user_reposts(db, user_id, skip=skip, limit=limit)
    return await annotate_posts(db, current_user.id, posts)


@router.get("/{user_id}/followers", response_model=FollowerStats)
async def follower_stats(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return FollowerStats(
        count=await get_follower_count(db, user_id),
        is_following=await is_following(db, current_user.id, user_id),
    )


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_user(db, user_id)
    if not await follow_user(db, current_user.id, user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot follow yourself")
    await db.commit()
    return FollowResponse(following=True)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
async def unfollow(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await unfollow_user(db, current_user.id, user_id)
    await db.commit()
    return FollowResponse(following=False)
