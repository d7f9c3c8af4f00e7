"""Posts CRUD, likes, reposts, comments and saves."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user, get_current_user_optional
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.post import LikeToggleResponse, PostCreate, PostResponse, PostUpdate, SavedStatus
from app.schemas.repost import RepostToggleResponse
from app.services.comment_service import comment_to_response, create_comment, get_thread
from app.services.feed_service import (
    annotate_posts,
    create_post,
    delete_post,
    get_post,
    post_to_response,
    update_post,
)
from app.services.interaction_service import toggle_like, unlike_post
from app.services.repost_service import toggle_repost
from app.services.saved_post_service import is_post_saved, save_post, unsave_post

router = APIRouter(prefix="/posts", tags=["posts"])
logger = logging.getLogger(__name__)


async def _require_post(db: AsyncSession, post_id: int):
    post = await get_post(db, post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await create_post(db, current_user.id, data)
    await db.commit()
    return post_to_response(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(
    post_id: int,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    post = await _require_post(db, post_id)
    viewer_id = current_user.id if current_user else None
    (response,) = await annotate_posts(db, viewer_id, [post])
    return response


@router.put("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: int,
    data: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await update_post(db, post_id, current_user.id, data.content)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or you don't have permission to edit it",
        )
    await db.commit()
    (response,) = await annotate_posts(db, current_user.id, [post])
    return response


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_post(db, post_id, current_user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or you don't have permission to delete it",
        )
    await db.commit()
    return None


@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_post(db, post_id)
    try:
        liked = await toggle_like(db, current_user.id, post_id)
        await db.commit()
    except IntegrityError:
        logger.warning("Concurrent like toggle for user %s on post %s", current_user.id, post_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Like state changed, retry")
    return LikeToggleResponse(liked=liked)


@router.post("/{post_id}/unlike", response_model=LikeToggleResponse)
async def unlike_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_post(db, post_id)
    await unlike_post(db, current_user.id, post_id)
    await db.commit()
    return LikeToggleResponse(liked=False)


@router.post("/{post_id}/repost", response_model=RepostToggleResponse)
async def toggle_repost_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_post(db, post_id)
    try:
        is_reposted, reposts_count = await toggle_repost(db, current_user.id, post_id)
        await db.commit()
    except IntegrityError:
        logger.warning("Concurrent repost toggle for user %s on post %s", current_user.id, post_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Repost state changed, retry")
    return RepostToggleResponse(is_reposted=is_reposted, reposts_count=reposts_count)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_post_comments(
    post_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await get_thread(db, post_id)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_post_comment(
    post_id: int,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await create_comment(db, current_user.id, post_id, data.content, data.parent_id)
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post or parent comment not found")
    await db.commit()
    return comment_to_response(comment)


@router.post("/{post_id}/save", status_code=status.HTTP_201_CREATED)
async def save_post_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_post(db, post_id)
    if not await save_post(db, current_user.id, post_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post already saved")
    await db.commit()
    return {"message": "Post saved successfully"}


@router.delete("/{post_id}/save")
async def unsave_post_endpoint(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await unsave_post(db, current_user.id, post_id)
    await db.commit()
    return {"message": "Post unsaved successfully"}


@router.get("/{post_id}/saved-status", response_model=SavedStatus)
async def saved_status(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return SavedStatus(is_saved=await is_post_saved(db, current_user.id, post_id))
