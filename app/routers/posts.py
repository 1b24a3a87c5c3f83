"""Post, reply and like routes."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from app.config.settings import settings
from app.dependencies.auth import get_current_active_user
from app.dependencies.services import get_post_service
from app.models.user import User
from app.schemas.common import BaseResponse
from app.schemas.post import (
    LikeResponse,
    LockRequest,
    PinRequest,
    PostCreate,
    PostDetailResponse,
    PostItemResponse,
    PostListResponse,
    PostUpdate,
    ReplyCreate,
    ReplyItemResponse,
)
from app.services.post_service import PostService
from app.utils.response_builders import ResponseBuilder

router = APIRouter()


@router.get("/", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    category: str | None = Query(None, description="Category name, 'all' for every category"),
    search: str | None = Query(None, description="Search title, content and author"),
    pinned: bool | None = Query(None, description="Only pinned posts"),
    sort: Literal["recent", "hot"] = Query("recent"),
    post_service: PostService = Depends(get_post_service),
):
    """Public post listing."""
    rows, total = await post_service.list_posts(
        page=page,
        limit=limit,
        category=category,
        search=search,
        pinned=pinned,
        sort=sort,
    )
    return ResponseBuilder.post_list(rows, total, page, limit)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: int,
    post_service: PostService = Depends(get_post_service),
):
    """Post with its replies."""
    post, likes, replies = await post_service.get_post_detail(post_id)
    return ResponseBuilder.post_detail(post, likes, replies)


@router.post("/", response_model=PostItemResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    post, likes, replies = await post_service.create_post(
        author=current_user,
        title=post_data.title,
        content=post_data.content,
        category=post_data.category,
        tags=post_data.tags,
    )
    return ResponseBuilder.post_item(post, likes, replies, "Post created successfully")


@router.put("/{post_id}", response_model=PostItemResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    """Edit a post; authors edit their own, admins edit any."""
    post, likes, replies = await post_service.update_post(
        current_user,
        post_id,
        title=post_data.title,
        content=post_data.content,
        category=post_data.category,
        tags=post_data.tags,
    )
    return ResponseBuilder.post_item(post, likes, replies, "Post updated successfully")


@router.delete("/{post_id}", response_model=BaseResponse)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    await post_service.delete_post(current_user, post_id)
    return ResponseBuilder.resource_deleted("post")


@router.post(
    "/{post_id}/replies", response_model=ReplyItemResponse, status_code=status.HTTP_201_CREATED
)
async def create_reply(
    post_id: int,
    reply_data: ReplyCreate,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    """Reply to an unlocked post."""
    reply = await post_service.create_reply(current_user, post_id, reply_data.content)
    return ResponseBuilder.reply_item(reply, "Reply created successfully")


@router.put("/{post_id}/replies/{reply_id}", response_model=ReplyItemResponse)
async def update_reply(
    post_id: int,
    reply_id: int,
    reply_data: ReplyCreate,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    reply = await post_service.update_reply(current_user, post_id, reply_id, reply_data.content)
    return ResponseBuilder.reply_item(reply, "Reply updated successfully")


@router.delete("/{post_id}/replies/{reply_id}", response_model=BaseResponse)
async def delete_reply(
    post_id: int,
    reply_id: int,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    await post_service.delete_reply(current_user, post_id, reply_id)
    return ResponseBuilder.resource_deleted("reply")


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    """Like a post, or take the like back."""
    liked, likes_count = await post_service.toggle_like(current_user, post_id)
    return LikeResponse(
        success=True,
        message="Post liked" if liked else "Post unliked",
        liked=liked,
        likes_count=likes_count,
    )


@router.patch("/{post_id}/pin", response_model=PostItemResponse)
async def pin_post(
    post_id: int,
    pin_data: PinRequest,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    post, likes, replies = await post_service.set_pinned(current_user, post_id, pin_data.is_pinned)
    message = "Post pinned successfully" if pin_data.is_pinned else "Post unpinned successfully"
    return ResponseBuilder.post_item(post, likes, replies, message)


@router.patch("/{post_id}/lock", response_model=PostItemResponse)
async def lock_post(
    post_id: int,
    lock_data: LockRequest,
    current_user: User = Depends(get_current_active_user),
    post_service: PostService = Depends(get_post_service),
):
    post, likes, replies = await post_service.set_locked(current_user, post_id, lock_data.is_locked)
    message = "Post closed successfully" if lock_data.is_locked else "Post reopened successfully"
    return ResponseBuilder.post_item(post, likes, replies, message)
