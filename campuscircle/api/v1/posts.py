"""
Posts API - feed, authoring, likes and comments
- Any signed-in account: read, post, like, comment
- Owner: edit/delete own posts
- Comment author or post owner: delete a comment
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.api.deps import Pagination, get_current_user, get_db, posts_pagination
from campuscircle.models.user import User
from campuscircle.schemas.common import MessageResponse, total_pages
from campuscircle.schemas.post import (
    CommentCreate,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from campuscircle.services import directory_service, post_service

router = APIRouter()


@router.get("", response_model=PostListResponse)
async def get_feed(
    pagination: Pagination = Depends(posts_pagination),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Global feed, newest first."""
    posts, total = await post_service.list_feed(db, pagination.page, pagination.limit)
    return PostListResponse(
        posts=[PostResponse.from_post(p, current_user.id) for p in posts],
        current_page=pagination.page,
        total_pages=total_pages(total, pagination.limit),
        total_posts=total,
    )


@router.get("/user/{user_id}", response_model=List[PostResponse])
async def get_user_posts(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All posts by one account, newest first."""
    await directory_service.get_user(db, user_id)
    posts = await post_service.list_user_posts(db, user_id)
    return [PostResponse.from_post(p, current_user.id) for p in posts]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post(db, post_id)
    return PostResponse.from_post(post, current_user.id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.create_post(db, current_user.id, post_in.content, post_in.image_url)
    return PostResponse.from_post(post, current_user.id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    post_in: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit own post (content and/or image URL)."""
    post = await post_service.update_post(
        db,
        post_id,
        current_user.id,
        content=post_in.content,
        image_url=post_in.image_url,
    )
    return PostResponse.from_post(post, current_user.id)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, post_id, current_user.id)
    return MessageResponse(message="Post deleted successfully")


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Like the post, or remove the like if already present."""
    result = await post_service.toggle_like(db, post_id, current_user.id)
    return LikeResponse(likes=result.likes, is_liked=result.is_liked)


@router.post("/{post_id}/comment", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: UUID,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await post_service.add_comment(db, post_id, current_user.id, comment_in.content)
    return CommentResponse.from_comment(comment)


@router.delete("/{post_id}/comment/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_comment(db, post_id, comment_id, current_user.id)
    return MessageResponse(message="Comment deleted successfully")
