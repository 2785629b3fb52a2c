"""
Post, comment and like business logic.

A post is an aggregate: its comments and likes are only ever changed through
the post and are removed with it in the same transaction.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.config import settings
from campuscircle.core.exceptions import EmptyContent, ForbiddenError, NotFoundError, ValidationError
from campuscircle.db.base import utcnow
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.post import Post, PostComment, PostLike

logger = structlog.get_logger(__name__)


@dataclass
class LikeResult:
    likes: int
    is_liked: bool


def _clean_content(content: Optional[str], max_length: int, empty_detail: str) -> str:
    cleaned = (content or "").strip()
    if not cleaned:
        raise EmptyContent(empty_detail)
    if len(cleaned) > max_length:
        raise ValidationError(f"Content must be at most {max_length} characters")
    return cleaned


async def get_post(db: AsyncSession, post_id: UUID) -> Post:
    result = await db.execute(
        select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def list_feed(db: AsyncSession, page: int = 1, limit: int = 20) -> Tuple[List[Post], int]:
    """One page of the global feed, newest first, plus the total post count."""
    total_result = await db.execute(select(func.count()).select_from(Post))
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Post)
        .order_by(Post.created_at.desc(), Post.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def list_user_posts(db: AsyncSession, user_id: UUID) -> List[Post]:
    result = await db.execute(
        select(Post).where(Post.user_id == user_id).order_by(Post.created_at.desc(), Post.id)
    )
    return list(result.scalars().all())


async def list_all_posts(db: AsyncSession) -> List[Post]:
    result = await db.execute(select(Post).order_by(Post.created_at.desc(), Post.id))
    return list(result.scalars().all())


async def create_post(
    db: AsyncSession,
    owner_id: UUID,
    content: str,
    image_url: Optional[str] = None,
) -> Post:
    post = Post(
        user_id=owner_id,
        content=_clean_content(content, settings.POST_MAX_LENGTH, "Content is required"),
        image_url=image_url or "",
    )
    db.add(post)
    await commit_or_conflict(db)
    logger.info("post_created", post_id=str(post.id), user_id=str(owner_id))
    return await get_post(db, post.id)


async def update_post(
    db: AsyncSession,
    post_id: UUID,
    actor_id: UUID,
    content: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Post:
    """Owner-only edit of content and/or image URL."""
    post = await get_post(db, post_id)
    if post.user_id != actor_id:
        raise ForbiddenError()

    if content is not None:
        post.content = _clean_content(content, settings.POST_MAX_LENGTH, "Content is required")
    if image_url is not None:
        post.image_url = image_url

    await commit_or_conflict(db, "Post was modified concurrently, please retry")
    logger.info("post_updated", post_id=str(post_id), user_id=str(actor_id))
    return await get_post(db, post_id)


async def delete_post(db: AsyncSession, post_id: UUID, actor_id: UUID, *, privileged: bool = False) -> None:
    """
    Delete a post together with its comments and likes.

    `privileged` is the administrator path and skips the ownership check.
    """
    post = await get_post(db, post_id)
    if not privileged and post.user_id != actor_id:
        raise ForbiddenError()

    comments, likes = len(post.comments), len(post.likes)
    # comments and likes are loaded, so the ORM cascade removes them in this flush
    await db.delete(post)
    await commit_or_conflict(db, "Post was modified concurrently, please retry")
    logger.info(
        "post_deleted",
        post_id=str(post_id),
        actor_id=str(actor_id),
        privileged=privileged,
        comments_deleted=comments,
        likes_deleted=likes,
    )


async def toggle_like(db: AsyncSession, post_id: UUID, actor_id: UUID) -> LikeResult:
    """Flip actor's membership in the post's like set."""
    post = await get_post(db, post_id)

    existing = next((like for like in post.likes if like.user_id == actor_id), None)
    if existing is not None:
        post.likes.remove(existing)
        is_liked = False
    else:
        post.likes.append(PostLike(post_id=post.id, user_id=actor_id))
        is_liked = True

    await commit_or_conflict(db, "Like state changed concurrently, please retry")
    count = len(post.likes)
    logger.debug("like_toggled", post_id=str(post_id), user_id=str(actor_id), is_liked=is_liked, likes=count)
    return LikeResult(likes=count, is_liked=is_liked)


async def add_comment(db: AsyncSession, post_id: UUID, actor_id: UUID, content: str) -> PostComment:
    """Append a comment; existing comments are never touched."""
    cleaned = _clean_content(content, settings.COMMENT_MAX_LENGTH, "Comment content is required")
    post = await get_post(db, post_id)

    next_position = max((c.position for c in post.comments), default=0) + 1
    comment = PostComment(post_id=post.id, user_id=actor_id, content=cleaned, position=next_position)
    post.comments.append(comment)
    # Bumps the post version so concurrent appends cannot claim the same position
    post.updated_at = utcnow()

    await commit_or_conflict(db, "Post was modified concurrently, please retry")
    logger.info("comment_added", post_id=str(post_id), comment_id=str(comment.id), user_id=str(actor_id))

    result = await db.execute(
        select(PostComment).where(PostComment.id == comment.id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def delete_comment(db: AsyncSession, post_id: UUID, comment_id: UUID, actor_id: UUID) -> None:
    """Remove a comment. Allowed for the comment's author and the post's owner."""
    post = await get_post(db, post_id)

    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise NotFoundError("Comment not found")

    if comment.user_id != actor_id and post.user_id != actor_id:
        raise ForbiddenError()

    post.comments.remove(comment)
    await commit_or_conflict(db, "Post was modified concurrently, please retry")
    logger.info("comment_deleted", post_id=str(post_id), comment_id=str(comment_id), actor_id=str(actor_id))
