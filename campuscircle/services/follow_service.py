"""
Follow-graph mutations and queries.

The `follows` table is the single source of truth for the relation; follower
and following lists and their counts are derived from it.
"""

from dataclasses import dataclass
from typing import List, Tuple
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.core.exceptions import NotFoundError, SelfFollowForbidden, TargetNotFound
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.user import Follow, User

logger = structlog.get_logger(__name__)


@dataclass
class FollowResult:
    is_following: bool
    followers_count: int


async def is_following(db: AsyncSession, follower_id: UUID, followed_id: UUID) -> bool:
    result = await db.execute(
        select(Follow.id).where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
    )
    return result.scalar_one_or_none() is not None


async def followers_count(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(select(func.count()).select_from(Follow).where(Follow.followed_id == user_id))
    return result.scalar() or 0


async def following_count(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(select(func.count()).select_from(Follow).where(Follow.follower_id == user_id))
    return result.scalar() or 0


async def follow_counts(db: AsyncSession, user_id: UUID) -> Tuple[int, int]:
    """(followers, following) for a user."""
    return await followers_count(db, user_id), await following_count(db, user_id)


async def toggle_follow(db: AsyncSession, acting_user_id: UUID, target_user_id: UUID) -> FollowResult:
    """Follow the target if not already following it, otherwise unfollow."""
    if acting_user_id == target_user_id:
        raise SelfFollowForbidden()

    result = await db.execute(select(User.id).where(User.id == target_user_id))
    if result.scalar_one_or_none() is None:
        raise TargetNotFound()

    if await is_following(db, acting_user_id, target_user_id):
        await db.execute(
            delete(Follow).where(
                Follow.follower_id == acting_user_id,
                Follow.followed_id == target_user_id,
            )
        )
        now_following = False
    else:
        db.add(Follow(follower_id=acting_user_id, followed_id=target_user_id))
        now_following = True

    await commit_or_conflict(db, "Follow state changed concurrently, please retry")

    count = await followers_count(db, target_user_id)
    logger.info(
        "follow_toggled",
        follower_id=str(acting_user_id),
        followed_id=str(target_user_id),
        is_following=now_following,
        followers_count=count,
    )
    return FollowResult(is_following=now_following, followers_count=count)


async def _require_user(db: AsyncSession, user_id: UUID) -> None:
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("User not found")


async def get_followers(db: AsyncSession, user_id: UUID) -> List[User]:
    """Accounts following user_id, most recent first."""
    await _require_user(db, user_id)
    result = await db.execute(
        select(User)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.followed_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.scalars().all())


async def get_following(db: AsyncSession, user_id: UUID) -> List[User]:
    """Accounts user_id follows, most recent first."""
    await _require_user(db, user_id)
    result = await db.execute(
        select(User)
        .join(Follow, Follow.followed_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.scalars().all())
