"""
Directory service: user search and profiles.

Search runs over the roster (students) and joins to accounts. Accounts are
created lazily on first login, so a roster match without an account is
expected and is dropped from the results; each drop is logged so a genuine
integrity problem would still show up.
"""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.config import settings
from campuscircle.core.exceptions import NotFoundError, ValidationError
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.student import Student
from campuscircle.models.user import User
from campuscircle.services import follow_service

logger = structlog.get_logger(__name__)


@dataclass
class Profile:
    user: User
    followers_count: int
    following_count: int
    is_following: bool


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search(db: AsyncSession, query: Optional[str], limit: Optional[int] = None) -> List[User]:
    """Case-insensitive substring search over student name and roll number."""
    term = (query or "").strip()
    if not term:
        return []

    limit = limit or settings.SEARCH_RESULT_LIMIT
    pattern = f"%{_escape_like(term)}%"
    result = await db.execute(
        select(Student)
        .where(
            or_(
                Student.name.ilike(pattern, escape="\\"),
                Student.roll_number.ilike(pattern, escape="\\"),
            )
        )
        .order_by(Student.name, Student.roll_number)
        .limit(limit)
    )
    students = list(result.scalars().all())
    if not students:
        return []

    result = await db.execute(select(User).where(User.student_id.in_([s.id for s in students])))
    users_by_student = {u.student_id: u for u in result.scalars().all()}

    matches = []
    for student in students:
        user = users_by_student.get(student.id)
        if user is None:
            logger.info("search_match_without_account", student_id=str(student.id), roll_number=student.roll_number)
            continue
        matches.append(user)
    return matches


async def get_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_profile(db: AsyncSession, user_id: UUID, viewer_id: Optional[UUID] = None) -> Profile:
    user = await get_user(db, user_id)
    followers, following = await follow_service.follow_counts(db, user.id)
    viewer_follows = False
    if viewer_id is not None and viewer_id != user.id:
        viewer_follows = await follow_service.is_following(db, viewer_id, user.id)
    return Profile(
        user=user,
        followers_count=followers,
        following_count=following,
        is_following=viewer_follows,
    )


async def update_profile(
    db: AsyncSession,
    user_id: UUID,
    bio: Optional[str] = None,
    profile_image: Optional[str] = None,
) -> User:
    """Update the account bio and/or the roster profile image."""
    user = await get_user(db, user_id)

    if bio is not None:
        bio = bio.strip()
        if len(bio) > settings.BIO_MAX_LENGTH:
            raise ValidationError(f"Bio must be at most {settings.BIO_MAX_LENGTH} characters")
        user.bio = bio

    if profile_image is not None:
        user.student.profile_image = profile_image

    await commit_or_conflict(db, "Profile was modified concurrently, please retry")
    logger.info("profile_updated", user_id=str(user_id))
    return user
