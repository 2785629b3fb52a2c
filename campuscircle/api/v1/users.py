"""User directory, profiles and the follow graph."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.api.deps import get_current_user, get_db
from campuscircle.models.user import User
from campuscircle.schemas.user import (
    FollowResponse,
    ProfileUpdate,
    UserProfile,
    UserSearchResult,
    UserSummary,
)
from campuscircle.services import directory_service, follow_service

router = APIRouter()


@router.get("/search", response_model=List[UserSearchResult])
async def search_users(
    query: Optional[str] = Query(None, max_length=100, description="Name or roll number fragment"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Search accounts by student name or roll number.

    Case-insensitive substring match; an empty query returns no results.
    """
    users = await directory_service.search(db, query)
    return [UserSearchResult.from_user(u) for u in users]


@router.put("/profile", response_model=UserProfile)
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update own bio and/or profile image."""
    await directory_service.update_profile(
        db,
        current_user.id,
        bio=profile_in.bio,
        profile_image=profile_in.profile_image,
    )
    profile = await directory_service.get_profile(db, current_user.id)
    return UserProfile.from_profile(profile)


@router.get("/{user_id}", response_model=UserProfile)
async def get_user_profile(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await directory_service.get_profile(db, user_id, viewer_id=current_user.id)
    return UserProfile.from_profile(profile)


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def toggle_follow(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Follow the user, or unfollow if already following."""
    result = await follow_service.toggle_follow(db, current_user.id, user_id)
    return FollowResponse(is_following=result.is_following, followers_count=result.followers_count)


@router.get("/{user_id}/followers", response_model=List[UserSummary])
async def get_followers(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    users = await follow_service.get_followers(db, user_id)
    return [UserSummary.from_user(u) for u in users]


@router.get("/{user_id}/following", response_model=List[UserSummary])
async def get_following(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    users = await follow_service.get_following(db, user_id)
    return [UserSummary.from_user(u) for u in users]
