"""User (account) schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from campuscircle.schemas.common import CamelModel


class StudentPublic(CamelModel):
    """Roster fields visible to every signed-in account."""

    name: str
    roll_number: str
    department: str
    batch: str
    profile_image: str = ""


class UserSummary(CamelModel):
    """Author/owner block embedded in posts, comments and search results."""

    id: UUID
    username: str
    student: StudentPublic

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            student=StudentPublic.model_validate(user.student),
        )


class UserSearchResult(UserSummary):
    bio: str = ""

    @classmethod
    def from_user(cls, user) -> "UserSearchResult":
        return cls(
            id=user.id,
            username=user.username,
            bio=user.bio,
            student=StudentPublic.model_validate(user.student),
        )


class UserProfile(UserSearchResult):
    """Profile page payload with derived follow counts."""

    role: str
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False

    @classmethod
    def from_profile(cls, profile) -> "UserProfile":
        user = profile.user
        return cls(
            id=user.id,
            username=user.username,
            bio=user.bio,
            role=user.role,
            student=StudentPublic.model_validate(user.student),
            followers_count=profile.followers_count,
            following_count=profile.following_count,
            is_following=profile.is_following,
        )


class ProfileUpdate(CamelModel):
    bio: Optional[str] = Field(None, description="Free text, at most 500 characters")
    profile_image: Optional[str] = Field(None, max_length=1000)


class FollowResponse(CamelModel):
    is_following: bool
    followers_count: int
