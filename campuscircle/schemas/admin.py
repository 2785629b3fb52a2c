"""Admin dashboard schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from campuscircle.schemas.common import CamelModel
from campuscircle.schemas.student import StudentResponse


class AdminUserResponse(CamelModel):
    id: UUID
    username: str
    bio: str
    role: str
    student: StudentResponse
    followers_count: int
    following_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class StatsResponse(CamelModel):
    total_students: int
    total_users: int
    total_posts: int
    students_logged_in: int
    students_not_logged_in: int


class StudentDeleteResponse(CamelModel):
    message: str
    users_deleted: int
    posts_deleted: int
    comments_deleted: int
    likes_deleted: int
    follows_deleted: int


class DeveloperInfoResponse(CamelModel):
    id: UUID
    developer_name: str
    github: str
    instagram: str
    message: str
    email: Optional[str] = None
    portfolio: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
