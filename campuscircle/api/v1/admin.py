"""
Admin endpoints - Student roster management and moderation.
All routes require the admin role.
"""

from typing import List
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.api.deps import Pagination, get_db, require_admin, students_pagination
from campuscircle.models.user import User
from campuscircle.schemas.admin import AdminUserResponse, StatsResponse, StudentDeleteResponse
from campuscircle.schemas.common import MessageResponse, total_pages
from campuscircle.schemas.post import PostResponse
from campuscircle.schemas.student import (
    BulkStudentCreate,
    BulkStudentCsv,
    BulkUploadResponse,
    BulkUploadResults,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from campuscircle.services import post_service, roster_service

logger = structlog.get_logger(__name__)

router = APIRouter()


def _bulk_response(outcome: roster_service.BulkResult) -> BulkUploadResponse:
    return BulkUploadResponse(
        message=f"{len(outcome.created)} students added successfully",
        success_count=len(outcome.created),
        error_count=len(outcome.errors),
        results=BulkUploadResults(
            success=[StudentResponse.model_validate(s) for s in outcome.created],
            errors=outcome.errors,
        ),
    )


# ==================== Student roster ====================

@router.get("/students", response_model=StudentListResponse)
async def list_students(
    pagination: Pagination = Depends(students_pagination),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List roster entries, newest first."""
    students, total = await roster_service.list_students(db, pagination.page, pagination.limit)
    return StudentListResponse(
        students=[StudentResponse.model_validate(s) for s in students],
        current_page=pagination.page,
        total_pages=total_pages(total, pagination.limit),
        total_students=total,
    )


@router.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_in: StudentCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Add a single student. All five roster fields are required."""
    student = await roster_service.add_student(db, student_in.model_dump(exclude_none=True))
    return student


@router.get("/students/export")
async def export_students(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Export the roster as CSV."""
    content = await roster_service.export_students_csv(db)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=students.csv"},
    )


@router.post("/students/bulk", response_model=BulkUploadResponse)
async def bulk_create_students(
    bulk_in: BulkStudentCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Bulk add students.

    Each record succeeds or fails on its own; failures are reported with
    their index in the request.
    """
    outcome = await roster_service.bulk_add_students(db, bulk_in.students)
    return _bulk_response(outcome)


@router.post("/students/bulk/csv", response_model=BulkUploadResponse)
async def bulk_create_students_csv(
    bulk_in: BulkStudentCsv,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Bulk add students from lines of
    `rollNumber,dob,name,department,batch[,profileImage]`.
    """
    records = roster_service.parse_roster_lines(bulk_in.data)
    outcome = await roster_service.bulk_add_students(db, records)
    return _bulk_response(outcome)


@router.get("/students/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await roster_service.get_student(db, student_id)


@router.put("/students/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    student_in: StudentUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; only supplied fields change."""
    return await roster_service.update_student(db, student_id, student_in.model_dump(exclude_unset=True))


@router.delete("/students/{student_id}", response_model=StudentDeleteResponse)
async def delete_student(
    student_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a student together with their account, posts, comments, likes
    and follow edges.
    """
    summary = await roster_service.delete_student(db, student_id)
    logger.info("admin_deleted_student", admin_id=str(current_user.id), student_id=str(student_id))
    return StudentDeleteResponse(
        message="Student deleted successfully",
        users_deleted=summary.users_deleted,
        posts_deleted=summary.posts_deleted,
        comments_deleted=summary.comments_deleted,
        likes_deleted=summary.likes_deleted,
        follows_deleted=summary.follows_deleted,
    )


# ==================== Accounts and moderation ====================

@router.get("/users", response_model=List[AdminUserResponse])
async def list_users(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    rows = await roster_service.list_users(db)
    return [
        AdminUserResponse(
            id=user.id,
            username=user.username,
            bio=user.bio,
            role=user.role,
            student=StudentResponse.model_validate(user.student),
            followers_count=followers,
            following_count=following,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        for user, followers, following in rows
    ]


@router.get("/posts", response_model=List[PostResponse])
async def list_posts(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    posts = await post_service.list_all_posts(db)
    return [PostResponse.from_post(p, current_user.id) for p in posts]


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Moderation delete; skips the ownership check."""
    await post_service.delete_post(db, post_id, current_user.id, privileged=True)
    return MessageResponse(message="Post deleted successfully")


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    stats = await roster_service.get_stats(db)
    return StatsResponse(**stats)
