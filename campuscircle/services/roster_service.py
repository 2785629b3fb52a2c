"""
Administrator roster operations.

Covers single and bulk student creation, partial updates, the student
delete cascade and the read-only admin views (accounts, stats, export).
"""

import csv
from dataclasses import dataclass, field
from io import StringIO
from typing import Any, Dict, List, Tuple
from uuid import UUID

import structlog
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.core.exceptions import CampusCircleError, ConflictError, NotFoundError, ValidationError
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.developer_info import DeveloperInfo
from campuscircle.models.post import Post, PostComment, PostLike
from campuscircle.models.student import Student
from campuscircle.models.user import Follow, User
from campuscircle.schemas.student import StudentCreate
from campuscircle.services.auth_service import normalize_roll_number

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("roll_number", "dob", "name", "department", "batch")
ROSTER_COLUMNS = ("roll_number", "dob", "name", "department", "batch", "profile_image")

# Accept both the wire (camelCase) and attribute spellings in raw records
FIELD_ALIASES = {
    "rollNumber": "roll_number",
    "profileImage": "profile_image",
}


@dataclass
class BulkResult:
    created: List[Student] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class DeleteSummary:
    users_deleted: int = 0
    posts_deleted: int = 0
    comments_deleted: int = 0
    likes_deleted: int = 0
    follows_deleted: int = 0


def _normalize_record(data: Dict[str, Any]) -> Dict[str, str]:
    record = {}
    for key, value in data.items():
        key = FIELD_ALIASES.get(key, key)
        if key in ROSTER_COLUMNS and value is not None:
            record[key] = str(value).strip()
    return record


def _validate_record(data: Dict[str, Any]) -> Dict[str, str]:
    record = _normalize_record(data)
    missing = [name for name in REQUIRED_FIELDS if not record.get(name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    record["roll_number"] = normalize_roll_number(record["roll_number"])
    record.setdefault("profile_image", "")
    return record


def _schema_error_detail(exc: SchemaValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


def parse_roster_lines(text: str) -> List[Dict[str, str]]:
    """
    Parse the line-oriented roster format
    `rollNumber,dob,name,department,batch[,profileImage]`.

    Blank lines are skipped. Short lines yield records with missing fields,
    which fail validation for their own index only.
    """
    records = []
    reader = csv.reader(StringIO(text.strip()))
    for row in reader:
        values = [v.strip() for v in row]
        if not any(values):
            continue
        records.append({name: value for name, value in zip(ROSTER_COLUMNS, values) if value})
    return records


async def get_student(db: AsyncSession, student_id: UUID) -> Student:
    result = await db.execute(select(Student).where(Student.id == student_id))
    student = result.scalar_one_or_none()
    if student is None:
        raise NotFoundError("Student not found")
    return student


async def list_students(db: AsyncSession, page: int = 1, limit: int = 50) -> Tuple[List[Student], int]:
    total_result = await db.execute(select(func.count()).select_from(Student))
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Student)
        .order_by(Student.created_at.desc(), Student.roll_number)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def add_student(db: AsyncSession, data: Dict[str, Any]) -> Student:
    record = _validate_record(data)

    existing = await db.execute(select(Student.id).where(Student.roll_number == record["roll_number"]))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Student with this roll number already exists")

    student = Student(**record)
    db.add(student)
    await commit_or_conflict(db, "Student with this roll number already exists")
    logger.info("student_added", student_id=str(student.id), roll_number=student.roll_number)
    return student


async def bulk_add_students(db: AsyncSession, records: List[Dict[str, Any]]) -> BulkResult:
    """
    Insert each record in its own transaction.

    A failing record is reported with its index and never rolls back the
    records committed before it.
    """
    outcome = BulkResult()
    for index, data in enumerate(records):
        if not isinstance(data, dict):
            outcome.errors.append({"index": index, "data": {}, "error": "Record must be an object"})
            continue
        try:
            record = StudentCreate.model_validate(data).model_dump(exclude_none=True)
            student = await add_student(db, record)
        except SchemaValidationError as exc:
            outcome.errors.append({"index": index, "data": data, "error": _schema_error_detail(exc)})
            continue
        except CampusCircleError as exc:
            outcome.errors.append({"index": index, "data": data, "error": exc.detail})
            continue
        outcome.created.append(student)

    logger.info(
        "bulk_students_processed",
        total=len(records),
        success_count=len(outcome.created),
        error_count=len(outcome.errors),
    )
    return outcome


async def update_student(db: AsyncSession, student_id: UUID, patch: Dict[str, Any]) -> Student:
    """Apply only the supplied fields. Blank required fields are ignored."""
    student = await get_student(db, student_id)

    record = _normalize_record(patch)
    record.pop("roll_number", None)
    for name, value in record.items():
        if name in REQUIRED_FIELDS and not value:
            continue
        setattr(student, name, value)

    await commit_or_conflict(db, "Student was modified concurrently, please retry")
    logger.info("student_updated", student_id=str(student_id), fields=sorted(record))
    return student


async def delete_student(db: AsyncSession, student_id: UUID) -> DeleteSummary:
    """
    Delete a student and everything that exists only because of it: the
    account, its posts (with their comments and likes), the comments and
    likes it left on other posts, and its follow edges. One transaction.
    """
    student = await get_student(db, student_id)
    summary = DeleteSummary()

    result = await db.execute(select(User.id).where(User.student_id == student.id))
    user_id = result.scalar_one_or_none()

    if user_id is not None:
        own_posts = select(Post.id).where(Post.user_id == user_id).scalar_subquery()
        no_sync = {"synchronize_session": False}

        likes = await db.execute(
            delete(PostLike)
            .where(or_(PostLike.user_id == user_id, PostLike.post_id.in_(own_posts)))
            .execution_options(**no_sync)
        )
        comments = await db.execute(
            delete(PostComment)
            .where(or_(PostComment.user_id == user_id, PostComment.post_id.in_(own_posts)))
            .execution_options(**no_sync)
        )
        posts = await db.execute(delete(Post).where(Post.user_id == user_id).execution_options(**no_sync))
        follows = await db.execute(
            delete(Follow)
            .where(or_(Follow.follower_id == user_id, Follow.followed_id == user_id))
            .execution_options(**no_sync)
        )
        users = await db.execute(delete(User).where(User.id == user_id).execution_options(**no_sync))

        summary.likes_deleted = likes.rowcount
        summary.comments_deleted = comments.rowcount
        summary.posts_deleted = posts.rowcount
        summary.follows_deleted = follows.rowcount
        summary.users_deleted = users.rowcount

    await db.delete(student)
    await commit_or_conflict(db, "Student was modified concurrently, please retry")

    logger.info(
        "student_deleted",
        student_id=str(student_id),
        roll_number=student.roll_number,
        users_deleted=summary.users_deleted,
        posts_deleted=summary.posts_deleted,
        comments_deleted=summary.comments_deleted,
        likes_deleted=summary.likes_deleted,
        follows_deleted=summary.follows_deleted,
    )
    return summary


async def export_students_csv(db: AsyncSession) -> str:
    result = await db.execute(select(Student).order_by(Student.roll_number))
    students = result.scalars().all()

    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=[
        "rollNumber", "dob", "name", "department", "batch", "profileImage", "hasLoggedIn"
    ])
    writer.writeheader()

    for s in students:
        writer.writerow({
            "rollNumber": s.roll_number,
            "dob": s.dob,
            "name": s.name,
            "department": s.department,
            "batch": s.batch,
            "profileImage": s.profile_image or "",
            "hasLoggedIn": s.has_logged_in,
        })

    return output.getvalue()


async def list_users(db: AsyncSession) -> List[Tuple[User, int, int]]:
    """All accounts, newest first, with (followers, following) counts."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    users = list(result.scalars().all())

    followers = dict(
        (await db.execute(select(Follow.followed_id, func.count()).group_by(Follow.followed_id))).all()
    )
    following = dict(
        (await db.execute(select(Follow.follower_id, func.count()).group_by(Follow.follower_id))).all()
    )
    return [(u, followers.get(u.id, 0), following.get(u.id, 0)) for u in users]


async def get_stats(db: AsyncSession) -> Dict[str, int]:
    total_students = (await db.execute(select(func.count()).select_from(Student))).scalar() or 0
    total_users = (await db.execute(select(func.count()).select_from(User))).scalar() or 0
    total_posts = (await db.execute(select(func.count()).select_from(Post))).scalar() or 0
    logged_in = (
        await db.execute(select(func.count()).select_from(Student).where(Student.has_logged_in.is_(True)))
    ).scalar() or 0

    return {
        "total_students": total_students,
        "total_users": total_users,
        "total_posts": total_posts,
        "students_logged_in": logged_in,
        "students_not_logged_in": total_students - logged_in,
    }


async def get_developer_info(db: AsyncSession):
    result = await db.execute(select(DeveloperInfo).order_by(DeveloperInfo.created_at).limit(1))
    info = result.scalar_one_or_none()
    if info is None:
        raise NotFoundError("Developer information not found")
    return info
