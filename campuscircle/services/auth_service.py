"""
Session/auth service.

Validates (roll number, date of birth) pairs against the roster, provisions
the social account on first login and issues access tokens.
"""

import hmac
from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.core.exceptions import ConflictError, InvalidCredentials
from campuscircle.core.security import create_access_token, role_for_roll_number
from campuscircle.db.session import commit_or_conflict
from campuscircle.models.student import Student
from campuscircle.models.user import User

logger = structlog.get_logger(__name__)


@dataclass
class LoginResult:
    user: User
    student: Student
    token: str
    created: bool


def normalize_roll_number(roll_number: str) -> str:
    return (roll_number or "").strip().upper()


async def authenticate(db: AsyncSession, roll_number: str, dob: str) -> LoginResult:
    """
    Log a student in.

    Never reveals which of the two fields was wrong. The first successful
    login creates the User and flips has_logged_in in the same commit;
    later logins only issue a token.
    """
    normalized = normalize_roll_number(roll_number)
    supplied_dob = (dob or "").strip()

    result = await db.execute(select(Student).where(Student.roll_number == normalized))
    student = result.scalar_one_or_none()

    if student is None or not hmac.compare_digest(student.dob.encode(), supplied_dob.encode()):
        logger.info("login_failed", roll_number=normalized)
        raise InvalidCredentials()

    result = await db.execute(select(User).where(User.student_id == student.id))
    user = result.scalar_one_or_none()
    created = False

    if user is None:
        taken = await db.execute(select(User.id).where(User.username == normalized))
        if taken.scalar_one_or_none() is not None:
            raise ConflictError(f"Username {normalized} is already taken")

        user = User(
            student_id=student.id,
            username=normalized,
            bio="",
            role=role_for_roll_number(normalized).value,
        )
        user.student = student
        db.add(user)
        student.has_logged_in = True
        await commit_or_conflict(db, "Account was provisioned concurrently, please retry")
        created = True
        logger.info("account_provisioned", user_id=str(user.id), roll_number=normalized, role=user.role)

    token = create_access_token(user.id, student.id, user.role)
    logger.info("login_succeeded", user_id=str(user.id))
    return LoginResult(user=user, student=student, token=token, created=created)
