"""Security utilities: JWT credentials and role-based access."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.config import settings
from campuscircle.core.exceptions import AuthError, ForbiddenError, InvalidOrExpiredCredential
from campuscircle.db.session import get_db
from campuscircle.models.user import User

# HTTPBearer for simple token authentication in Swagger (just paste the access token)
security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    """Account roles."""

    ADMIN = "admin"
    STUDENT = "student"


# Role hierarchy (higher roles inherit lower role permissions)
ROLE_HIERARCHY = {
    Role.ADMIN: [Role.ADMIN, Role.STUDENT],
    Role.STUDENT: [Role.STUDENT],
}


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified access token."""

    user_id: UUID
    student_id: UUID
    role: Role


def role_for_roll_number(roll_number: str) -> Role:
    """Role stamped on an account when it is provisioned."""
    normalized = roll_number.strip().upper()
    if any(normalized.startswith(prefix) for prefix in settings.admin_roll_prefixes):
        return Role.ADMIN
    return Role.STUDENT


def create_access_token(
    user_id: UUID,
    student_id: UUID,
    role: str = Role.STUDENT.value,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create JWT access token."""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode = {
        "sub": str(user_id),
        "student_id": str(student_id),
        "role": role,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """Decode and verify JWT access token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidOrExpiredCredential()

    if payload.get("type") != "access":
        raise InvalidOrExpiredCredential()

    try:
        return TokenClaims(
            user_id=UUID(payload["sub"]),
            student_id=UUID(payload["student_id"]),
            role=Role(payload.get("role", Role.STUDENT.value)),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidOrExpiredCredential()


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenClaims:
    """Verified token claims from the Bearer header."""
    if credentials is None or not credentials.credentials:
        raise AuthError("No token, authorization denied")
    return verify_token(credentials.credentials)


async def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from Bearer token."""
    result = await db.execute(select(User).where(User.id == claims.user_id))
    user = result.scalar_one_or_none()

    # Account removed (student deleted) after the token was issued
    if user is None or user.student_id != claims.student_id:
        raise InvalidOrExpiredCredential()

    return user


def has_role(user: User, role: Role) -> bool:
    """Check the account's stored role against a required role."""
    try:
        user_role = Role(user.role)
    except ValueError:
        return False
    return role in ROLE_HIERARCHY.get(user_role, [])


def require_role(*allowed_roles: Role):
    """Dependency to check if user has required role."""

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if any(has_role(current_user, role) for role in allowed_roles):
            return current_user

        raise ForbiddenError("Admin access required" if Role.ADMIN in allowed_roles else "Insufficient permissions")

    return role_checker
