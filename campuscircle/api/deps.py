"""
API Dependencies
Common dependencies for API endpoints (authentication, authorization, pagination)
"""

from dataclasses import dataclass

from fastapi import Query

from campuscircle.config import settings
from campuscircle.core.security import Role, get_current_user, require_role
from campuscircle.db.session import get_db

__all__ = [
    "Pagination",
    "get_current_user",
    "get_db",
    "posts_pagination",
    "require_admin",
    "students_pagination",
]


# Role-based access control
require_admin = require_role(Role.ADMIN)


@dataclass
class Pagination:
    page: int
    limit: int


def posts_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.POSTS_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page=page, limit=limit)


def students_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.STUDENTS_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page=page, limit=limit)

