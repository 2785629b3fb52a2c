"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from pydantic import Field

from campuscircle.schemas.common import CamelModel
from campuscircle.schemas.user import UserSearchResult


class LoginRequest(CamelModel):
    """Login request schema."""

    roll_number: str = Field(..., min_length=1, description="Institution roll number")
    dob: str = Field(..., min_length=1, description="Date of birth (YYYY-MM-DD)")


class LoginUser(UserSearchResult):
    role: str


class LoginResponse(CamelModel):
    """Login response schema."""

    token: str
    token_type: str = "bearer"
    user: LoginUser


class VerifyResponse(CamelModel):
    valid: bool = True


# Rebuild models to resolve forward references
LoginResponse.model_rebuild()
