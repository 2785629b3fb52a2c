"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.api.deps import get_current_user, get_db
from campuscircle.models.user import User
from campuscircle.schemas.auth import LoginRequest, LoginResponse, LoginUser, VerifyResponse
from campuscircle.schemas.common import MessageResponse
from campuscircle.schemas.user import StudentPublic, UserProfile
from campuscircle.services import auth_service, directory_service

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Login with roll number and date of birth.

    The first successful login creates the student's account.
    """
    result = await auth_service.authenticate(db, request.roll_number, request.dob)
    user = result.user

    return LoginResponse(
        token=result.token,
        user=LoginUser(
            id=user.id,
            username=user.username,
            bio=user.bio,
            role=user.role,
            student=StudentPublic.model_validate(result.student),
        ),
    )


@router.get("/me", response_model=UserProfile)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get current user info with follower counts."""
    profile = await directory_service.get_profile(db, current_user.id)
    return UserProfile.from_profile(profile)


@router.get("/verify", response_model=VerifyResponse)
async def verify(current_user: User = Depends(get_current_user)):
    """Check that the bearer token is still valid."""
    return VerifyResponse(valid=True)


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """
    Tokens are stateless; the client discards its copy.
    """
    logger.info("logout", user_id=str(current_user.id))
    return MessageResponse(message="Logged out successfully")
