"""About/credits endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campuscircle.api.deps import get_current_user, get_db
from campuscircle.models.user import User
from campuscircle.schemas.admin import DeveloperInfoResponse
from campuscircle.services import roster_service

router = APIRouter()


@router.get("", response_model=DeveloperInfoResponse)
async def get_made_by(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Developer information shown on the about page."""
    return await roster_service.get_developer_info(db)
