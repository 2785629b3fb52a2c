"""API v1 routes."""

from fastapi import APIRouter

from campuscircle.api.v1 import admin, auth, made_by, posts, users

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(posts.router, prefix="/posts", tags=["Posts"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(made_by.router, prefix="/made-by", tags=["About"])
