"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from campuscircle.models.student import Student
from campuscircle.models.developer_info import DeveloperInfo

# Models with foreign keys to base models
from campuscircle.models.user import User, Follow

# Models with foreign keys to other models
from campuscircle.models.post import Post, PostComment, PostLike

# Export all models
__all__ = [
    "Student",
    "DeveloperInfo",
    "User",
    "Follow",
    "Post",
    "PostComment",
    "PostLike",
]
