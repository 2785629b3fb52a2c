"""Post, comment and like schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from campuscircle.schemas.common import CamelModel
from campuscircle.schemas.user import UserSummary


class PostCreate(CamelModel):
    content: str = Field(..., description="Post text; must not be blank")
    image_url: Optional[str] = Field(None, max_length=1000)


class PostUpdate(CamelModel):
    content: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=1000)


class CommentCreate(CamelModel):
    content: str


class CommentResponse(CamelModel):
    id: UUID
    user: UserSummary
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_comment(cls, comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            user=UserSummary.from_user(comment.user),
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class PostResponse(CamelModel):
    id: UUID
    user: UserSummary
    content: str
    image_url: str = ""
    likes: List[UUID]
    likes_count: int
    is_liked: bool = False
    comments: List[CommentResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post, viewer_id: Optional[UUID] = None) -> "PostResponse":
        likes = post.liked_by
        return cls(
            id=post.id,
            user=UserSummary.from_user(post.user),
            content=post.content,
            image_url=post.image_url or "",
            likes=likes,
            likes_count=len(likes),
            is_liked=viewer_id in likes if viewer_id else False,
            comments=[CommentResponse.from_comment(c) for c in post.comments],
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostListResponse(CamelModel):
    posts: List[PostResponse]
    current_page: int
    total_pages: int
    total_posts: int


class LikeResponse(CamelModel):
    likes: int
    is_liked: bool
