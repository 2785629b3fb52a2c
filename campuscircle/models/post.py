"""
Post models.

A Post owns its comments and likes; both live in child tables keyed by
post_id and are removed together with the post.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from campuscircle.db.base import Base


class Post(Base):
    """A post created by a user."""

    __tablename__ = "posts"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    image_url = Column(String(1000), nullable=False, default="")
    version = Column(Integer, nullable=False)

    # Relationships
    user = relationship("User", lazy="joined")
    comments = relationship(
        "PostComment",
        order_by="PostComment.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    likes = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def liked_by(self) -> list:
        return [like.user_id for like in self.likes]

    def __repr__(self):
        return f"<Post {self.id} by {self.user_id}>"


class PostComment(Base):
    """Comment on a post. Display order is insertion order (position)."""

    __tablename__ = "post_comments"

    post_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    position = Column(Integer, nullable=False)

    user = relationship("User", lazy="joined")

    __table_args__ = (
        Index("idx_post_comments_post_position", "post_id", "position", unique=True),
    )

    def __repr__(self):
        return f"<PostComment {self.id} on {self.post_id}>"


class PostLike(Base):
    """Membership of a user in a post's like set."""

    __tablename__ = "post_likes"

    post_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("idx_post_likes_post_user", "post_id", "user_id", unique=True),  # Prevent duplicates
    )

    def __repr__(self):
        return f"<PostLike(post_id={self.post_id}, user_id={self.user_id})>"
