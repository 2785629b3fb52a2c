"""User (social account) and follow-edge models."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from campuscircle.db.base import Base


class User(Base):
    """Social account layered on top of exactly one Student."""

    __tablename__ = "users"

    student_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    username = Column(String(150), unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=False, default="")
    role = Column(String(20), nullable=False, default="student")
    version = Column(Integer, nullable=False)

    # Relationships
    student = relationship("Student", lazy="joined")

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"


class Follow(Base):
    """
    Directed follow edge.

    One row is both the follower's `following` entry and the followed
    account's `followers` entry, so the two views cannot diverge.
    """

    __tablename__ = "follows"

    follower_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    followed_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="ck_follows_no_self_follow"),
        Index("idx_follows_follower_followed", "follower_id", "followed_id", unique=True),
        Index("idx_follows_followed", "followed_id"),
    )

    def __repr__(self):
        return f"<Follow {self.follower_id} -> {self.followed_id}>"
