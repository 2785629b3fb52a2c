"""Student model."""

from sqlalchemy import Boolean, Column, Integer, String

from campuscircle.db.base import Base


class Student(Base):
    """Institution roster entry; the login secret is (roll_number, dob)."""

    __tablename__ = "students"

    roll_number = Column(String(50), unique=True, index=True, nullable=False)
    dob = Column(String(10), nullable=False)  # YYYY-MM-DD, compared verbatim
    name = Column(String(255), index=True, nullable=False)
    department = Column(String(255), nullable=False)
    batch = Column(String(50), nullable=False)
    profile_image = Column(String(1000), nullable=False, default="")
    has_logged_in = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Student {self.roll_number}>"
