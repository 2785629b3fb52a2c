"""Developer info model (singleton "made by" record)."""

from sqlalchemy import Column, String, Text

from campuscircle.db.base import Base


class DeveloperInfo(Base):
    __tablename__ = "developer_info"

    developer_name = Column(String(255), nullable=False)
    github = Column(String(500), nullable=False)
    instagram = Column(String(500), nullable=False)
    message = Column(Text, nullable=False)
    email = Column(String(255))
    portfolio = Column(String(500))

    def __repr__(self):
        return f"<DeveloperInfo {self.developer_name}>"
