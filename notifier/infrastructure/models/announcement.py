"""SQLAlchemy model for published announcements."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from notifier.infrastructure.database import Base


class AnnouncementModel(Base):
    """Database representation of an announcement."""

    __tablename__ = "announcement"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(30), nullable=False)
    author_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["AnnouncementModel"]
