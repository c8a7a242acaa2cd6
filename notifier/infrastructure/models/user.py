"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.sql import expression

from notifier.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a marketplace user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(120), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    name = Column(String(120), nullable=False)
    role = Column(String(30), nullable=False, index=True)
    is_verified = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )


__all__ = ["UserModel"]
