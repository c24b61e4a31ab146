"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from wastecollect.database import Base

ROLE_USER = "user"
ROLE_DRIVER = "driver"
ROLE_ADMIN = "admin"
ROLE_NGO = "ngo"
ROLES = (ROLE_USER, ROLE_DRIVER, ROLE_ADMIN, ROLE_NGO)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents an account of any role."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_USER)  # user/driver/admin/ngo
    created_at = Column(DateTime(timezone=True), default=utc_now)
