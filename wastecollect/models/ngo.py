"""NGO model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from wastecollect.database import Base


class NGO(Base):
    """Organization profile attached to an ``ngo`` user account."""
    __tablename__ = "ngos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
