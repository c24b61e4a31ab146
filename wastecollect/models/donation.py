"""Donation model definitions."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship
from wastecollect.database import Base
from wastecollect.models.ngo import NGO
from wastecollect.models.user import User, utc_now


class Donation(Base):
    """A donation from a user to an NGO."""
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    donor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ngo_id = Column(Integer, ForeignKey("ngos.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)

    donor = relationship(User)
    ngo = relationship(NGO)
