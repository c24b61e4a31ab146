"""Pickup model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from wastecollect.database import Base
from wastecollect.models.user import utc_now

STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"


class Pickup(Base):
    """Represents a scheduled waste-collection request."""
    __tablename__ = "pickups"

    id = Column(Integer, primary_key=True, index=True)
    waste_type = Column(String, nullable=False)
    address = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    requested_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def mark_completed(self) -> bool:
        """Move the pickup to Completed. Returns False when it already was."""
        if self.status == STATUS_COMPLETED:
            return False
        self.status = STATUS_COMPLETED
        self.completed_at = utc_now()
        return True
