from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, UUID
from sqlalchemy.orm import relationship

from app.core.db import Base, utcnow


class AnonymousUserTracking(Base):
    __tablename__ = "anonymous_user_tracking"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), index=True, nullable=True)
    has_claimed = Column(Boolean, default=False, nullable=False)
    testimony_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_activity = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="anonymous_tracking")
