from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class Testimony(BaseModel):
    __tablename__ = "testimonies"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    framework_type = Column(String(32), nullable=False)
    content = Column(JSON, nullable=False, default=dict)
    is_public = Column(Boolean, default=False, nullable=False)
    share_token = Column(String(64), unique=True, index=True, nullable=True)
    is_claimed = Column(Boolean, default=False, nullable=False)
    claimed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="testimonies")
    gallery_entry = relationship(
        "GalleryEntry", back_populates="testimony", uselist=False, cascade="all, delete-orphan"
    )
