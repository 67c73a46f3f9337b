from sqlalchemy import Column, String, ForeignKey, UUID
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class GalleryEntry(BaseModel):
    __tablename__ = "gallery_entries"

    testimony_id = Column(
        UUID(as_uuid=True), ForeignKey("testimonies.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    display_name = Column(String(100), nullable=True)

    # Relationships
    testimony = relationship("Testimony", back_populates="gallery_entry")
    user = relationship("User", back_populates="gallery_entries")
