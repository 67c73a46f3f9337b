from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    magic_link_token_hash = Column(String(255), nullable=True)

    # Relationships
    testimonies = relationship("Testimony", back_populates="owner", cascade="all, delete-orphan")
    anonymous_tracking = relationship(
        "AnonymousUserTracking", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    gallery_entries = relationship("GalleryEntry", back_populates="user", cascade="all, delete-orphan")
    subscription = relationship("Subscription", back_populates="user", uselist=False, cascade="all, delete-orphan")
