import enum
import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from app.core.db import utcnow
from app.core.security import generate_share_token


class FrameworkType(str, enum.Enum):
    """Шаблоны, по которым пишется свидетельство"""

    BEFORE_ENCOUNTER_AFTER = "before_encounter_after"
    LIFE_TIMELINE = "life_timeline"
    SEASONS_OF_GROWTH = "seasons_of_growth"
    FREE_FORM = "free_form"


class Testimony:
    """Сущность свидетельства домена Testimonies"""

    def __init__(
        self,
        id: uuid.UUID,
        user_id: uuid.UUID,
        title: str,
        framework_type: FrameworkType,
        content: Optional[Dict[str, Any]] = None,
        is_public: bool = False,
        share_token: Optional[str] = None,
        is_claimed: bool = False,
        claimed_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.framework_type = framework_type
        self.content = content if content is not None else {}
        self.is_public = is_public
        self.share_token = share_token
        self.is_claimed = is_claimed
        self.claimed_at = claimed_at
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or utcnow()

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id

    def can_be_read_by(self, user_id: Optional[uuid.UUID]) -> bool:
        """Владелец видит всегда, остальные только опубликованное"""
        return self.is_public or (user_id is not None and self.is_owned_by(user_id))

    def update(
        self,
        title: Optional[str] = None,
        content: Optional[Dict[str, Any]] = None,
        is_public: Optional[bool] = None
    ) -> None:
        """Обновление полей свидетельства"""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if is_public is not None:
            self.is_public = is_public
        self.updated_at = utcnow()

    @classmethod
    def create_testimony(
        cls,
        user_id: uuid.UUID,
        title: str,
        framework_type: FrameworkType,
        content: Dict[str, Any],
        is_public: bool = False
    ) -> "Testimony":
        """Создание нового свидетельства со ссылкой для шаринга"""
        return cls(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            framework_type=framework_type,
            content=content,
            is_public=is_public,
            share_token=generate_share_token()
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Testimony):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Testimony(id={self.id}, title={self.title}, framework_type={self.framework_type.value})"


class GalleryEntry:
    """Публикация свидетельства в общей галерее"""

    def __init__(
        self,
        id: uuid.UUID,
        testimony_id: uuid.UUID,
        user_id: uuid.UUID,
        display_name: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.testimony_id = testimony_id
        self.user_id = user_id
        self.display_name = display_name
        self.created_at = created_at or utcnow()

    @classmethod
    def create_entry(
        cls, testimony_id: uuid.UUID, user_id: uuid.UUID, display_name: Optional[str] = None
    ) -> "GalleryEntry":
        return cls(
            id=uuid.uuid4(),
            testimony_id=testimony_id,
            user_id=user_id,
            display_name=display_name
        )

    def __repr__(self) -> str:
        return f"GalleryEntry(id={self.id}, testimony_id={self.testimony_id})"
