import logging
from typing import Optional, List, Dict, Any
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.db.repositories.gallery_repository import GalleryRepository
from app.db.repositories.testimony_repository import TestimonyRepository
from app.domains.identity.services import AnonymousUserService
from app.domains.testimonies.entities import Testimony, GalleryEntry, FrameworkType
from app.domains.testimonies.excerpt import generate_excerpt
from app.domains.testimonies.schemas import (
    CONTENT_MODELS, TestimonyCreate, TestimonyUpdate, TestimonyPublicResponse,
    GalleryPublishRequest, GalleryItemResponse
)

logger = logging.getLogger(__name__)


def validate_content(framework_type: FrameworkType, content: Dict[str, Any]) -> Dict[str, Any]:
    """Проверка content по модели шаблона, ошибки собираются по полям"""
    model = CONTENT_MODELS[framework_type]

    try:
        return model.model_validate(content).model_dump()
    except PydanticValidationError as e:
        fields = {}
        for error in e.errors():
            path = ".".join(str(part) for part in error["loc"])
            fields[f"content.{path}" if path else "content"] = error["msg"]
        raise ValidationError("Invalid testimony data", fields=fields)


class TestimonyService:
    """Сервис для работы со свидетельствами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.testimony_repository = TestimonyRepository(session)
        self.anonymous_service = AnonymousUserService(session)

    async def create_testimony(self, data: TestimonyCreate, user_id: uuid.UUID) -> Testimony:
        """Создание нового свидетельства"""
        payload = data.root

        testimony = Testimony.create_testimony(
            user_id=user_id,
            title=payload.title,
            framework_type=FrameworkType(payload.framework_type),
            content=payload.content.model_dump(),
            is_public=payload.is_public
        )

        created = await self.testimony_repository.create(testimony)

        # Счетчик для анонимов, у остальных запись не найдется
        try:
            await self.anonymous_service.record_testimony_created(user_id)
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception(f"Failed to update anonymous activity for {user_id}")

        return created

    async def get_testimony(self, testimony_id: uuid.UUID) -> Optional[Testimony]:
        return await self.testimony_repository.get_by_id(testimony_id)

    async def get_readable(self, testimony_id: uuid.UUID, user_id: Optional[uuid.UUID]) -> Testimony:
        """Свидетельство, доступное пользователю на чтение"""
        testimony = await self.testimony_repository.get_by_id(testimony_id)

        if testimony is None:
            raise NotFoundError("Testimony not found")

        if not testimony.can_be_read_by(user_id):
            raise AuthorizationError("Not authorized to access this testimony")

        return testimony

    async def get_owned(self, testimony_id: uuid.UUID, user_id: uuid.UUID, action: str = "access") -> Testimony:
        """Свидетельство, принадлежащее пользователю"""
        testimony = await self.testimony_repository.get_by_id(testimony_id)

        if testimony is None:
            raise NotFoundError("Testimony not found")

        if not testimony.is_owned_by(user_id):
            raise AuthorizationError(f"Not authorized to {action} this testimony")

        return testimony

    async def update_testimony(
        self,
        testimony_id: uuid.UUID,
        update_data: TestimonyUpdate,
        user_id: uuid.UUID
    ) -> Testimony:
        """Обновление свидетельства владельцем"""
        testimony = await self.get_owned(testimony_id, user_id, action="update")

        content = None
        if update_data.content is not None:
            content = validate_content(testimony.framework_type, update_data.content)

        testimony.update(
            title=update_data.title,
            content=content,
            is_public=update_data.is_public
        )

        updated = await self.testimony_repository.update(testimony)

        try:
            await self.anonymous_service.update_last_activity(user_id)
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception(f"Failed to update anonymous activity for {user_id}")

        return updated

    async def delete_testimony(self, testimony_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Удаление свидетельства"""
        await self.get_owned(testimony_id, user_id, action="delete")
        return await self.testimony_repository.delete(testimony_id)

    async def list_user_testimonies(self, user_id: uuid.UUID) -> List[Testimony]:
        return await self.testimony_repository.get_by_user(user_id)

    async def get_by_share_token(self, share_token: str) -> Testimony:
        testimony = await self.testimony_repository.get_by_share_token(share_token)

        if testimony is None:
            raise NotFoundError("Testimony not found")

        return testimony


class GalleryService:
    """Сервис публичной галереи"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.gallery_repository = GalleryRepository(session)
        self.testimony_service = TestimonyService(session)

    async def list_public(self, page: int = 1, limit: int = 20) -> List[GalleryItemResponse]:
        """Страница галереи, новые записи первыми"""
        offset = (page - 1) * limit
        rows = await self.gallery_repository.list_entries(limit=limit, offset=offset)

        items = []
        for entry, testimony in rows:
            items.append(GalleryItemResponse(
                id=entry.id,
                display_name=entry.display_name,
                created_at=entry.created_at,
                testimony=TestimonyPublicResponse.model_validate(testimony) if testimony else None,
                excerpt=generate_excerpt(testimony) if testimony else ""
            ))
        return items

    async def publish(self, data: GalleryPublishRequest, user_id: uuid.UUID) -> GalleryEntry:
        """Публикация своего свидетельства в галерее"""
        testimony = await self.testimony_service.get_owned(data.testimony_id, user_id, action="publish")

        if await self.gallery_repository.get_by_testimony(testimony.id) is not None:
            raise ValueError("Testimony is already published to the gallery")

        entry = await self.gallery_repository.create(
            GalleryEntry.create_entry(testimony.id, user_id, data.display_name or None)
        )
        await self.testimony_service.testimony_repository.set_public(testimony.id, True)

        logger.info(f"Testimony {testimony.id} published to gallery")
        return entry

    async def unpublish(self, entry_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Снятие с публикации: свидетельство снова приватное"""
        entry = await self.gallery_repository.get_by_id(entry_id)

        if entry is None:
            raise NotFoundError("Gallery entry not found")

        if entry.user_id != user_id:
            raise AuthorizationError("Not authorized to delete this gallery entry")

        await self.testimony_service.testimony_repository.set_public(entry.testimony_id, False)
        await self.gallery_repository.delete(entry_id)
