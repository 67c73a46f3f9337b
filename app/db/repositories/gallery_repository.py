from typing import Optional, List, Tuple, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
import uuid

from app.db.models.gallery import GalleryEntry as GalleryEntryModel
from app.db.models.testimony import Testimony as TestimonyModel
from app.db.repositories.testimony_repository import TestimonyRepository

if TYPE_CHECKING:
    from app.domains.testimonies.entities import GalleryEntry, Testimony


class GalleryRepository:
    """Репозиторий для работы с галереей"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: "GalleryEntry") -> "GalleryEntry":
        """Создание записи в галерее"""
        db_entry = GalleryEntryModel(
            id=entry.id,
            testimony_id=entry.testimony_id,
            user_id=entry.user_id,
            display_name=entry.display_name
        )

        self.session.add(db_entry)
        try:
            await self.session.commit()
            await self.session.refresh(db_entry)
            return self._to_domain(db_entry)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Testimony is already published to the gallery")

    async def get_by_id(self, entry_id: uuid.UUID) -> Optional["GalleryEntry"]:
        result = await self.session.execute(
            select(GalleryEntryModel).where(GalleryEntryModel.id == entry_id)
        )
        db_entry = result.scalar_one_or_none()
        return self._to_domain(db_entry) if db_entry else None

    async def get_by_testimony(self, testimony_id: uuid.UUID) -> Optional["GalleryEntry"]:
        result = await self.session.execute(
            select(GalleryEntryModel).where(GalleryEntryModel.testimony_id == testimony_id)
        )
        db_entry = result.scalar_one_or_none()
        return self._to_domain(db_entry) if db_entry else None

    async def list_entries(
        self, limit: int = 20, offset: int = 0
    ) -> List[Tuple["GalleryEntry", Optional["Testimony"]]]:
        """Записи галереи вместе со свидетельствами, новые первыми"""
        result = await self.session.execute(
            select(GalleryEntryModel, TestimonyModel)
            .outerjoin(TestimonyModel, TestimonyModel.id == GalleryEntryModel.testimony_id)
            .order_by(GalleryEntryModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )

        testimony_repository = TestimonyRepository(self.session)
        return [
            (self._to_domain(db_entry), testimony_repository._to_domain(db_testimony) if db_testimony else None)
            for db_entry, db_testimony in result.all()
        ]

    async def delete(self, entry_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            delete(GalleryEntryModel).where(GalleryEntryModel.id == entry_id)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def delete_by_users(self, user_ids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            delete(GalleryEntryModel).where(GalleryEntryModel.user_id.in_(user_ids))
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_entry: GalleryEntryModel) -> "GalleryEntry":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.testimonies.entities import GalleryEntry

        return GalleryEntry(
            id=db_entry.id,
            testimony_id=db_entry.testimony_id,
            user_id=db_entry.user_id,
            display_name=db_entry.display_name,
            created_at=db_entry.created_at
        )
