from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
import uuid

from app.db.models.testimony import Testimony as TestimonyModel

if TYPE_CHECKING:
    from app.domains.testimonies.entities import Testimony


class TestimonyRepository:
    """Репозиторий для работы со свидетельствами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, testimony: "Testimony") -> "Testimony":
        """Создание нового свидетельства"""
        db_testimony = TestimonyModel(
            id=testimony.id,
            user_id=testimony.user_id,
            title=testimony.title,
            framework_type=testimony.framework_type.value,
            content=testimony.content,
            is_public=testimony.is_public,
            share_token=testimony.share_token
        )

        self.session.add(db_testimony)
        try:
            await self.session.commit()
            await self.session.refresh(db_testimony)
            return self._to_domain(db_testimony)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid user_id or duplicate share token")

    async def get_by_id(self, testimony_id: uuid.UUID) -> Optional["Testimony"]:
        """Получение свидетельства по id"""
        result = await self.session.execute(
            select(TestimonyModel).where(TestimonyModel.id == testimony_id)
            .execution_options(populate_existing=True)
        )
        db_testimony = result.scalar_one_or_none()
        return self._to_domain(db_testimony) if db_testimony else None

    async def get_by_share_token(self, share_token: str) -> Optional["Testimony"]:
        """Получение свидетельства по токену публичной ссылки"""
        result = await self.session.execute(
            select(TestimonyModel).where(TestimonyModel.share_token == share_token)
            .execution_options(populate_existing=True)
        )
        db_testimony = result.scalar_one_or_none()
        return self._to_domain(db_testimony) if db_testimony else None

    async def get_by_user(self, user_id: uuid.UUID) -> List["Testimony"]:
        """Свидетельства пользователя, новые первыми"""
        result = await self.session.execute(
            select(TestimonyModel)
            .where(TestimonyModel.user_id == user_id)
            .order_by(TestimonyModel.created_at.desc())
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def update(self, testimony: "Testimony") -> "Testimony":
        """Обновление свидетельства"""
        stmt = (
            update(TestimonyModel)
            .where(TestimonyModel.id == testimony.id)
            .values(
                title=testimony.title,
                content=testimony.content,
                is_public=testimony.is_public,
                updated_at=testimony.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_id(testimony.id)

    async def set_public(self, testimony_id: uuid.UUID, is_public: bool) -> None:
        await self.session.execute(
            update(TestimonyModel)
            .where(TestimonyModel.id == testimony_id)
            .values(is_public=is_public)
        )
        await self.session.commit()

    async def delete(self, testimony_id: uuid.UUID) -> bool:
        """Удаление свидетельства"""
        stmt = delete(TestimonyModel).where(TestimonyModel.id == testimony_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def delete_by_users(self, user_ids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            delete(TestimonyModel).where(TestimonyModel.user_id.in_(user_ids))
        )
        await self.session.commit()
        return result.rowcount

    async def transfer_ownership(
        self,
        from_user_id: uuid.UUID,
        to_user_id: uuid.UUID,
        claimed_at: datetime,
        share_token: Optional[str] = None
    ) -> int:
        """Перенос владения одним (по токену) или всеми свидетельствами одним UPDATE"""
        stmt = update(TestimonyModel).where(TestimonyModel.user_id == from_user_id)

        if share_token is not None:
            stmt = stmt.where(TestimonyModel.share_token == share_token)

        result = await self.session.execute(
            stmt.values(user_id=to_user_id, is_claimed=True, claimed_at=claimed_at)
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_testimony: TestimonyModel) -> "Testimony":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.testimonies.entities import Testimony, FrameworkType

        return Testimony(
            id=db_testimony.id,
            user_id=db_testimony.user_id,
            title=db_testimony.title,
            framework_type=FrameworkType(db_testimony.framework_type),
            content=db_testimony.content,
            is_public=db_testimony.is_public,
            share_token=db_testimony.share_token,
            is_claimed=db_testimony.is_claimed,
            claimed_at=db_testimony.claimed_at,
            created_at=db_testimony.created_at,
            updated_at=db_testimony.updated_at
        )
