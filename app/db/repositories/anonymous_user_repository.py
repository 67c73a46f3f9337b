from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
import uuid

from app.db.models.anonymous_user import AnonymousUserTracking

if TYPE_CHECKING:
    from app.domains.identity.entities import AnonymousUserRecord


class AnonymousUserRepository:
    """Репозиторий для отслеживания анонимных пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: "AnonymousUserRecord") -> "AnonymousUserRecord":
        db_record = AnonymousUserTracking(
            user_id=record.user_id,
            email=record.email,
            has_claimed=record.has_claimed,
            testimony_count=record.testimony_count,
            created_at=record.created_at,
            last_activity=record.last_activity
        )

        self.session.add(db_record)
        try:
            await self.session.commit()
            await self.session.refresh(db_record)
            return self._to_domain(db_record)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Anonymous user is already tracked")

    async def get_by_user_id(self, user_id: uuid.UUID) -> Optional["AnonymousUserRecord"]:
        result = await self.session.execute(
            select(AnonymousUserTracking).where(AnonymousUserTracking.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        db_record = result.scalar_one_or_none()
        return self._to_domain(db_record) if db_record else None

    async def get_unclaimed_by_email(self, email: str) -> List["AnonymousUserRecord"]:
        """Неприсвоенные записи с указанным email"""
        result = await self.session.execute(
            select(AnonymousUserTracking).where(
                AnonymousUserTracking.email == email.lower(),
                AnonymousUserTracking.has_claimed.is_(False)
            )
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    async def get_abandoned(self, inactive_since: datetime) -> List[uuid.UUID]:
        """id анонимов без присвоения и без активности с указанного момента"""
        result = await self.session.execute(
            select(AnonymousUserTracking.user_id).where(
                AnonymousUserTracking.has_claimed.is_(False),
                AnonymousUserTracking.last_activity < inactive_since
            )
        )
        return list(result.scalars().all())

    async def update_fields(self, user_id: uuid.UUID, **values) -> bool:
        """Частичное обновление записи"""
        result = await self.session.execute(
            update(AnonymousUserTracking)
            .where(AnonymousUserTracking.user_id == user_id)
            .values(**values)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def increment_testimony_count(self, user_id: uuid.UUID, last_activity: datetime) -> bool:
        result = await self.session.execute(
            update(AnonymousUserTracking)
            .where(AnonymousUserTracking.user_id == user_id)
            .values(
                testimony_count=AnonymousUserTracking.testimony_count + 1,
                last_activity=last_activity
            )
        )
        await self.session.commit()
        return result.rowcount > 0

    async def delete_many(self, user_ids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            delete(AnonymousUserTracking).where(AnonymousUserTracking.user_id.in_(user_ids))
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_record: AnonymousUserTracking) -> "AnonymousUserRecord":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.identity.entities import AnonymousUserRecord

        return AnonymousUserRecord(
            user_id=db_record.user_id,
            email=db_record.email,
            has_claimed=db_record.has_claimed,
            testimony_count=db_record.testimony_count,
            created_at=db_record.created_at,
            last_activity=db_record.last_activity
        )
