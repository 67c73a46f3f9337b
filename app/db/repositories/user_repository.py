from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
import uuid

from app.db.models.user import User as UserModel

if TYPE_CHECKING:
    from app.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: "User") -> "User":
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            email=user.email,
            is_anonymous=user.is_anonymous,
            is_active=user.is_active,
            magic_link_token_hash=user.magic_link_token_hash
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
            await self.session.refresh(db_user)
            return self._to_domain(db_user)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("User with this email already exists")

    async def get_by_id(self, user_id: uuid.UUID) -> Optional["User"]:
        """Получение пользователя по id"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional["User"]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def update(self, user: "User") -> "User":
        """Обновление пользователя"""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                email=user.email,
                is_anonymous=user.is_anonymous,
                is_active=user.is_active,
                magic_link_token_hash=user.magic_link_token_hash,
                updated_at=user.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_id(user.id)

    async def delete_many(self, user_ids: List[uuid.UUID]) -> int:
        """Удаление пользователей пачкой"""
        stmt = delete(UserModel).where(UserModel.id.in_(user_ids))
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_user: UserModel) -> "User":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.identity.entities import User

        return User(
            id=db_user.id,
            email=db_user.email,
            is_anonymous=db_user.is_anonymous,
            is_active=db_user.is_active,
            magic_link_token_hash=db_user.magic_link_token_hash,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
