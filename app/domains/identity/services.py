import logging
from datetime import timedelta
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.db import utcnow, as_utc
from app.core.errors import AuthorizationError, NotFoundError
from app.core.security import (
    create_access_token, create_magic_link_token, generate_nonce, verify_token,
    MAGIC_LINK_TOKEN_TYPE
)
from app.db.repositories.anonymous_user_repository import AnonymousUserRepository
from app.db.repositories.gallery_repository import GalleryRepository
from app.db.repositories.subscription_repository import SubscriptionRepository
from app.db.repositories.testimony_repository import TestimonyRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User, AnonymousUserRecord

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис идентификации: анонимные сессии и вход по ссылке из письма"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)
        self.anonymous_service = AnonymousUserService(session)

    def issue_access_token(self, user: User) -> str:
        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "is_anonymous": user.is_anonymous
        }
        return create_access_token(data=token_data)

    async def create_anonymous_user(self) -> Tuple[User, str]:
        """Анонимный пользователь с записью отслеживания и токеном доступа"""
        user = await self.user_repository.create(User.create_anonymous())
        await self.anonymous_service.track(user.id)
        logger.info(f"Created anonymous user {user.id}")
        return user, self.issue_access_token(user)

    async def prepare_magic_link(self, email: str, next_path: Optional[str] = None) -> str:
        """Находит или создает пользователя и возвращает одноразовый токен входа"""
        email = email.strip().lower()
        user = await self.user_repository.get_by_email(email)

        if user is None:
            user = await self.user_repository.create(User.create_user(email))
            logger.info(f"Registered user {user.id} via magic link")

        nonce = generate_nonce()
        user.issue_magic_link(nonce)
        await self.user_repository.update(user)

        return create_magic_link_token(str(user.id), email, nonce, next_path or "/dashboard")

    async def complete_magic_link(self, token: str) -> Optional[Tuple[User, str]]:
        """Проверка токена из письма; возвращает пользователя и путь перехода"""
        payload = verify_token(token, token_type=MAGIC_LINK_TOKEN_TYPE)
        if payload is None:
            return None

        try:
            user_id = uuid.UUID(payload.get("sub"))
        except (TypeError, ValueError):
            return None

        user = await self.user_repository.get_by_id(user_id)
        if user is None or not user.is_active:
            return None

        if not user.consume_magic_link(payload.get("jti", "")):
            logger.warning(f"Magic link reuse or mismatch for user {user.id}")
            return None

        await self.user_repository.update(user)

        if user.email:
            await self.anonymous_service.claim_by_email(user.email, user.id)

        return user, payload.get("next") or "/dashboard"

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.user_repository.get_by_id(user_id)

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if payload is None:
            return None

        try:
            user_id = uuid.UUID(payload.get("sub"))
        except (TypeError, ValueError):
            return None

        user = await self.user_repository.get_by_id(user_id)

        if user is None or not user.is_active:
            return None

        return user


class OwnershipClaimer:
    """Перенос свидетельств от анонимного пользователя к вошедшему"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.testimony_repository = TestimonyRepository(session)
        self.anonymous_repository = AnonymousUserRepository(session)

    async def claim(
        self,
        anonymous_user_id: uuid.UUID,
        new_user_id: uuid.UUID,
        share_token: Optional[str] = None
    ) -> int:
        """Переносит одно свидетельство по share_token или все свидетельства анонима.

        Предусловия (владелец анонимен, свидетельство еще не забрано)
        проверяет вызывающий код. Флаг has_claimed обновляется отдельно,
        его ошибка только логируется.
        """
        logger.info(
            f"Claiming testimonies of {anonymous_user_id} for {new_user_id} "
            f"(share_token={'set' if share_token else 'none'})"
        )

        updated = await self.testimony_repository.transfer_ownership(
            from_user_id=anonymous_user_id,
            to_user_id=new_user_id,
            claimed_at=utcnow(),
            share_token=share_token
        )

        if share_token is not None and updated == 0:
            raise NotFoundError("Testimony not found")

        try:
            await self.anonymous_repository.update_fields(anonymous_user_id, has_claimed=True)
        except Exception:
            await self.session.rollback()
            logger.exception(f"Failed to mark anonymous user {anonymous_user_id} as claimed")

        logger.info(f"Claimed {updated} testimonies from {anonymous_user_id}")
        return updated


class AnonymousUserService:
    """Сервис анонимных пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.anonymous_repository = AnonymousUserRepository(session)
        self.testimony_repository = TestimonyRepository(session)
        self.claimer = OwnershipClaimer(session)

    async def is_anonymous_user(self, user_id: uuid.UUID) -> bool:
        """Анонимен тот, у кого есть запись отслеживания"""
        return await self.anonymous_repository.get_by_user_id(user_id) is not None

    async def track(self, user_id: uuid.UUID) -> Tuple[AnonymousUserRecord, bool]:
        """Создание записи отслеживания; повторный вызов возвращает существующую"""
        existing = await self.anonymous_repository.get_by_user_id(user_id)
        if existing is not None:
            return existing, False

        record = await self.anonymous_repository.create(AnonymousUserRecord(user_id=user_id))
        logger.info(f"Tracking anonymous user {user_id}")
        return record, True

    async def save_claim_email(self, share_token: str, email: str) -> AnonymousUserRecord:
        """Привязка email к анонимному владельцу свидетельства"""
        normalized_email = email.strip().lower()

        testimony = await self.testimony_repository.get_by_share_token(share_token)
        if testimony is None:
            raise NotFoundError("Testimony not found")

        if testimony.is_claimed:
            raise ValueError("This testimony has already been claimed")

        record = await self.anonymous_repository.get_by_user_id(testimony.user_id)
        if record is None:
            raise AuthorizationError("This testimony is already owned by a registered user")

        if record.email and record.email != normalized_email:
            raise ValueError("This testimony is already linked to another email address")

        await self.anonymous_repository.update_fields(
            testimony.user_id, email=normalized_email, last_activity=utcnow()
        )
        record.email = normalized_email
        return record

    async def record_testimony_created(self, user_id: uuid.UUID) -> None:
        await self.anonymous_repository.increment_testimony_count(user_id, utcnow())

    async def update_last_activity(self, user_id: uuid.UUID) -> None:
        await self.anonymous_repository.update_fields(user_id, last_activity=utcnow())

    async def claim_by_email(self, email: str, new_user_id: uuid.UUID) -> int:
        """Забирает свидетельства всех анонимных записей с этим email"""
        total = 0
        for record in await self.anonymous_repository.get_unclaimed_by_email(email):
            if record.user_id == new_user_id:
                continue
            total += await self.claimer.claim(record.user_id, new_user_id)
        return total

    async def cleanup_abandoned_users(self, older_than_days: int = 30) -> int:
        """Удаление анонимов без активности дольше указанного срока"""
        cutoff = utcnow() - timedelta(days=older_than_days)
        logger.info(f"Cleaning up anonymous users inactive since {as_utc(cutoff).isoformat()}")

        user_ids = await self.anonymous_repository.get_abandoned(cutoff)
        if not user_ids:
            logger.info("No abandoned anonymous users to clean up")
            return 0

        # Зависимые строки удаляем явно, не полагаясь на каскад БД
        await GalleryRepository(self.session).delete_by_users(user_ids)
        await self.testimony_repository.delete_by_users(user_ids)
        await self.anonymous_repository.delete_many(user_ids)
        await SubscriptionRepository(self.session).delete_by_users(user_ids)
        deleted = await UserRepository(self.session).delete_many(user_ids)

        logger.info(f"Deleted {deleted} abandoned anonymous users")
        return deleted
