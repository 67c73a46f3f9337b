from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
import uuid

from app.db.models.subscription import Subscription as SubscriptionModel

if TYPE_CHECKING:
    from app.domains.subscriptions.entities import Subscription


class SubscriptionRepository:
    """Репозиторий для работы с подписками"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: uuid.UUID) -> Optional["Subscription"]:
        result = await self.session.execute(
            select(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
        )
        db_subscription = result.scalar_one_or_none()
        return self._to_domain(db_subscription) if db_subscription else None

    async def upsert(self, subscription: "Subscription") -> "Subscription":
        """Одна подписка на пользователя: создаем или перезаписываем"""
        result = await self.session.execute(
            select(SubscriptionModel).where(SubscriptionModel.user_id == subscription.user_id)
        )
        db_subscription = result.scalar_one_or_none()

        if db_subscription is None:
            db_subscription = SubscriptionModel(id=subscription.id, user_id=subscription.user_id)
            self.session.add(db_subscription)

        db_subscription.stripe_customer_id = subscription.stripe_customer_id
        db_subscription.stripe_subscription_id = subscription.stripe_subscription_id
        db_subscription.status = subscription.status.value
        db_subscription.current_period_end = subscription.current_period_end

        await self.session.commit()
        await self.session.refresh(db_subscription)
        return self._to_domain(db_subscription)

    async def update_by_stripe_subscription_id(self, stripe_subscription_id: str, **values) -> bool:
        status = values.get("status")
        if status is not None and hasattr(status, "value"):
            values["status"] = status.value

        result = await self.session.execute(
            update(SubscriptionModel)
            .where(SubscriptionModel.stripe_subscription_id == stripe_subscription_id)
            .values(**values)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def delete_by_users(self, user_ids: List[uuid.UUID]) -> int:
        result = await self.session.execute(
            delete(SubscriptionModel).where(SubscriptionModel.user_id.in_(user_ids))
        )
        await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_subscription: SubscriptionModel) -> "Subscription":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.subscriptions.entities import Subscription, SubscriptionStatus

        return Subscription(
            id=db_subscription.id,
            user_id=db_subscription.user_id,
            status=SubscriptionStatus(db_subscription.status),
            stripe_customer_id=db_subscription.stripe_customer_id,
            stripe_subscription_id=db_subscription.stripe_subscription_id,
            current_period_end=db_subscription.current_period_end,
            created_at=db_subscription.created_at,
            updated_at=db_subscription.updated_at
        )
