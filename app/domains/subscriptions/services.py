import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db.repositories.subscription_repository import SubscriptionRepository
from app.domains.subscriptions.entities import Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Сервис подписок"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.subscription_repository = SubscriptionRepository(session)

    async def get_by_user_id(self, user_id: uuid.UUID) -> Optional[Subscription]:
        return await self.subscription_repository.get_by_user_id(user_id)

    async def has_active_subscription(self, user_id: uuid.UUID) -> bool:
        subscription = await self.subscription_repository.get_by_user_id(user_id)
        return subscription is not None and subscription.is_active()

    async def activate(
        self,
        user_id: uuid.UUID,
        stripe_customer_id: Optional[str],
        stripe_subscription_id: Optional[str],
        current_period_end: Optional[datetime] = None
    ) -> Subscription:
        """Активация подписки после успешной оплаты"""
        subscription = Subscription.create_subscription(
            user_id=user_id,
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id,
            current_period_end=current_period_end
        )
        saved = await self.subscription_repository.upsert(subscription)
        logger.info(f"Subscription activated for user {user_id}")
        return saved

    async def update_status(
        self,
        stripe_subscription_id: str,
        status: SubscriptionStatus,
        current_period_end: Optional[datetime] = None
    ) -> bool:
        values = {"status": status}
        if current_period_end is not None:
            values["current_period_end"] = current_period_end

        updated = await self.subscription_repository.update_by_stripe_subscription_id(
            stripe_subscription_id, **values
        )
        if not updated:
            logger.warning(f"No subscription found for stripe id {stripe_subscription_id}")
        return updated

    async def cancel(self, stripe_subscription_id: str) -> bool:
        return await self.update_status(stripe_subscription_id, SubscriptionStatus.CANCELED)
