import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
import uuid

from app.domains.subscriptions.entities import SubscriptionStatus
from app.domains.subscriptions.services import SubscriptionService
from app.infrastructure.payment.providers import CheckoutSession

logger = logging.getLogger(__name__)


def _from_timestamp(value: Optional[int]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _parse_status(value: Optional[str]) -> Optional[SubscriptionStatus]:
    try:
        return SubscriptionStatus(value)
    except ValueError:
        return None


class PaymentService:
    """Оплата подписки и обработка событий Stripe"""

    def __init__(self, session: AsyncSession, provider):
        self.session = session
        self.provider = provider
        self.subscription_service = SubscriptionService(session)

    async def create_checkout_session(
        self, user_id: uuid.UUID, success_url: str, cancel_url: str
    ) -> CheckoutSession:
        return await run_in_threadpool(
            self.provider.create_checkout_session,
            success_url,
            cancel_url,
            {"user_id": str(user_id)}
        )

    async def handle_webhook(self, event: Dict[str, Any]) -> bool:
        """Применение события; False для необрабатываемых типов"""
        event_type = event.get("type")
        data = (event.get("data") or {}).get("object") or {}

        if event_type == "checkout.session.completed":
            raw_user_id = data.get("client_reference_id") or (data.get("metadata") or {}).get("user_id")
            try:
                user_id = uuid.UUID(str(raw_user_id))
            except ValueError:
                logger.error(f"Checkout session {data.get('id')} has no valid user reference")
                return False

            details = data.get("subscription_details") or {}
            await self.subscription_service.activate(
                user_id=user_id,
                stripe_customer_id=data.get("customer"),
                stripe_subscription_id=data.get("subscription"),
                current_period_end=_from_timestamp(details.get("current_period_end"))
            )
            return True

        if event_type == "customer.subscription.updated":
            status = _parse_status(data.get("status"))
            if status is None:
                logger.warning(f"Ignoring unknown subscription status {data.get('status')}")
                return False

            await self.subscription_service.update_status(
                data.get("id"),
                status,
                current_period_end=_from_timestamp(data.get("current_period_end"))
            )
            return True

        if event_type == "customer.subscription.deleted":
            await self.subscription_service.cancel(data.get("id"))
            return True

        logger.info(f"Unhandled event type: {event_type}")
        return False
