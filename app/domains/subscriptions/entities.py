import enum
import uuid
from datetime import datetime
from typing import Optional

from app.core.db import utcnow, as_utc


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    TRIALING = "trialing"


class Subscription:
    """Подписка пользователя на премиум-план"""

    def __init__(
        self,
        id: uuid.UUID,
        user_id: uuid.UUID,
        status: SubscriptionStatus,
        stripe_customer_id: Optional[str] = None,
        stripe_subscription_id: Optional[str] = None,
        current_period_end: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.user_id = user_id
        self.status = status
        self.stripe_customer_id = stripe_customer_id
        self.stripe_subscription_id = stripe_subscription_id
        self.current_period_end = current_period_end
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or utcnow()

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Активна, если статус active и период не истек"""
        if self.status != SubscriptionStatus.ACTIVE:
            return False
        if self.current_period_end is None:
            return True
        return as_utc(self.current_period_end) > (now or utcnow())

    @classmethod
    def create_subscription(
        cls,
        user_id: uuid.UUID,
        stripe_customer_id: Optional[str],
        stripe_subscription_id: Optional[str],
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        current_period_end: Optional[datetime] = None
    ) -> "Subscription":
        return cls(
            id=uuid.uuid4(),
            user_id=user_id,
            status=status,
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id,
            current_period_end=current_period_end
        )

    def __repr__(self) -> str:
        return f"Subscription(user_id={self.user_id}, status={self.status.value})"
