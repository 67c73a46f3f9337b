from app.domains.subscriptions.entities import Subscription, SubscriptionStatus
from app.domains.subscriptions.schemas import (
    CheckoutRequest, CheckoutResponse, SubscriptionStatusResponse, WebhookResponse
)
from app.domains.subscriptions.services import SubscriptionService

__all__ = [
    "Subscription", "SubscriptionStatus",
    "CheckoutRequest", "CheckoutResponse", "SubscriptionStatusResponse", "WebhookResponse",
    "SubscriptionService"
]
