import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import stripe

from app.core.config import settings

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """Подпись вебхука не прошла проверку"""


@dataclass
class CheckoutSession:
    id: str
    url: str


class StripeProvider:
    """Платежный провайдер поверх Stripe SDK (вызовы блокирующие)"""

    def __init__(self, api_key: Optional[str] = None, webhook_secret: Optional[str] = None):
        self.api_key = api_key or settings.stripe_secret_key
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret

        if not self.api_key:
            raise RuntimeError("STRIPE_SECRET_KEY is not set")

    def create_checkout_session(
        self,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
        customer_id: Optional[str] = None
    ) -> CheckoutSession:
        """Сессия оплаты ежемесячной премиум-подписки"""
        metadata = metadata or {}
        params = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": settings.stripe_currency,
                        "product_data": {
                            "name": "Testimony Builder Premium",
                            "description": "AI editing, enhanced templates, and gallery sharing",
                        },
                        "recurring": {"interval": "month", "interval_count": 1},
                        "unit_amount": settings.stripe_price_amount,
                    },
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": metadata.get("user_id"),
            "metadata": metadata,
        }
        if customer_id:
            params["customer"] = customer_id

        session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        return CheckoutSession(id=session.id, url=session.url or "")

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Проверка подписи и разбор события вебхука"""
        if not self.webhook_secret:
            raise RuntimeError("STRIPE_WEBHOOK_SECRET is not set")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Stripe webhook verification failed: {e}")
            raise WebhookSignatureError("Invalid webhook signature") from e

        return event
