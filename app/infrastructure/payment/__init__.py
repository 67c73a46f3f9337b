from app.infrastructure.payment.providers import StripeProvider, CheckoutSession, WebhookSignatureError
from app.infrastructure.payment.services import PaymentService

__all__ = ["StripeProvider", "CheckoutSession", "WebhookSignatureError", "PaymentService"]
