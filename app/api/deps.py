from fastapi import Request

from app.core.errors import RateLimitError
from app.core.rate_limit import rate_limiter, get_client_ip
from app.infrastructure.ai.providers import OpenAIProvider
from app.infrastructure.email.mailer import ResendMailer
from app.infrastructure.export.providers import PDFProvider
from app.infrastructure.payment.providers import StripeProvider


def get_payment_provider() -> StripeProvider:
    return StripeProvider()


def get_ai_provider() -> OpenAIProvider:
    return OpenAIProvider()


def get_pdf_provider() -> PDFProvider:
    return PDFProvider()


def get_mailer() -> ResendMailer:
    return ResendMailer()


def enforce_rate_limit(key: str, limit: int, window_seconds: int) -> None:
    """429, если ключ исчерпал лимит в текущем окне"""
    result = rate_limiter.check(key, limit, window_seconds)
    if not result.allowed:
        raise RateLimitError()


def client_ip(request: Request) -> str:
    return get_client_ip(request.headers)
