import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.deps import get_payment_provider
from app.core.auth import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.subscriptions.schemas import CheckoutRequest, CheckoutResponse, WebhookResponse
from app.infrastructure.payment.providers import WebhookSignatureError
from app.infrastructure.payment.services import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    data: CheckoutRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    provider=Depends(get_payment_provider)
):
    """Сессия оплаты премиум-подписки"""
    payment_service = PaymentService(db, provider)
    session = await payment_service.create_checkout_session(
        current_user.id, data.success_url, data.cancel_url
    )
    return CheckoutResponse(session_id=session.id, url=session.url)


@router.post("/webhook", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    db: AsyncSession = Depends(get_db),
    provider=Depends(get_payment_provider)
):
    """События Stripe о подписках"""
    if not stripe_signature:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing stripe-signature header")

    payload = await request.body()

    try:
        event = provider.construct_event(payload, stripe_signature)
    except WebhookSignatureError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook signature")

    logger.info(f"Stripe webhook received: {event.get('type')}")
    await PaymentService(db, provider).handle_webhook(event)

    return WebhookResponse()
