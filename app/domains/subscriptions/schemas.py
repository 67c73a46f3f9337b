from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    """Запрос на создание сессии оплаты"""
    success_url: str = Field(..., min_length=1)
    cancel_url: str = Field(..., min_length=1)


class CheckoutResponse(BaseModel):
    session_id: str
    url: str


class SubscriptionStatusResponse(BaseModel):
    has_active_subscription: bool


class WebhookResponse(BaseModel):
    received: bool = True
