from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.subscriptions.schemas import SubscriptionStatusResponse
from app.domains.subscriptions.services import SubscriptionService

router = APIRouter(prefix="/api/subscription", tags=["subscription"])


@router.get("/status", response_model=SubscriptionStatusResponse)
async def subscription_status(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    has_active = await SubscriptionService(db).has_active_subscription(current_user.id)
    return SubscriptionStatusResponse(has_active_subscription=has_active)
