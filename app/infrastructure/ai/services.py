from typing import List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.errors import AuthorizationError
from app.domains.subscriptions.services import SubscriptionService
from app.domains.testimonies.entities import Testimony


class AiService:
    """Редактура с ИИ, доступна только премиум-подписчикам"""

    def __init__(self, session: AsyncSession, provider):
        self.provider = provider
        self.subscription_service = SubscriptionService(session)

    async def generate_editing_suggestions(
        self, testimony: Testimony, prompt: str, user_id: uuid.UUID
    ) -> List[Dict[str, Any]]:
        if not await self.subscription_service.has_active_subscription(user_id):
            raise AuthorizationError("Premium subscription required for AI editing features")

        return await self.provider.generate_suggestions(testimony, prompt)
