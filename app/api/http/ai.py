from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import enforce_rate_limit, get_ai_provider
from app.core.auth import get_current_user
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.testimonies.services import TestimonyService
from app.infrastructure.ai.services import AiService

router = APIRouter(prefix="/api/ai", tags=["ai"])


class AiEditRequest(BaseModel):
    testimony_id: uuid.UUID
    prompt: str = Field(..., min_length=1, max_length=2000)


class AiSuggestion(BaseModel):
    text: str
    explanation: Optional[str] = None


class AiEditResponse(BaseModel):
    suggestions: List[AiSuggestion]


@router.post("/edit", response_model=AiEditResponse)
async def ai_edit(
    data: AiEditRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    provider=Depends(get_ai_provider)
):
    """Подсказки по редактированию свидетельства"""
    testimony = await TestimonyService(db).get_readable(data.testimony_id, current_user.id)

    enforce_rate_limit(
        f"ai:{current_user.id}", settings.ai_rate_limit, settings.user_rate_window_seconds
    )

    suggestions = await AiService(db, provider).generate_editing_suggestions(
        testimony, data.prompt, current_user.id
    )
    return AiEditResponse(suggestions=suggestions)
