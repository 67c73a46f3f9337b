from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import client_ip, enforce_rate_limit
from app.core.auth import get_current_user, get_optional_user
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.services import AnonymousUserService
from app.domains.testimonies.excerpt import generate_excerpt_with_fallback
from app.domains.testimonies.schemas import (
    TestimonyCreate, TestimonyUpdate, TestimonyResponse, TestimonyPublicResponse,
    SharedTestimonyResponse
)
from app.domains.testimonies.services import TestimonyService
from app.domains.testimonies.share_urls import get_all_share_urls

router = APIRouter(prefix="/api/testimonies", tags=["testimonies"])


@router.get("", response_model=List[TestimonyResponse])
async def list_testimonies(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Свидетельства текущего пользователя"""
    testimony_service = TestimonyService(db)
    testimonies = await testimony_service.list_user_testimonies(current_user.id)
    return [TestimonyResponse.model_validate(t) for t in testimonies]


@router.post("", response_model=TestimonyResponse, status_code=status.HTTP_201_CREATED)
async def create_testimony(
    testimony_data: TestimonyCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание свидетельства, доступно и анонимам"""
    testimony_service = TestimonyService(db)
    testimony = await testimony_service.create_testimony(testimony_data, current_user.id)
    return TestimonyResponse.model_validate(testimony)


@router.get("/share/{share_token}", response_model=SharedTestimonyResponse)
async def get_shared_testimony(
    share_token: str,
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Свидетельство по публичной ссылке"""
    enforce_rate_limit(
        f"share:{client_ip(request)}",
        settings.share_rate_limit,
        settings.share_rate_window_seconds
    )

    testimony = await TestimonyService(db).get_by_share_token(share_token)
    is_anonymous = await AnonymousUserService(db).is_anonymous_user(testimony.user_id)

    share_url = f"{settings.app_url}/share/{share_token}"
    excerpt = generate_excerpt_with_fallback(testimony)

    return SharedTestimonyResponse(
        testimony=TestimonyPublicResponse.model_validate(testimony),
        is_owner=current_user is not None and testimony.is_owned_by(current_user.id),
        is_anonymous=is_anonymous,
        excerpt=excerpt,
        share_urls=get_all_share_urls(share_url, testimony.title, excerpt)
    )


@router.get("/{testimony_id}", response_model=TestimonyResponse)
async def get_testimony(
    testimony_id: uuid.UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение свидетельства: владельцу всегда, остальным если опубликовано"""
    testimony_service = TestimonyService(db)
    testimony = await testimony_service.get_readable(
        testimony_id, current_user.id if current_user else None
    )
    return TestimonyResponse.model_validate(testimony)


@router.put("/{testimony_id}", response_model=TestimonyResponse)
async def update_testimony(
    testimony_id: uuid.UUID,
    update_data: TestimonyUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление свидетельства"""
    testimony_service = TestimonyService(db)
    testimony = await testimony_service.update_testimony(testimony_id, update_data, current_user.id)
    return TestimonyResponse.model_validate(testimony)


@router.delete("/{testimony_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_testimony(
    testimony_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление свидетельства"""
    await TestimonyService(db).delete_testimony(testimony_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
