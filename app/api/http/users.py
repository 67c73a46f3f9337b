import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import client_ip, enforce_rate_limit
from app.core.auth import get_current_user, get_optional_user
from app.core.config import settings
from app.core.errors import AuthorizationError
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import (
    TrackAnonymousRequest, TrackAnonymousResponse, AnonymousCheckResponse,
    ClaimEmailRequest, ClaimEmailResponse, ClaimRequest
)
from app.domains.identity.services import AnonymousUserService, OwnershipClaimer
from app.domains.testimonies.schemas import TestimonyResponse
from app.domains.testimonies.services import TestimonyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/anonymous/track", response_model=TrackAnonymousResponse)
async def track_anonymous_user(
    data: TrackAnonymousRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Запись отслеживания для анонимного пользователя"""
    if data.user_id != current_user.id:
        raise AuthorizationError("User ID mismatch")

    _, created = await AnonymousUserService(db).track(current_user.id)

    body = TrackAnonymousResponse(already_tracked=not created)
    return JSONResponse(
        content=body.model_dump(),
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )


@router.get("/anonymous/check", response_model=AnonymousCheckResponse)
async def check_anonymous_user(
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    if current_user is None:
        return AnonymousCheckResponse(is_anonymous=False)

    is_anonymous = await AnonymousUserService(db).is_anonymous_user(current_user.id)
    return AnonymousCheckResponse(is_anonymous=is_anonymous)


@router.post("/anonymous/claim-email", response_model=ClaimEmailResponse)
async def save_claim_email(
    data: ClaimEmailRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Сохранение email, чтобы забрать свидетельство позже"""
    enforce_rate_limit(
        f"claim-email:{client_ip(request)}",
        settings.claim_email_rate_limit,
        settings.claim_email_rate_window_seconds
    )

    try:
        await AnonymousUserService(db).save_claim_email(data.share_token, data.email)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ClaimEmailResponse()


@router.post("/claim")
async def claim_testimony(
    data: ClaimRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Перенос свидетельства от анонимного автора к вошедшему пользователю"""
    testimony_service = TestimonyService(db)
    testimony = await testimony_service.get_by_share_token(data.share_token)

    if not await AnonymousUserService(db).is_anonymous_user(testimony.user_id):
        raise AuthorizationError("This testimony is already claimed by another user")

    if testimony.is_owned_by(current_user.id):
        return {
            "success": True,
            "message": "This testimony already belongs to you",
            "testimony": TestimonyResponse.model_validate(testimony).model_dump(mode="json")
        }

    if testimony.is_claimed:
        raise AuthorizationError("This testimony has already been claimed")

    await OwnershipClaimer(db).claim(testimony.user_id, current_user.id, data.share_token)
    claimed = await testimony_service.get_by_share_token(data.share_token)

    return {
        "success": True,
        "message": "Testimony claimed successfully",
        "testimony": TestimonyResponse.model_validate(claimed).model_dump(mode="json")
    }
