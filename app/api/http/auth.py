import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_mailer
from app.core.auth import ACCESS_TOKEN_COOKIE
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.schemas import (
    AnonymousSessionResponse, MagicLinkRequest, MagicLinkResponse, UserResponse
)
from app.domains.identity.services import IdentityService
from app.infrastructure.email.mailer import ResendMailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
callback_router = APIRouter(prefix="/auth", tags=["auth"])

DEFAULT_REDIRECT = "/dashboard"
LOGIN_ERROR_REDIRECT = "/login?error=invalid_token"


def _set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax"
    )


def _safe_next(value: Optional[str]) -> Optional[str]:
    # Только относительные пути, иначе открытый редирект
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return None


@router.post("/anonymous", response_model=AnonymousSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_anonymous_session(db: AsyncSession = Depends(get_db)):
    """Анонимная сессия для создания свидетельства без регистрации"""
    identity_service = IdentityService(db)
    user, token = await identity_service.create_anonymous_user()

    body = AnonymousSessionResponse(access_token=token, user=UserResponse.model_validate(user))
    response = JSONResponse(content=body.model_dump(mode="json"), status_code=status.HTTP_201_CREATED)
    _set_session_cookie(response, token)
    return response


@router.post("/send-magic-link", response_model=MagicLinkResponse)
async def send_magic_link(
    data: MagicLinkRequest,
    db: AsyncSession = Depends(get_db),
    mailer: ResendMailer = Depends(get_mailer)
):
    """Отправка ссылки для входа по email"""
    identity_service = IdentityService(db)
    token = await identity_service.prepare_magic_link(data.email, data.next)

    link = f"{settings.app_url}/auth/callback?{urlencode({'token': token})}"
    await mailer.send_magic_link(data.email, link)

    return MagicLinkResponse()


@callback_router.get("/callback")
async def auth_callback(
    token: Optional[str] = Query(None),
    next: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Вход по ссылке из письма: сессия, перенос анонимных свидетельств, редирект"""
    if not token:
        logger.error("Auth callback called without a token")
        return RedirectResponse(f"{settings.app_url}{LOGIN_ERROR_REDIRECT}", status_code=status.HTTP_302_FOUND)

    identity_service = IdentityService(db)
    result = await identity_service.complete_magic_link(token)

    if result is None:
        logger.error("Auth callback received an invalid or used token")
        return RedirectResponse(f"{settings.app_url}{LOGIN_ERROR_REDIRECT}", status_code=status.HTTP_302_FOUND)

    user, token_next = result
    target = _safe_next(next) or _safe_next(token_next) or DEFAULT_REDIRECT

    logger.info(f"Session created for user {user.id}")
    response = RedirectResponse(f"{settings.app_url}{target}", status_code=status.HTTP_302_FOUND)
    _set_session_cookie(response, identity_service.issue_access_token(user))
    return response
