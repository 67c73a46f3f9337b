from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.errors import AuthenticationError
from app.domains.identity.entities import User
from app.domains.identity.services import IdentityService

ACCESS_TOKEN_COOKIE = "access_token"

bearer_scheme = HTTPBearer(auto_error=False)


def _resolve_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    # Заголовок Authorization важнее cookie
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Текущий пользователь или None"""
    token = _resolve_token(request, credentials)
    if not token:
        return None

    return await IdentityService(db).get_current_user_from_token(token)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Текущий пользователь, иначе 401"""
    if user is None:
        raise AuthenticationError()
    return user
