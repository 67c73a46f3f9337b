import secrets
from datetime import timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.db import utcnow

# Контекст для хеширования одноразовых секретов magic link
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
MAGIC_LINK_TOKEN_TYPE = "magic_link"


def hash_secret(value: str) -> str:
    """Хеширование секрета"""
    return pwd_context.hash(value)


def verify_secret(plain_value: str, hashed_value: str) -> bool:
    """Проверка секрета по хешу"""
    return pwd_context.verify(plain_value, hashed_value)


def generate_share_token() -> str:
    """Непрозрачный токен для публичной ссылки на документ"""
    return secrets.token_urlsafe(16)


def generate_nonce() -> str:
    return secrets.token_urlsafe(24)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Создание JWT токена доступа"""
    to_encode = data.copy()

    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_magic_link_token(user_id: str, email: str, nonce: str, next_path: str = "/dashboard") -> str:
    """Создание токена для ссылки входа по email"""
    expire = utcnow() + timedelta(minutes=settings.magic_link_expire_minutes)
    to_encode = {
        "sub": user_id,
        "email": email,
        "jti": nonce,
        "next": next_path,
        "exp": expire,
        "type": MAGIC_LINK_TOKEN_TYPE,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Optional[Dict[str, Any]]:
    """Проверка JWT токена и извлечение данных"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    if payload.get("type") != token_type:
        return None

    return payload
