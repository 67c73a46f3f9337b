from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
import uuid


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    id: uuid.UUID
    email: Optional[str] = None
    is_anonymous: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"


class AnonymousSessionResponse(Token):
    user: UserResponse


class MagicLinkRequest(BaseModel):
    """Запрос ссылки для входа по email"""
    email: EmailStr
    next: Optional[str] = Field(None, max_length=500)

    @field_validator('next')
    @classmethod
    def validate_next(cls, v):
        # Только относительные пути внутри приложения
        if v is not None and (not v.startswith('/') or v.startswith('//')):
            raise ValueError('Redirect path must be relative')
        return v


class MagicLinkResponse(BaseModel):
    success: bool = True
    message: str = "Magic link sent"


class TrackAnonymousRequest(BaseModel):
    user_id: uuid.UUID


class TrackAnonymousResponse(BaseModel):
    success: bool = True
    already_tracked: bool = False


class AnonymousCheckResponse(BaseModel):
    is_anonymous: bool


class ClaimEmailRequest(BaseModel):
    """Сохранение email, чтобы забрать свидетельство позже"""
    share_token: str = Field(..., min_length=1)
    email: EmailStr


class ClaimEmailResponse(BaseModel):
    success: bool = True


class ClaimRequest(BaseModel):
    share_token: str = Field(..., min_length=1)
