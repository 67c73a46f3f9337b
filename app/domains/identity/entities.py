import uuid
from datetime import datetime
from typing import Optional

from app.core.db import utcnow
from app.core.security import hash_secret, verify_secret


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: uuid.UUID,
        email: Optional[str] = None,
        is_anonymous: bool = False,
        is_active: bool = True,
        magic_link_token_hash: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.is_anonymous = is_anonymous
        self.is_active = is_active
        self.magic_link_token_hash = magic_link_token_hash
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or utcnow()

    def issue_magic_link(self, nonce: str) -> None:
        """Сохранение хеша одноразового ключа ссылки входа"""
        self.magic_link_token_hash = hash_secret(nonce)
        self.updated_at = utcnow()

    def consume_magic_link(self, nonce: str) -> bool:
        """Проверка и погашение ключа: ссылка работает один раз"""
        if not self.magic_link_token_hash or not verify_secret(nonce, self.magic_link_token_hash):
            return False

        self.magic_link_token_hash = None
        self.updated_at = utcnow()
        return True

    @classmethod
    def create_anonymous(cls) -> "User":
        """Анонимный пользователь без email"""
        return cls(id=uuid.uuid4(), is_anonymous=True)

    @classmethod
    def create_user(cls, email: str) -> "User":
        return cls(id=uuid.uuid4(), email=email.lower())

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, is_anonymous={self.is_anonymous})"


class AnonymousUserRecord:
    """Запись отслеживания анонимного пользователя"""

    def __init__(
        self,
        user_id: uuid.UUID,
        email: Optional[str] = None,
        has_claimed: bool = False,
        testimony_count: int = 0,
        created_at: Optional[datetime] = None,
        last_activity: Optional[datetime] = None
    ):
        self.user_id = user_id
        self.email = email
        self.has_claimed = has_claimed
        self.testimony_count = testimony_count
        self.created_at = created_at or utcnow()
        self.last_activity = last_activity or utcnow()

    def __repr__(self) -> str:
        return f"AnonymousUserRecord(user_id={self.user_id}, has_claimed={self.has_claimed})"
