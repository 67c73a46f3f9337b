import json
import os

# Настройки читаются при импорте приложения
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_URL"] = "http://testserver.local"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_ai_provider, get_mailer, get_payment_provider, get_pdf_provider
from app.core.db import Base, get_db
from app.core.rate_limit import rate_limiter
from app.db.repositories.testimony_repository import TestimonyRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.identity.services import AnonymousUserService, IdentityService
from app.domains.testimonies.entities import Testimony, FrameworkType
from app.infrastructure.payment.providers import CheckoutSession, WebhookSignatureError
from app.main import app

VALID_SIGNATURE = "t=1,v1=valid"


class FakePaymentProvider:
    def __init__(self):
        self.sessions = []

    def create_checkout_session(self, success_url, cancel_url, metadata=None, customer_id=None):
        self.sessions.append({"success_url": success_url, "cancel_url": cancel_url, "metadata": metadata})
        return CheckoutSession(id="cs_test_123", url="https://checkout.stripe.test/cs_test_123")

    def construct_event(self, payload, signature):
        if signature != VALID_SIGNATURE:
            raise WebhookSignatureError("Invalid webhook signature")
        return json.loads(payload)


class FakeAiProvider:
    def __init__(self):
        self.calls = []

    async def generate_suggestions(self, testimony, prompt):
        self.calls.append((testimony.id, prompt))
        return [{"text": "Describe the moment in more detail", "explanation": "Specifics help readers"}]


class FakePdfProvider:
    def generate(self, testimony):
        return b"%PDF-1.4 " + testimony.title.encode()


class FakeMailer:
    def __init__(self):
        self.sent = []

    async def send_magic_link(self, to_email, link):
        self.sent.append((to_email, link))
        return True


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def payment_provider():
    return FakePaymentProvider()


@pytest.fixture
def ai_provider():
    return FakeAiProvider()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
async def client(session_factory, payment_provider, ai_provider, mailer):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_provider] = lambda: payment_provider
    app.dependency_overrides[get_ai_provider] = lambda: ai_provider
    app.dependency_overrides[get_pdf_provider] = lambda: FakePdfProvider()
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Фабрика пользователей: возвращает пользователя и заголовки авторизации"""
    counter = {"n": 0}

    async def _make_user(email=None, anonymous=False):
        async with session_factory() as session:
            if anonymous:
                user = await UserRepository(session).create(User.create_anonymous())
                await AnonymousUserService(session).track(user.id)
            else:
                counter["n"] += 1
                user = await UserRepository(session).create(
                    User.create_user(email or f"user{counter['n']}@example.com")
                )
            token = IdentityService(session).issue_access_token(user)
        return user, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def make_testimony(session_factory):
    """Фабрика свидетельств в обход API"""

    async def _make_testimony(user_id, title="My Story", framework_type=FrameworkType.FREE_FORM,
                              content=None, is_public=False):
        testimony = Testimony.create_testimony(
            user_id=user_id,
            title=title,
            framework_type=framework_type,
            content=content if content is not None else {"narrative": "I was lost and now I am found."},
            is_public=is_public
        )
        async with session_factory() as session:
            return await TestimonyRepository(session).create(testimony)

    return _make_testimony
