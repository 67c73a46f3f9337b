from urllib.parse import parse_qs, urlparse

from app.core.security import create_access_token, verify_token
from app.db.repositories.testimony_repository import TestimonyRepository
from app.db.repositories.user_repository import UserRepository


def _token_from_link(link):
    return parse_qs(urlparse(link).query)["token"][0]


class TestAnonymousSession:
    async def test_creates_anonymous_user_with_cookie(self, client):
        response = await client.post("/api/auth/anonymous")

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["is_anonymous"] is True
        assert body["user"]["email"] is None
        assert response.cookies.get("access_token") == body["access_token"]

        check = await client.get(
            "/api/users/anonymous/check",
            headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert check.json() == {"is_anonymous": True}


class TestMagicLink:
    """Вход по ссылке из письма"""

    async def test_send_and_complete(self, client, mailer, session_factory):
        response = await client.post("/api/auth/send-magic-link", json={
            "email": "Visitor@Example.com", "next": "/testimonies/new"
        })

        assert response.status_code == 200
        assert response.json()["message"] == "Magic link sent"
        assert len(mailer.sent) == 1
        to_email, link = mailer.sent[0]
        assert to_email.lower() == "visitor@example.com"
        assert link.startswith("http://testserver.local/auth/callback?token=")

        callback = await client.get("/auth/callback", params={"token": _token_from_link(link)})

        assert callback.status_code == 302
        assert callback.headers["location"] == "http://testserver.local/testimonies/new"
        session_token = callback.cookies.get("access_token")
        payload = verify_token(session_token)
        assert payload["email"] == "visitor@example.com"

        async with session_factory() as session:
            user = await UserRepository(session).get_by_email("visitor@example.com")
        assert user is not None
        assert user.is_anonymous is False

    async def test_link_is_single_use(self, client, mailer):
        await client.post("/api/auth/send-magic-link", json={"email": "once@example.com"})
        token = _token_from_link(mailer.sent[0][1])

        first = await client.get("/auth/callback", params={"token": token})
        second = await client.get("/auth/callback", params={"token": token})

        assert first.headers["location"] == "http://testserver.local/dashboard"
        assert second.status_code == 302
        assert second.headers["location"] == "http://testserver.local/login?error=invalid_token"

    async def test_invalid_and_wrong_type_tokens(self, client, make_user):
        user, _ = await make_user()
        access_token = create_access_token({"sub": str(user.id)})

        missing = await client.get("/auth/callback")
        garbage = await client.get("/auth/callback", params={"token": "not-a-jwt"})
        wrong_type = await client.get("/auth/callback", params={"token": access_token})

        for response in (missing, garbage, wrong_type):
            assert response.status_code == 302
            assert response.headers["location"].endswith("/login?error=invalid_token")

    async def test_external_next_rejected(self, client, mailer):
        response = await client.post("/api/auth/send-magic-link", json={
            "email": "next@example.com", "next": "https://evil.example.com"
        })

        assert response.status_code == 400
        assert "next" in response.json()["fields"]
        assert mailer.sent == []

    async def test_login_claims_testimonies_by_email(self, client, mailer, make_user, make_testimony,
                                                     session_factory):
        anon, _ = await make_user(anonymous=True)
        testimony = await make_testimony(anon.id)
        await client.post("/api/users/anonymous/claim-email", json={
            "share_token": testimony.share_token, "email": "owner@example.com"
        })

        await client.post("/api/auth/send-magic-link", json={"email": "owner@example.com"})
        await client.get("/auth/callback", params={"token": _token_from_link(mailer.sent[0][1])})

        async with session_factory() as session:
            user = await UserRepository(session).get_by_email("owner@example.com")
            claimed = await TestimonyRepository(session).get_by_id(testimony.id)
        assert claimed.user_id == user.id
        assert claimed.is_claimed is True
