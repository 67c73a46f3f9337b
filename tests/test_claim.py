from datetime import timedelta

import pytest

from app.core.db import utcnow
from app.core.errors import AuthorizationError, NotFoundError
from app.db.repositories.anonymous_user_repository import AnonymousUserRepository
from app.db.repositories.testimony_repository import TestimonyRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.services import AnonymousUserService, OwnershipClaimer


class TestOwnershipClaimer:
    """Перенос владения от анонимного пользователя"""

    async def test_claim_by_token_updates_only_matching_row(self, db_session, make_user, make_testimony):
        anon, _ = await make_user(anonymous=True)
        other_anon, _ = await make_user(anonymous=True)
        new_owner, _ = await make_user()

        target = await make_testimony(anon.id, title="Target")
        sibling = await make_testimony(anon.id, title="Sibling")
        foreign = await make_testimony(other_anon.id, title="Foreign")

        updated = await OwnershipClaimer(db_session).claim(anon.id, new_owner.id, target.share_token)

        assert updated == 1
        repository = TestimonyRepository(db_session)
        claimed = await repository.get_by_id(target.id)
        assert claimed.user_id == new_owner.id
        assert claimed.is_claimed is True
        assert claimed.claimed_at is not None
        assert (await repository.get_by_id(sibling.id)).user_id == anon.id
        untouched = await repository.get_by_id(foreign.id)
        assert untouched.user_id == other_anon.id
        assert untouched.is_claimed is False

        record = await AnonymousUserRepository(db_session).get_by_user_id(anon.id)
        assert record.has_claimed is True

    async def test_claim_by_token_of_other_owner_raises(self, db_session, make_user, make_testimony):
        anon, _ = await make_user(anonymous=True)
        other_anon, _ = await make_user(anonymous=True)
        new_owner, _ = await make_user()
        foreign = await make_testimony(other_anon.id)

        with pytest.raises(NotFoundError):
            await OwnershipClaimer(db_session).claim(anon.id, new_owner.id, foreign.share_token)

        assert (await TestimonyRepository(db_session).get_by_id(foreign.id)).user_id == other_anon.id

    async def test_claim_all_returns_count(self, db_session, make_user, make_testimony):
        anon, _ = await make_user(anonymous=True)
        new_owner, _ = await make_user()
        await make_testimony(anon.id)
        await make_testimony(anon.id)

        claimer = OwnershipClaimer(db_session)

        assert await claimer.claim(anon.id, new_owner.id) == 2
        assert await claimer.claim(anon.id, new_owner.id) == 0
        assert len(await TestimonyRepository(db_session).get_by_user(new_owner.id)) == 2

    async def test_tracking_flag_failure_keeps_transfer(
        self, db_session, make_user, make_testimony, monkeypatch
    ):
        anon, _ = await make_user(anonymous=True)
        new_owner, _ = await make_user()
        testimony = await make_testimony(anon.id)

        async def failing_update_fields(self, user_id, **values):
            raise RuntimeError("tracking table unavailable")

        monkeypatch.setattr(AnonymousUserRepository, "update_fields", failing_update_fields)

        updated = await OwnershipClaimer(db_session).claim(anon.id, new_owner.id, testimony.share_token)

        assert updated == 1
        claimed = await TestimonyRepository(db_session).get_by_id(testimony.id)
        assert claimed.user_id == new_owner.id
        assert claimed.is_claimed is True

        monkeypatch.undo()
        record = await AnonymousUserRepository(db_session).get_by_user_id(anon.id)
        assert record.has_claimed is False


class TestAnonymousUserService:
    """Учет анонимных пользователей"""

    async def test_track_is_idempotent(self, db_session, make_user):
        user, _ = await make_user()
        service = AnonymousUserService(db_session)

        _, created = await service.track(user.id)
        _, created_again = await service.track(user.id)

        assert created is True
        assert created_again is False
        assert await service.is_anonymous_user(user.id) is True

    async def test_save_claim_email_rules(self, db_session, make_user, make_testimony):
        anon, _ = await make_user(anonymous=True)
        registered, _ = await make_user()
        testimony = await make_testimony(anon.id)
        owned = await make_testimony(registered.id)
        service = AnonymousUserService(db_session)

        record = await service.save_claim_email(testimony.share_token, "  Me@Example.COM ")
        assert record.email == "me@example.com"

        # Тот же адрес можно сохранить повторно
        await service.save_claim_email(testimony.share_token, "me@example.com")

        with pytest.raises(ValueError):
            await service.save_claim_email(testimony.share_token, "someone@example.com")
        with pytest.raises(AuthorizationError):
            await service.save_claim_email(owned.share_token, "me@example.com")
        with pytest.raises(NotFoundError):
            await service.save_claim_email("missing-token", "me@example.com")

    async def test_claim_by_email(self, db_session, make_user, make_testimony):
        anon, _ = await make_user(anonymous=True)
        testimony = await make_testimony(anon.id)
        service = AnonymousUserService(db_session)
        await service.save_claim_email(testimony.share_token, "reader@example.com")
        user, _ = await make_user(email="reader@example.com")

        assert await service.claim_by_email("reader@example.com", user.id) == 1
        assert (await TestimonyRepository(db_session).get_by_id(testimony.id)).user_id == user.id
        assert await service.claim_by_email("reader@example.com", user.id) == 0

    async def test_cleanup_abandoned_users(self, db_session, make_user, make_testimony):
        stale, _ = await make_user(anonymous=True)
        fresh, _ = await make_user(anonymous=True)
        stale_testimony = await make_testimony(stale.id)
        service = AnonymousUserService(db_session)

        await AnonymousUserRepository(db_session).update_fields(
            stale.id, last_activity=utcnow() - timedelta(days=45)
        )

        assert await service.cleanup_abandoned_users(older_than_days=30) == 1
        assert await UserRepository(db_session).get_by_id(stale.id) is None
        assert await UserRepository(db_session).get_by_id(fresh.id) is not None
        assert await TestimonyRepository(db_session).get_by_id(stale_testimony.id) is None
        assert await service.is_anonymous_user(stale.id) is False
