import uuid
from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.core.db import as_utc, utcnow
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.db.repositories.anonymous_user_repository import AnonymousUserRepository
from app.domains.testimonies.entities import FrameworkType
from app.domains.testimonies.schemas import TestimonyCreate, TestimonyUpdate, FreeFormCreate
from app.domains.testimonies.services import TestimonyService, validate_content


class TestContentSchemas:
    """Содержимое определяется типом шаблона"""

    def test_discriminated_union_picks_variant(self):
        data = TestimonyCreate.model_validate({
            "title": "  Redeemed  ",
            "framework_type": "free_form",
            "content": {"narrative": "Story"}
        })

        assert isinstance(data.root, FreeFormCreate)
        assert data.root.title == "Redeemed"
        assert data.root.is_public is False

    def test_content_must_match_framework(self):
        with pytest.raises(PydanticValidationError):
            TestimonyCreate.model_validate({
                "title": "Mismatch",
                "framework_type": "before_encounter_after",
                "content": {"narrative": "Story"}
            })

    def test_unknown_framework_rejected(self):
        with pytest.raises(PydanticValidationError):
            TestimonyCreate.model_validate({"title": "X", "framework_type": "poem", "content": {}})

    def test_blank_title_rejected(self):
        with pytest.raises(PydanticValidationError):
            TestimonyCreate.model_validate({
                "title": "   ", "framework_type": "free_form", "content": {"narrative": ""}
            })

    def test_validate_content_reports_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_content(FrameworkType.BEFORE_ENCOUNTER_AFTER, {"before": "A", "encounter": ""})

        fields = exc_info.value.fields
        assert "content.encounter" in fields
        assert "content.after" in fields

    def test_validate_content_normalizes(self):
        content = validate_content(FrameworkType.LIFE_TIMELINE, {"milestones": [{"event": "Grad"}]})
        assert content == {"milestones": [{"age": "", "event": "Grad", "impact": ""}]}


class TestTestimonyService:
    """Сервис свидетельств поверх репозитория"""

    async def test_create_generates_share_token_and_counts_for_anonymous(self, db_session, make_user):
        user, _ = await make_user(anonymous=True)
        service = TestimonyService(db_session)

        created = await service.create_testimony(TestimonyCreate.model_validate({
            "title": "First", "framework_type": "free_form", "content": {"narrative": "Hello"}
        }), user.id)

        assert created.share_token
        assert created.content == {"narrative": "Hello"}
        record = await AnonymousUserRepository(db_session).get_by_user_id(user.id)
        assert record.testimony_count == 1

    async def test_get_readable_rules(self, db_session, make_user, make_testimony):
        owner, _ = await make_user()
        other, _ = await make_user()
        private = await make_testimony(owner.id)
        public = await make_testimony(owner.id, is_public=True)
        service = TestimonyService(db_session)

        assert (await service.get_readable(private.id, owner.id)).id == private.id
        assert (await service.get_readable(public.id, other.id)).id == public.id
        assert (await service.get_readable(public.id, None)).id == public.id
        with pytest.raises(AuthorizationError):
            await service.get_readable(private.id, other.id)
        with pytest.raises(NotFoundError):
            await service.get_readable(uuid.uuid4(), owner.id)

    async def test_update_validates_against_stored_framework(self, db_session, make_user, make_testimony):
        owner, _ = await make_user()
        testimony = await make_testimony(owner.id)
        service = TestimonyService(db_session)

        with pytest.raises(ValidationError):
            await service.update_testimony(
                testimony.id, TestimonyUpdate(content={"before": "x"}), owner.id
            )

        updated = await service.update_testimony(
            testimony.id, TestimonyUpdate(title="Renamed", content={"narrative": "New"}), owner.id
        )
        assert updated.title == "Renamed"
        assert updated.content == {"narrative": "New"}

    async def test_update_refreshes_anonymous_activity(self, db_session, make_user, make_testimony):
        user, _ = await make_user(anonymous=True)
        testimony = await make_testimony(user.id)
        repository = AnonymousUserRepository(db_session)
        stale = utcnow() - timedelta(days=45)
        await repository.update_fields(user.id, last_activity=stale)

        await TestimonyService(db_session).update_testimony(
            testimony.id, TestimonyUpdate(title="Edited"), user.id
        )

        record = await repository.get_by_user_id(user.id)
        assert as_utc(record.last_activity) > stale + timedelta(days=44)

    async def test_only_owner_updates_and_deletes(self, db_session, make_user, make_testimony):
        owner, _ = await make_user()
        other, _ = await make_user()
        testimony = await make_testimony(owner.id, is_public=True)
        service = TestimonyService(db_session)

        with pytest.raises(AuthorizationError):
            await service.update_testimony(testimony.id, TestimonyUpdate(title="Mine"), other.id)
        with pytest.raises(AuthorizationError):
            await service.delete_testimony(testimony.id, other.id)

        assert await service.delete_testimony(testimony.id, owner.id) is True
        assert await service.get_testimony(testimony.id) is None
