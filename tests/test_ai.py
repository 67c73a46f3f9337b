import uuid

from app.domains.subscriptions.services import SubscriptionService
from app.domains.testimonies.entities import Testimony, FrameworkType
from app.infrastructure.ai.providers import format_testimony_content, parse_suggestions, strip_html


class TestSuggestionParsing:
    """Разбор ответа модели"""

    def test_json_array(self):
        text = '[{"text": "Be specific", "explanation": "Details matter"}, "Shorter intro"]'

        assert parse_suggestions(text) == [
            {"text": "Be specific", "explanation": "Details matter"},
            {"text": "Shorter intro"},
        ]

    def test_plain_text_keeps_five_lines(self):
        text = "\n".join(f"  Suggestion {i}  " for i in range(8)) + "\n\n"
        suggestions = parse_suggestions(text)

        assert len(suggestions) == 5
        assert suggestions[0] == {"text": "Suggestion 0"}

    def test_json_object_becomes_single_suggestion(self):
        assert parse_suggestions('{"text": "x"}') == [{"text": '{"text": "x"}'}]

    def test_strip_html(self):
        assert strip_html("<script>alert(1)</script>Hello <b>world</b>") == "alert(1)Hello world"

    def test_format_life_timeline(self):
        testimony = Testimony(
            id=uuid.uuid4(), user_id=uuid.uuid4(), title="Path",
            framework_type=FrameworkType.LIFE_TIMELINE,
            content={"milestones": [{"age": "18", "event": "Left home", "impact": "Searching"}]}
        )
        text = format_testimony_content(testimony)

        assert text.startswith("Title: Path")
        assert "Milestone 1:" in text
        assert "Event: Left home" in text


class TestAiEditRoute:
    async def test_requires_premium(self, client, make_user, make_testimony, ai_provider):
        user, headers = await make_user()
        testimony = await make_testimony(user.id)

        response = await client.post("/api/ai/edit", json={
            "testimony_id": str(testimony.id), "prompt": "Make it warmer"
        }, headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Premium subscription required for AI editing features"}
        assert ai_provider.calls == []

    async def test_returns_suggestions_for_premium(self, client, session_factory, make_user, make_testimony):
        user, headers = await make_user()
        testimony = await make_testimony(user.id)
        async with session_factory() as session:
            await SubscriptionService(session).activate(user.id, "cus_1", "sub_1")

        response = await client.post("/api/ai/edit", json={
            "testimony_id": str(testimony.id), "prompt": "Make it warmer"
        }, headers=headers)

        assert response.status_code == 200
        assert response.json()["suggestions"][0]["text"] == "Describe the moment in more detail"

    async def test_rate_limited_per_user(self, client, session_factory, make_user, make_testimony):
        user, headers = await make_user()
        testimony = await make_testimony(user.id)
        async with session_factory() as session:
            await SubscriptionService(session).activate(user.id, "cus_1", "sub_1")

        body = {"testimony_id": str(testimony.id), "prompt": "Again"}
        statuses = [(await client.post("/api/ai/edit", json=body, headers=headers)).status_code
                    for _ in range(11)]

        assert statuses[:10] == [200] * 10
        assert statuses[10] == 429

    async def test_missing_prompt_is_400(self, client, make_user, make_testimony):
        user, headers = await make_user()
        testimony = await make_testimony(user.id)

        response = await client.post("/api/ai/edit", json={"testimony_id": str(testimony.id)}, headers=headers)

        assert response.status_code == 400
        assert "prompt" in response.json()["fields"]
