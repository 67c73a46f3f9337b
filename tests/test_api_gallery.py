import uuid


class TestGalleryRoutes:
    """Публичная галерея"""

    async def test_publish_list_unpublish(self, client, make_user, make_testimony):
        owner, headers = await make_user()
        testimony = await make_testimony(owner.id, title="Shared Hope", content={"narrative": "Light broke in."})

        published = await client.post("/api/gallery/publish", json={
            "testimony_id": str(testimony.id), "display_name": "Anna"
        }, headers=headers)

        assert published.status_code == 201
        entry = published.json()
        assert entry["testimony_id"] == str(testimony.id)
        assert entry["display_name"] == "Anna"

        detail = await client.get(f"/api/testimonies/{testimony.id}")
        assert detail.json()["is_public"] is True

        gallery = (await client.get("/api/gallery")).json()
        assert len(gallery) == 1
        assert gallery[0]["display_name"] == "Anna"
        assert gallery[0]["testimony"]["title"] == "Shared Hope"
        assert gallery[0]["excerpt"] == "Light broke in."

        removed = await client.delete(f"/api/gallery/{entry['id']}", headers=headers)
        assert removed.status_code == 204
        assert (await client.get("/api/gallery")).json() == []
        assert (await client.get(f"/api/testimonies/{testimony.id}")).status_code == 403

    async def test_publish_twice_conflicts(self, client, make_user, make_testimony):
        owner, headers = await make_user()
        testimony = await make_testimony(owner.id)
        body = {"testimony_id": str(testimony.id)}

        assert (await client.post("/api/gallery/publish", json=body, headers=headers)).status_code == 201
        second = await client.post("/api/gallery/publish", json=body, headers=headers)

        assert second.status_code == 409
        assert second.json() == {"error": "Testimony is already published to the gallery"}

    async def test_publish_foreign_testimony_forbidden(self, client, make_user, make_testimony):
        owner, _ = await make_user()
        _, headers = await make_user()
        testimony = await make_testimony(owner.id, is_public=True)

        response = await client.post(
            "/api/gallery/publish", json={"testimony_id": str(testimony.id)}, headers=headers
        )

        assert response.status_code == 403

    async def test_unpublish_rules(self, client, make_user, make_testimony):
        owner, owner_headers = await make_user()
        _, other_headers = await make_user()
        testimony = await make_testimony(owner.id)
        entry = (await client.post(
            "/api/gallery/publish", json={"testimony_id": str(testimony.id)}, headers=owner_headers
        )).json()

        assert (await client.delete(f"/api/gallery/{entry['id']}", headers=other_headers)).status_code == 403
        assert (await client.delete(f"/api/gallery/{uuid.uuid4()}", headers=owner_headers)).status_code == 404

    async def test_pagination(self, client, make_user, make_testimony):
        owner, headers = await make_user()
        for i in range(3):
            testimony = await make_testimony(owner.id, title=f"Story {i}")
            await client.post("/api/gallery/publish", json={"testimony_id": str(testimony.id)}, headers=headers)

        first_page = (await client.get("/api/gallery", params={"page": 1, "limit": 2})).json()
        second_page = (await client.get("/api/gallery", params={"page": 2, "limit": 2})).json()

        assert len(first_page) == 2
        assert len(second_page) == 1
        assert (await client.get("/api/gallery", params={"page": 0})).status_code == 400
