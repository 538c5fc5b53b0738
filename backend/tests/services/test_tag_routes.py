"""Tag Routes — CRUD and case-insensitive unique names.

Invariants:
    - POST /tags returns 201; a name taken in any casing returns 409
    - Deleting a tag unlinks it from habits but keeps the habits
"""

from uuid import uuid4


async def _create_tag(client, name, description=None) -> dict:
    res = await client.post(
        "/api/v1/tags", json={"name": name, "description": description},
    )
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_and_get_tag(client):
    tag = await _create_tag(client, "  health  ", "Body and mind")
    assert tag["name"] == "health"
    assert tag["created_at_utc"].startswith("2025-01-02T12:00:00")

    res = await client.get(f"/api/v1/tags/{tag['id']}")
    assert res.status_code == 200
    assert res.json()["description"] == "Body and mind"


async def test_list_tags_sorted_by_name(client):
    await _create_tag(client, "work")
    await _create_tag(client, "health")
    res = await client.get("/api/v1/tags")
    assert [t["name"] for t in res.json()["items"]] == ["health", "work"]


async def test_duplicate_name_ignoring_case_returns_409(client):
    await _create_tag(client, "Health")
    res = await client.post("/api/v1/tags", json={"name": "health"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_RESOURCE"


async def test_blank_name_returns_400(client):
    res = await client.post("/api/v1/tags", json={"name": "   "})
    assert res.status_code == 400


async def test_update_tag(client):
    tag = await _create_tag(client, "health")
    res = await client.put(
        f"/api/v1/tags/{tag['id']}", json={"name": "Health", "description": "renamed"},
    )
    assert res.status_code == 204

    fetched = (await client.get(f"/api/v1/tags/{tag['id']}")).json()
    assert fetched["name"] == "Health"
    assert fetched["updated_at_utc"].startswith("2025-01-02T12:00:00")


async def test_update_to_taken_name_returns_409(client):
    await _create_tag(client, "health")
    work = await _create_tag(client, "work")
    res = await client.put(f"/api/v1/tags/{work['id']}", json={"name": "HEALTH"})
    assert res.status_code == 409


async def test_delete_tag_unlinks_habits(client, meditate_habit_payload):
    habit = (await client.post("/api/v1/habits", json=meditate_habit_payload)).json()
    tag = await _create_tag(client, "mind")
    await client.put(f"/api/v1/habits/{habit['id']}/tags", json={"tag_ids": [tag["id"]]})

    res = await client.delete(f"/api/v1/tags/{tag['id']}")
    assert res.status_code == 204

    fetched = await client.get(f"/api/v1/habits/{habit['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["tags"] == []


async def test_unknown_tag_returns_404(client):
    res = await client.get(f"/api/v1/tags/{uuid4()}")
    assert res.status_code == 404
    res = await client.delete(f"/api/v1/tags/{uuid4()}")
    assert res.status_code == 404
