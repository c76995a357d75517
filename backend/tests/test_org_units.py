"""API tests for states, ranges and users."""

import pytest
from httpx import AsyncClient


async def _create(client: AsyncClient, headers: dict, path: str, body: dict) -> dict:
    resp = await client.post(f"/api/v1/{path}", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_state_code_normalised_and_unique(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Karnataka", "code": "ka"})
    assert state["code"] == "KA"
    dup = await client.post("/api/v1/states", json={"name": "Other", "code": "KA"}, headers=auth_headers)
    assert dup.status_code == 400


@pytest.mark.asyncio
async def test_state_delete_blocked_by_ranges(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Kerala"})
    await _create(client, auth_headers, "ranges", {"state_id": state["id"], "name": "North"})

    blocked = await client.delete(f"/api/v1/states/{state['id']}", headers=auth_headers)
    assert blocked.status_code == 409
    assert blocked.json()["message"] == "Cannot delete state with existing ranges"


@pytest.mark.asyncio
async def test_state_ranges_and_statistics(client: AsyncClient, auth_headers: dict):
    kerala = await _create(client, auth_headers, "states", {"name": "Kerala"})
    await _create(client, auth_headers, "states", {"name": "Goa"})
    for name in ("North", "South"):
        await _create(client, auth_headers, "ranges", {"state_id": kerala["id"], "name": name})

    ranges = await client.get(f"/api/v1/states/{kerala['id']}/ranges", headers=auth_headers)
    assert [r["name"] for r in ranges.json()["data"]] == ["North", "South"]

    stats = await client.get("/api/v1/states/statistics", headers=auth_headers)
    data = stats.json()["data"]
    assert data["total"] == 2
    assert data["with_ranges"] == 1
    assert data["range_counts"][0] == {"id": kerala["id"], "name": "Kerala", "range_count": 2}

    listed = await client.get("/api/v1/states", headers=auth_headers)
    assert {s["name"]: s["range_count"] for s in listed.json()["data"]} == {"Goa": 0, "Kerala": 2}


@pytest.mark.asyncio
async def test_range_name_unique_per_state(client: AsyncClient, auth_headers: dict):
    a = await _create(client, auth_headers, "states", {"name": "A"})
    b = await _create(client, auth_headers, "states", {"name": "B"})
    await _create(client, auth_headers, "ranges", {"state_id": a["id"], "name": "Central"})
    await _create(client, auth_headers, "ranges", {"state_id": b["id"], "name": "Central"})
    dup = await client.post(
        "/api/v1/ranges", json={"state_id": a["id"], "name": "Central"}, headers=auth_headers
    )
    assert dup.status_code == 400


@pytest.mark.asyncio
async def test_user_lifecycle(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Kerala"})
    other_state = await _create(client, auth_headers, "states", {"name": "Goa"})
    rng = await _create(client, auth_headers, "ranges", {"state_id": state["id"], "name": "North"})

    user = await _create(
        client,
        auth_headers,
        "users",
        {
            "email": "Officer@Test.com",
            "password": "password123",
            "state_id": state["id"],
            "range_id": rng["id"],
        },
    )
    assert user["email"] == "officer@test.com"
    assert "password_hash" not in user

    dup = await client.post(
        "/api/v1/users", json={"email": "officer@test.com", "password": "password123"}, headers=auth_headers
    )
    assert dup.status_code == 400

    mismatch = await client.put(
        f"/api/v1/users/{user['id']}", json={"state_id": other_state["id"]}, headers=auth_headers
    )
    assert mismatch.status_code == 400

    blocked = await client.delete(f"/api/v1/ranges/{rng['id']}", headers=auth_headers)
    assert blocked.status_code == 409

    detail = await client.get(f"/api/v1/users/{user['id']}", headers=auth_headers)
    assert detail.json()["data"]["range"]["name"] == "North"

    login = await client.post(
        "/api/v1/auth/login", json={"email": "officer@test.com", "password": "password123"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_users_default_to_newest_first(client: AsyncClient, auth_headers: dict):
    await _create(client, auth_headers, "users", {"email": "first@test.com", "password": "password123"})
    await _create(client, auth_headers, "users", {"email": "second@test.com", "password": "password123"})
    resp = await client.get("/api/v1/users", headers=auth_headers)
    emails = [u["email"] for u in resp.json()["data"]]
    assert emails[:2] == ["second@test.com", "first@test.com"]


@pytest.mark.asyncio
async def test_cannot_delete_self(client: AsyncClient, auth_headers: dict, admin_user):
    admin_id, _ = admin_user
    resp = await client.delete(f"/api/v1/users/{admin_id}", headers=auth_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_invalid_email_rejected(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/users", json={"email": "not-an-email", "password": "password123"}, headers=auth_headers
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_districts_under_range(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Kerala"})
    north = await _create(client, auth_headers, "ranges", {"state_id": state["id"], "name": "North"})
    south = await _create(client, auth_headers, "ranges", {"state_id": state["id"], "name": "South"})
    for name in ("Kannur", "Kasaragod"):
        await _create(client, auth_headers, "districts", {"range_id": north["id"], "name": name})
    await _create(client, auth_headers, "districts", {"range_id": south["id"], "name": "Kollam"})

    dup = await client.post(
        "/api/v1/districts", json={"range_id": north["id"], "name": "Kannur"}, headers=auth_headers
    )
    assert dup.status_code == 400
    assert dup.json()["message"] == "District with this name already exists in the range"

    orphan = await client.post(
        "/api/v1/districts", json={"range_id": 999, "name": "Nowhere"}, headers=auth_headers
    )
    assert orphan.status_code == 400

    listed = await client.get(f"/api/v1/ranges/{north['id']}/districts", headers=auth_headers)
    assert [d["name"] for d in listed.json()["data"]] == ["Kannur", "Kasaragod"]
    assert listed.json()["pagination"]["total"] == 2
    missing = await client.get("/api/v1/ranges/999/districts", headers=auth_headers)
    assert missing.status_code == 404

    ranges = await client.get("/api/v1/ranges", params={"state_id": state["id"]}, headers=auth_headers)
    counts = {r["name"]: r["district_count"] for r in ranges.json()["data"]}
    assert counts == {"North": 2, "South": 1}

    detail = await client.get(f"/api/v1/ranges/{north['id']}", headers=auth_headers)
    assert [d["name"] for d in detail.json()["data"]["districts"]] == ["Kannur", "Kasaragod"]


@pytest.mark.asyncio
async def test_range_delete_blocked_by_districts(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Kerala"})
    rng = await _create(client, auth_headers, "ranges", {"state_id": state["id"], "name": "North"})
    district = await _create(client, auth_headers, "districts", {"range_id": rng["id"], "name": "Kannur"})

    blocked = await client.delete(f"/api/v1/ranges/{rng['id']}", headers=auth_headers)
    assert blocked.status_code == 409
    assert blocked.json()["message"] == "Cannot delete range with existing districts"
    assert blocked.json()["details"] == {"district_count": 1}

    assert (await client.delete(f"/api/v1/districts/{district['id']}", headers=auth_headers)).status_code == 200
    assert (await client.delete(f"/api/v1/ranges/{rng['id']}", headers=auth_headers)).status_code == 200


@pytest.mark.asyncio
async def test_bulk_update_not_offered_for_org_units(client: AsyncClient, auth_headers: dict):
    state = await _create(client, auth_headers, "states", {"name": "Kerala"})
    resp = await client.put(
        "/api/v1/states/bulk",
        json={"items": [{"id": state["id"], "is_active": False}]},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    detail = await client.get(f"/api/v1/states/{state['id']}", headers=auth_headers)
    assert detail.json()["data"]["is_active"] is True
