"""API tests for the module catalog and its child listings."""

import pytest
from httpx import AsyncClient


async def _create(client: AsyncClient, headers: dict, path: str, body: dict) -> dict:
    resp = await client.post(f"/api/v1/{path}", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_assigns_next_display_order(client: AsyncClient, auth_headers: dict):
    first = await _create(client, auth_headers, "modules", {"name": "Firearms"})
    second = await _create(client, auth_headers, "modules", {"name": "Law", "icon": "gavel"})
    assert (first["display_order"], second["display_order"]) == (1, 2)
    assert second["icon"] == "gavel"
    assert first["created_by"] is not None


@pytest.mark.asyncio
async def test_duplicate_module_name(client: AsyncClient, auth_headers: dict):
    await _create(client, auth_headers, "modules", {"name": "Firearms"})
    resp = await client.post("/api/v1/modules", json={"name": "Firearms"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Module with this name already exists"


@pytest.mark.asyncio
async def test_list_counts_include_childless_modules(client: AsyncClient, auth_headers: dict):
    busy = await _create(client, auth_headers, "modules", {"name": "Busy"})
    await _create(client, auth_headers, "modules", {"name": "Empty"})
    for name in ("One", "Two"):
        await _create(client, auth_headers, "topics", {"module_id": busy["id"], "name": name})

    resp = await client.get("/api/v1/modules", headers=auth_headers)
    counts = {m["name"]: (m["topic_count"], m["permission_count"]) for m in resp.json()["data"]}
    assert counts == {"Busy": (2, 0), "Empty": (0, 0)}


@pytest.mark.asyncio
async def test_module_detail_and_hierarchy(client: AsyncClient, auth_headers: dict):
    module = await _create(client, auth_headers, "modules", {"name": "Firearms"})
    topic = await _create(client, auth_headers, "topics", {"module_id": module["id"], "name": "Pistol"})
    await _create(client, auth_headers, "sub-topics", {"topic_id": topic["id"], "name": "Grip"})

    detail = await client.get(f"/api/v1/modules/{module['id']}", headers=auth_headers)
    assert [t["name"] for t in detail.json()["data"]["topics"]] == ["Pistol"]

    tree = await client.get(f"/api/v1/modules/{module['id']}/hierarchy", headers=auth_headers)
    assert tree.json()["data"]["topics"][0]["sub_topics"][0]["name"] == "Grip"

    missing = await client.get("/api/v1/modules/999/hierarchy", headers=auth_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_module_topics_are_paged(client: AsyncClient, auth_headers: dict):
    module = await _create(client, auth_headers, "modules", {"name": "Firearms"})
    for i in range(3):
        await _create(client, auth_headers, "topics", {"module_id": module["id"], "name": f"T{i}"})

    resp = await client.get(
        f"/api/v1/modules/{module['id']}/topics", params={"limit": 2}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["pagination"] == {"total": 3, "page": 1, "limit": 2, "total_pages": 2}

    assert (await client.get("/api/v1/modules/999/topics", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_delete_module_blocked_by_topics(client: AsyncClient, auth_headers: dict):
    module = await _create(client, auth_headers, "modules", {"name": "Firearms"})
    await _create(client, auth_headers, "topics", {"module_id": module["id"], "name": "Pistol"})

    blocked = await client.delete(f"/api/v1/modules/{module['id']}", headers=auth_headers)
    assert blocked.status_code == 409
    assert blocked.json()["message"] == "Cannot delete module with existing topics"

    empty = await _create(client, auth_headers, "modules", {"name": "Empty"})
    assert (await client.delete(f"/api/v1/modules/{empty['id']}", headers=auth_headers)).status_code == 200


@pytest.mark.asyncio
async def test_module_statistics(client: AsyncClient, auth_headers: dict):
    busy = await _create(client, auth_headers, "modules", {"name": "Busy"})
    await _create(client, auth_headers, "modules", {"name": "Idle", "is_active": False})
    await _create(client, auth_headers, "topics", {"module_id": busy["id"], "name": "T"})
    await _create(
        client,
        auth_headers,
        "permissions",
        {"module_id": busy["id"], "name": "View busy", "code": "busy:view"},
    )

    resp = await client.get("/api/v1/modules/statistics", headers=auth_headers)
    assert resp.status_code == 200
    stats = resp.json()["data"]
    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["with_topics"] == 1
    assert stats["without_permissions"] == 1
    assert [row["name"] for row in stats["topic_counts"]] == ["Busy", "Idle"]


@pytest.mark.asyncio
async def test_dropdown_lists_active_only(client: AsyncClient, auth_headers: dict):
    await _create(client, auth_headers, "modules", {"name": "Shown", "route": "/shown"})
    await _create(client, auth_headers, "modules", {"name": "Hidden", "is_active": False})
    resp = await client.get("/api/v1/modules/dropdown", headers=auth_headers)
    assert [m["name"] for m in resp.json()["data"]] == ["Shown"]
    assert resp.json()["data"][0]["route"] == "/shown"


@pytest.mark.asyncio
async def test_hierarchy_hides_inactive_children(client: AsyncClient, auth_headers: dict):
    module = await _create(client, auth_headers, "modules", {"name": "Firearms"})
    await _create(client, auth_headers, "topics", {"module_id": module["id"], "name": "Live"})
    await _create(
        client, auth_headers, "topics", {"module_id": module["id"], "name": "Retired", "is_active": False}
    )
    await _create(
        client,
        auth_headers,
        "permissions",
        {"module_id": module["id"], "name": "View firearms", "code": "firearms:view"},
    )

    tree = await client.get(f"/api/v1/modules/{module['id']}/hierarchy", headers=auth_headers)
    data = tree.json()["data"]
    assert [t["name"] for t in data["topics"]] == ["Live"]
    assert [p["code"] for p in data["permissions"]] == ["firearms:view"]
