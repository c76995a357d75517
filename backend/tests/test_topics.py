"""API tests for topics: paging, sorting, conflicts, dependency checks, batch writes, copy."""

from datetime import datetime

import pytest
from httpx import AsyncClient


async def _module(client: AsyncClient, headers: dict, name: str = "Firearms") -> int:
    resp = await client.post("/api/v1/modules", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def _topic(client: AsyncClient, headers: dict, module_id: int, name: str, **extra) -> dict:
    resp = await client.post(
        "/api/v1/topics", json={"module_id": module_id, "name": name, **extra}, headers=headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_second_page_of_25(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    for i in range(1, 26):
        await _topic(client, auth_headers, module_id, f"Topic {i:02d}")

    resp = await client.get(
        "/api/v1/topics",
        params={"page": 2, "limit": 10, "sort_by": "display_order", "sort_order": "ASC"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "SUCCESS"
    assert body["pagination"] == {"total": 25, "page": 2, "limit": 10, "total_pages": 3}
    assert [t["display_order"] for t in body["data"]] == list(range(11, 21))
    assert body["data"][0]["sub_topic_count"] == 0


@pytest.mark.asyncio
async def test_garbage_paging_uses_defaults(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    await _topic(client, auth_headers, module_id, "Only")
    resp = await client.get("/api/v1/topics?page=abc&limit=-5", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["pagination"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}


@pytest.mark.asyncio
async def test_empty_list_has_zero_pages(client: AsyncClient, auth_headers: dict):
    resp = await client.get("/api/v1/topics", headers=auth_headers)
    assert resp.json()["pagination"]["total_pages"] == 0
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_huge_page_returns_empty_page(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    await _topic(client, auth_headers, module_id, "Only")
    resp = await client.get(
        "/api/v1/topics", params={"page": "99999999999999999999"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"] == []
    assert resp.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_filters_and_search(client: AsyncClient, auth_headers: dict):
    firearms = await _module(client, auth_headers, "Firearms")
    law = await _module(client, auth_headers, "Law")
    await _topic(client, auth_headers, firearms, "Pistol handling")
    await _topic(client, auth_headers, firearms, "Rifle basics", description="Includes PISTOL drills")
    await _topic(client, auth_headers, law, "Evidence act", is_active=False)

    scoped = await client.get("/api/v1/topics", params={"module_id": firearms}, headers=auth_headers)
    assert scoped.json()["pagination"]["total"] == 2

    inactive = await client.get("/api/v1/topics", params={"is_active": "false"}, headers=auth_headers)
    assert [t["name"] for t in inactive.json()["data"]] == ["Evidence act"]

    found = await client.get("/api/v1/topics/search", params={"q": "pistol"}, headers=auth_headers)
    assert found.status_code == 200
    assert [t["name"] for t in found.json()["data"]] == ["Pistol handling", "Rifle basics"]

    missing_term = await client.get("/api/v1/topics/search", params={"q": "  "}, headers=auth_headers)
    assert missing_term.status_code == 400


@pytest.mark.asyncio
async def test_unknown_sort_field_is_rejected(client: AsyncClient, auth_headers: dict):
    resp = await client.get("/api/v1/topics", params={"sort_by": "secret"}, headers=auth_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["status"] == "ERROR"
    assert "display_order" in body["details"]["allowed"]

    bad_order = await client.get(
        "/api/v1/topics", params={"sort_by": "name", "sort_order": "up"}, headers=auth_headers
    )
    assert bad_order.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_name_in_module_conflicts(client: AsyncClient, auth_headers: dict):
    firearms = await _module(client, auth_headers, "Firearms")
    law = await _module(client, auth_headers, "Law")
    await _topic(client, auth_headers, firearms, "Safety")

    dup = await client.post(
        "/api/v1/topics", json={"module_id": firearms, "name": "Safety"}, headers=auth_headers
    )
    assert dup.status_code == 400
    assert "already exists" in dup.json()["message"]

    elsewhere = await client.post(
        "/api/v1/topics", json={"module_id": law, "name": "Safety"}, headers=auth_headers
    )
    assert elsewhere.status_code == 201

    exists = await client.get(
        "/api/v1/topics/name-exists", params={"name": "Safety", "module_id": firearms}, headers=auth_headers
    )
    assert exists.json()["data"] == {"exists": True}


@pytest.mark.asyncio
async def test_unknown_module_reference_rejected(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/topics", json={"module_id": 999, "name": "X"}, headers=auth_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_validation_errors_use_envelope(client: AsyncClient, auth_headers: dict):
    resp = await client.post("/api/v1/topics", json={"module_id": 1}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["status"] == "ERROR"


@pytest.mark.asyncio
async def test_delete_blocked_by_children(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    topic = await _topic(client, auth_headers, module_id, "Ballistics")
    sub = await client.post(
        "/api/v1/sub-topics", json={"topic_id": topic["id"], "name": "Trajectory"}, headers=auth_headers
    )
    assert sub.status_code == 201

    blocked = await client.delete(f"/api/v1/topics/{topic['id']}", headers=auth_headers)
    assert blocked.status_code == 409
    assert blocked.json()["details"]["sub_topic_count"] == 1

    removed_sub = await client.delete(f"/api/v1/sub-topics/{sub.json()['data']['id']}", headers=auth_headers)
    assert removed_sub.status_code == 200
    removed = await client.delete(f"/api/v1/topics/{topic['id']}", headers=auth_headers)
    assert removed.status_code == 200

    gone = await client.get(f"/api/v1/topics/{topic['id']}", headers=auth_headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_update_and_missing_ids(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    topic = await _topic(client, auth_headers, module_id, "Old name", description="keep me")

    resp = await client.put(
        f"/api/v1/topics/{topic['id']}", json={"name": "New name"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "New name"
    assert resp.json()["data"]["description"] == "keep me"

    assert (await client.put("/api/v1/topics/999", json={"name": "x"}, headers=auth_headers)).status_code == 404
    assert (await client.delete("/api/v1/topics/999", headers=auth_headers)).status_code == 404
    assert (await client.patch("/api/v1/topics/999/activate", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_activate_is_idempotent_but_stamps(client: AsyncClient, auth_headers: dict, admin_user):
    admin_id, _ = admin_user
    module_id = await _module(client, auth_headers)
    topic = await _topic(client, auth_headers, module_id, "Drill")

    first = await client.patch(f"/api/v1/topics/{topic['id']}/activate", headers=auth_headers)
    second = await client.patch(f"/api/v1/topics/{topic['id']}/activate", headers=auth_headers)
    assert first.status_code == second.status_code == 200
    assert second.json()["data"]["is_active"] is True
    assert second.json()["data"]["updated_by"] == admin_id
    assert datetime.fromisoformat(second.json()["data"]["updated_at"]) > datetime.fromisoformat(
        first.json()["data"]["updated_at"]
    )

    off = await client.patch(f"/api/v1/topics/{topic['id']}/deactivate", headers=auth_headers)
    assert off.json()["data"]["is_active"] is False
    active = await client.get("/api/v1/topics/active", headers=auth_headers)
    assert active.json()["data"] == []


@pytest.mark.asyncio
async def test_reorder(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    a = await _topic(client, auth_headers, module_id, "A")
    b = await _topic(client, auth_headers, module_id, "B")

    empty = await client.put("/api/v1/topics/reorder", json={"items": []}, headers=auth_headers)
    assert empty.status_code == 200
    assert empty.json()["data"] == []

    resp = await client.put(
        "/api/v1/topics/reorder",
        json={"items": [{"id": a["id"], "display_order": 2}, {"id": b["id"], "display_order": 1}]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert [t["name"] for t in resp.json()["data"]] == ["B", "A"]


@pytest.mark.asyncio
async def test_reorder_is_all_or_nothing(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    a = await _topic(client, auth_headers, module_id, "A")

    resp = await client.put(
        "/api/v1/topics/reorder",
        json={"items": [{"id": a["id"], "display_order": 7}, {"id": 999, "display_order": 1}]},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["details"]["missing_ids"] == [999]


@pytest.mark.asyncio
async def test_oversized_reorder_batch_rejected(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    a = await _topic(client, auth_headers, module_id, "A")
    items = [{"id": a["id"], "display_order": i} for i in range(501)]
    resp = await client.put("/api/v1/topics/reorder", json={"items": items}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["status"] == "ERROR"

    bulk = await client.put(
        "/api/v1/topics/bulk",
        json={"items": [{"id": a["id"], "is_active": False}] * 501},
        headers=auth_headers,
    )
    assert bulk.status_code == 400
    detail = await client.get(f"/api/v1/topics/{a['id']}", headers=auth_headers)
    assert detail.json()["data"]["is_active"] is True

    unchanged = await client.get(f"/api/v1/topics/{a['id']}", headers=auth_headers)
    assert unchanged.json()["data"]["display_order"] == a["display_order"]

    not_int = await client.put(
        "/api/v1/topics/reorder",
        json={"items": [{"id": a["id"], "display_order": True}]},
        headers=auth_headers,
    )
    assert not_int.status_code == 400


@pytest.mark.asyncio
async def test_bulk_update_conflict_rolls_back(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    a = await _topic(client, auth_headers, module_id, "A")
    b = await _topic(client, auth_headers, module_id, "B")

    ok = await client.put(
        "/api/v1/topics/bulk",
        json={"items": [{"id": a["id"], "description": "first"}, {"id": b["id"], "is_active": False}]},
        headers=auth_headers,
    )
    assert ok.status_code == 200
    assert {t["id"]: t["is_active"] for t in ok.json()["data"]} == {a["id"]: True, b["id"]: False}

    clash = await client.put(
        "/api/v1/topics/bulk",
        json={"items": [{"id": a["id"], "description": "second"}, {"id": b["id"], "name": "A"}]},
        headers=auth_headers,
    )
    assert clash.status_code == 400
    current = await client.get(f"/api/v1/topics/{a['id']}", headers=auth_headers)
    assert current.json()["data"]["description"] == "first"


@pytest.mark.asyncio
async def test_next_display_order_is_scoped(client: AsyncClient, auth_headers: dict):
    firearms = await _module(client, auth_headers, "Firearms")
    law = await _module(client, auth_headers, "Law")
    await _topic(client, auth_headers, firearms, "A", display_order=5)

    resp = await client.get(
        "/api/v1/topics/next-display-order", params={"module_id": firearms}, headers=auth_headers
    )
    assert resp.json()["data"] == {"next_display_order": 6}
    other = await client.get(
        "/api/v1/topics/next-display-order", params={"module_id": law}, headers=auth_headers
    )
    assert other.json()["data"] == {"next_display_order": 1}


@pytest.mark.asyncio
async def test_name_exists_is_scoped(client: AsyncClient, auth_headers: dict):
    firearms = await _module(client, auth_headers, "Firearms")
    law = await _module(client, auth_headers, "Law")
    pistol = await _topic(client, auth_headers, firearms, "Pistol")

    async def check(**params) -> dict:
        resp = await client.get("/api/v1/topics/name-exists", params=params, headers=auth_headers)
        assert resp.status_code == 200
        return resp.json()["data"]

    assert await check(name="Pistol", module_id=firearms) == {"exists": True}
    assert await check(name="Pistol", module_id=law) == {"exists": False}
    assert await check(name="Pistol", module_id=firearms, exclude_id=pistol["id"]) == {"exists": False}


@pytest.mark.asyncio
async def test_statistics_and_usage(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    busy = await _topic(client, auth_headers, module_id, "Busy")
    await _topic(client, auth_headers, module_id, "Idle", is_active=False)
    await client.post(
        "/api/v1/sub-topics", json={"topic_id": busy["id"], "name": "One"}, headers=auth_headers
    )

    resp = await client.get(
        "/api/v1/topics/statistics", params={"module_id": module_id}, headers=auth_headers
    )
    assert resp.status_code == 200
    stats = resp.json()["data"]
    assert (stats["total"], stats["active"], stats["inactive"]) == (2, 1, 1)
    assert stats["with_sub_topics"] == 1
    assert stats["without_sub_topics"] == 1
    assert stats["sub_topic_counts"][0] == {"id": busy["id"], "name": "Busy", "sub_topic_count": 1}

    usage = await client.get("/api/v1/topics/usage", headers=auth_headers)
    counts = {t["name"]: t["sub_topic_count"] for t in usage.json()["data"]}
    assert counts == {"Busy": 1, "Idle": 0}


@pytest.mark.asyncio
async def test_copy_topic_with_children(client: AsyncClient, auth_headers: dict):
    source_module = await _module(client, auth_headers, "Firearms")
    target_module = await _module(client, auth_headers, "Refresher")
    topic = await _topic(client, auth_headers, source_module, "Pistol")
    sub = await client.post(
        "/api/v1/sub-topics", json={"topic_id": topic["id"], "name": "Grip"}, headers=auth_headers
    )
    sub_id = sub.json()["data"]["id"]
    for body in (
        {"topic_id": topic["id"], "question": "Direct?"},
        {"topic_id": topic["id"], "sub_topic_id": sub_id, "question": "Grip?", "options": ["a", "b"]},
    ):
        resp = await client.post("/api/v1/questions", json=body, headers=auth_headers)
        assert resp.status_code == 201, resp.text

    copied = await client.post(
        f"/api/v1/topics/{topic['id']}/copy",
        json={"target_module_id": target_module},
        headers=auth_headers,
    )
    assert copied.status_code == 201
    clone = copied.json()["data"]
    assert clone["name"] == "Pistol (Copy)"
    assert clone["module_id"] == target_module

    tree = await client.get(f"/api/v1/topics/{clone['id']}/hierarchy", headers=auth_headers)
    data = tree.json()["data"]
    assert [st["name"] for st in data["sub_topics"]] == ["Grip"]
    assert data["sub_topics"][0]["id"] != sub_id
    assert [q["name"] for q in data["sub_topics"][0]["questions"]] == ["Grip?"]
    assert [q["name"] for q in data["questions"]] == ["Direct?"]

    missing = await client.post(
        "/api/v1/topics/999/copy", json={"target_module_id": target_module}, headers=auth_headers
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_question_sub_topic_must_belong_to_topic(client: AsyncClient, auth_headers: dict):
    module_id = await _module(client, auth_headers)
    first = await _topic(client, auth_headers, module_id, "First")
    second = await _topic(client, auth_headers, module_id, "Second")
    sub = await client.post(
        "/api/v1/sub-topics", json={"topic_id": first["id"], "name": "Part"}, headers=auth_headers
    )
    resp = await client.post(
        "/api/v1/questions",
        json={"topic_id": second["id"], "sub_topic_id": sub.json()["data"]["id"], "question": "?"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_writes_need_manage_permission(client: AsyncClient, auth_headers: dict, viewer_headers: dict):
    module_id = await _module(client, auth_headers)

    listed = await client.get("/api/v1/topics", headers=viewer_headers)
    assert listed.status_code == 200

    denied = await client.post(
        "/api/v1/topics", json={"module_id": module_id, "name": "Nope"}, headers=viewer_headers
    )
    assert denied.status_code == 403

    anonymous = await client.get("/api/v1/topics")
    assert anonymous.status_code == 401
