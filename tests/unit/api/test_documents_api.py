"""Tests for /api/documents: permission checks, ownership, soft delete, attribution."""

import pytest

from gc_app.governance.audit_models import AuditAction, SecurityClassification


def actions(sink):
    return [c[0][0].action for c in sink.save.call_args_list]


async def create(async_client, title="Report", **extra):
    r = await async_client.post("/api/documents/", json={"title": title, **extra})
    assert r.status_code == 201, r.text
    return r.json()


async def test_requires_session(async_client, data_client):
    r = await async_client.get("/api/documents/")
    assert r.status_code == 401
    assert r.json()["detail"] == "Authentication required"


async def test_database_not_configured(async_client, login):
    login("u-1", "user")
    r = await async_client.get("/api/documents/")
    assert r.status_code == 503


async def test_create_sets_owner_and_attribution(async_client, login, data_client, audit_sink):
    login("citizen-1", "citizen")
    doc = await create(async_client, security_classification="PROTECTED_A")
    assert doc["owner_id"] == "citizen-1"
    assert doc["created_by"] == "citizen-1"
    assert doc["updated_by"] == "citizen-1"
    assert doc["security_classification"] == SecurityClassification.PROTECTED_A.value

    (entry,) = audit_sink.save.call_args_list
    assert entry[0][0].action == AuditAction.CREATE
    assert entry[0][0].user_id == "citizen-1"


async def test_guest_cannot_create(async_client, login, data_client, audit_sink):
    login("guest-1", "guest")
    r = await async_client.post("/api/documents/", json={"title": "Nope"})
    assert r.status_code == 403
    (entry,) = audit_sink.save.call_args_list
    assert entry[0][0].action == AuditAction.ACCESS_DENIED
    assert entry[0][0].security_classification == SecurityClassification.PROTECTED_A


async def test_bookkeeping_fields_rejected(async_client, login, data_client):
    login("u-1", "user")
    r = await async_client.post("/api/documents/", json={"title": "X", "created_by": "someone"})
    assert r.status_code == 422
    assert r.json()["errors"][0]["field"] == "created_by"


async def test_list_scoped_by_read_permission(async_client, login, data_client):
    login("citizen-1", "citizen")
    mine = await create(async_client, "Mine")
    login("citizen-2", "citizen")
    await create(async_client, "Theirs")

    login("citizen-1", "citizen")
    own = (await async_client.get("/api/documents/")).json()
    assert [d["id"] for d in own] == [mine["id"]]

    login("u-9", "user")
    everything = (await async_client.get("/api/documents/")).json()
    assert len(everything) == 2


async def test_update_requires_ownership_or_write_all(async_client, login, data_client, audit_sink):
    login("citizen-1", "citizen")
    doc = await create(async_client)

    login("citizen-2", "citizen")
    r = await async_client.patch(f"/api/documents/{doc['id']}", json={"title": "Hijack"})
    assert r.status_code == 403
    assert AuditAction.ACCESS_DENIED in actions(audit_sink)

    login("m-1", "manager")
    r = await async_client.patch(f"/api/documents/{doc['id']}", json={"title": "Edited"})
    assert r.status_code == 200
    assert r.json()["title"] == "Edited"
    assert r.json()["created_by"] == "citizen-1"
    assert r.json()["updated_by"] == "m-1"


async def test_soft_delete_hides_document(async_client, login, data_client):
    login("u-1", "user")
    doc = await create(async_client)

    r = await async_client.delete(f"/api/documents/{doc['id']}")
    assert r.status_code == 204
    assert (await async_client.get(f"/api/documents/{doc['id']}")).status_code == 404
    assert (await async_client.get("/api/documents/")).json() == []

    raw = await data_client.base.model("Document").find_unique({"id": doc["id"]})
    assert raw["deleted_at"] is not None
    assert raw["updated_by"] == "u-1"


async def test_citizen_cannot_delete(async_client, login, data_client):
    login("citizen-1", "citizen")
    doc = await create(async_client)
    r = await async_client.delete(f"/api/documents/{doc['id']}")
    assert r.status_code == 403


@pytest.mark.parametrize("method", ["get", "patch", "delete"])
async def test_unknown_document_not_found(async_client, login, data_client, method):
    login("a-1", "admin")
    kwargs = {"json": {"title": "x"}} if method == "patch" else {}
    r = await getattr(async_client, method)("/api/documents/missing", **kwargs)
    assert r.status_code == 404


@pytest.mark.parametrize("field", ["title", "security_classification"])
async def test_update_rejects_null_for_required_fields(async_client, login, data_client, field):
    login("u-1", "user")
    doc = await create(async_client)
    r = await async_client.patch(f"/api/documents/{doc['id']}", json={field: None})
    assert r.status_code == 422
    assert r.json()["errors"] == [{"field": field, "message": "Field cannot be null"}]

    unchanged = (await async_client.get(f"/api/documents/{doc['id']}")).json()
    assert unchanged["title"] == "Report"


async def test_update_allows_clearing_body(async_client, login, data_client):
    login("u-1", "user")
    doc = await create(async_client, body="draft")
    r = await async_client.patch(f"/api/documents/{doc['id']}", json={"body": None})
    assert r.status_code == 200
    assert r.json()["body"] is None
