"""End-to-end tests for the audit log and users endpoints."""

import pytest

from orgforms.domain.entities import Document


def _auth(name: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {name}-token"}


@pytest.mark.asyncio
async def test_mutations_are_audited_and_listed(client):
    created = await client.post("/api/v1/forms", json={"name": "Audit me"}, headers=_auth("operator"))
    form_id = created.json()["id"]
    await client.get(f"/api/v1/forms/{form_id}", headers=_auth("operator"))

    response = await client.get("/api/v1/logs", headers=_auth("admin"))
    assert response.status_code == 200
    entries = response.json()["data"]
    # Views are recorded but the listing only shows POST/PUT/DELETE.
    assert [(e["action"], e["method"]) for e in entries] == [("create", "POST")]
    entry = entries[0]
    assert entry["resourceType"] == "forms"
    assert entry["resourceId"] == form_id
    assert entry["actor"] == {"id": "op-1", "email": "op@example.com", "role": "Operator", "org": ["A"]}
    assert entry["timestamp"]


@pytest.mark.asyncio
async def test_manager_sees_only_logs_of_its_orgs(client):
    await client.post("/api/v1/forms", json={"name": "A form"}, headers=_auth("operator"))
    await client.post("/api/v1/forms", json={"name": "C form"}, headers=_auth("manager-c"))

    response = await client.get("/api/v1/logs", headers=_auth("manager"))
    assert [e["actor"]["id"] for e in response.json()["data"]] == ["op-1"]


@pytest.mark.asyncio
async def test_logs_limit(client):
    for name in ("one", "two", "three"):
        await client.post("/api/v1/forms", json={"name": name}, headers=_auth("operator"))
    response = await client.get("/api/v1/logs", params={"limit": 2}, headers=_auth("admin"))
    assert len(response.json()["data"]) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("who", ["operator", "user"])
async def test_logs_forbidden_for_other_roles(client, who):
    response = await client.get("/api/v1/logs", headers=_auth(who))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_users_me(client):
    response = await client.get("/api/v1/users/me", headers=_auth("manager"))
    assert response.status_code == 200
    assert response.json()["user"] == {
        "id": "mgr-1",
        "email": "mgr@example.com",
        "role": "Manager",
        "orgs": ["A", "B"],
    }


@pytest.mark.asyncio
async def test_users_list_is_org_scoped_for_managers(client, document_store):
    await document_store.create(Document("users", {"name": "Ana", "org": ["A"]}, id="u1"))
    await document_store.create(Document("users", {"name": "Cy", "org": "C"}, id="u3"))

    manager = await client.get("/api/v1/users", headers=_auth("manager"))
    admin = await client.get("/api/v1/users", headers=_auth("admin"))
    operator = await client.get("/api/v1/users", headers=_auth("operator"))

    assert [u["id"] for u in manager.json()["data"]] == ["u1"]
    assert len(admin.json()["data"]) == 2
    assert operator.status_code == 403


@pytest.mark.asyncio
async def test_register_then_list_then_delete_user(client):
    registered = await client.post(
        "/api/v1/users/register",
        json={"uid": "uid-7", "name": "Eve", "email": "eve@example.com", "role": "User", "org": "A"},
        headers=_auth("manager"),
    )
    assert registered.status_code == 201
    assert registered.json()["uid"] == "uid-7"
    assert registered.json()["user"]["org"] == ["A"]

    listed = await client.get("/api/v1/users", headers=_auth("manager"))
    assert [u["id"] for u in listed.json()["data"]] == ["uid-7"]

    by_manager = await client.delete("/api/v1/users/uid-7", headers=_auth("manager"))
    by_admin = await client.delete("/api/v1/users/uid-7", headers=_auth("admin"))
    again = await client.delete("/api/v1/users/uid-7", headers=_auth("admin"))
    assert (by_manager.status_code, by_admin.status_code, again.status_code) == (403, 204, 404)

    logs = (await client.get("/api/v1/logs", headers=_auth("admin"))).json()["data"]
    assert [(e["action"], e["resourceType"], e["resourceId"]) for e in logs] == [
        ("delete", "users", "uid-7"),
        ("create", "users", "uid-7"),
    ]
    assert logs[0]["metadata"]["initiator"] == "admin@example.com"


@pytest.mark.asyncio
async def test_register_validation_and_role_limits(client):
    body = {"name": "Fay", "email": "fay@example.com", "role": "Admin", "org": ["A"]}
    escalated = await client.post("/api/v1/users/register", json=body, headers=_auth("manager"))
    operator = await client.post(
        "/api/v1/users/register", json={**body, "role": "User"}, headers=_auth("operator"),
    )
    missing_name = await client.post(
        "/api/v1/users/register", json={**body, "name": ""}, headers=_auth("admin"),
    )
    unknown_role = await client.post(
        "/api/v1/users/register", json={**body, "role": "Owner"}, headers=_auth("admin"),
    )
    assert escalated.status_code == 403
    assert operator.status_code == 403
    assert missing_name.status_code == 422
    assert unknown_role.status_code == 400
