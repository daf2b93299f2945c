"""Tests for client endpoints."""

from httpx import AsyncClient

CLIENT = {"name": "Asha", "contact": "98765 43210", "pan": "abcde1234f", "email": "asha@x.com"}


async def test_missing_tenant_header_returns_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/clients")
    assert response.status_code == 400
    assert response.json()["error"] == "HTTP_ERROR"
    assert "X-Tenant-Email" in response.json()["message"]


async def test_invalid_tenant_header_returns_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/clients", headers={"X-Tenant-Email": "a/b@x.com"})
    assert response.status_code == 400


async def test_create_and_get_client(client: AsyncClient, tenant_headers) -> None:
    response = await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "9876543210"
    assert data["pan"] == "ABCDE1234F"
    assert data["is_active"] is True
    assert data["has_push_token"] is False

    fetched = await client.get("/api/v1/clients/9876543210", headers=tenant_headers)
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Asha"


async def test_resubmit_updates_same_client(client: AsyncClient, tenant_headers) -> None:
    await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    await client.post("/api/v1/clients/9876543210/years", json={"year": 2024}, headers=tenant_headers)
    response = await client.post(
        "/api/v1/clients", json={**CLIENT, "name": "Asha K"}, headers=tenant_headers
    )
    assert response.json()["years"] == ["2024-25"]
    listed = await client.get("/api/v1/clients", headers=tenant_headers)
    assert [c["name"] for c in listed.json()] == ["Asha K"]


async def test_invalid_contact_returns_validation_error(client: AsyncClient, tenant_headers) -> None:
    response = await client.post(
        "/api/v1/clients", json={**CLIENT, "contact": "12345"}, headers=tenant_headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert body["details"] == {"field": "contact"}


async def test_missing_name_returns_422(client: AsyncClient, tenant_headers) -> None:
    response = await client.post(
        "/api/v1/clients", json={"contact": "9876543210"}, headers=tenant_headers
    )
    assert response.status_code == 422


async def test_unknown_client_returns_404(client: AsyncClient, tenant_headers) -> None:
    response = await client.get("/api/v1/clients/9000000009", headers=tenant_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_patch_client_and_active_filter(client: AsyncClient, tenant_headers) -> None:
    await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    response = await client.patch(
        "/api/v1/clients/9876543210",
        json={"email": "new@x.com", "is_active": False},
        headers=tenant_headers,
    )
    assert response.status_code == 200
    assert response.json()["email"] == "new@x.com"
    assert response.json()["is_active"] is False

    active = await client.get("/api/v1/clients", params={"active_only": True}, headers=tenant_headers)
    assert active.json() == []


async def test_tenants_are_isolated(client: AsyncClient, tenant_headers) -> None:
    await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    other = await client.get("/api/v1/clients", headers={"X-Tenant-Email": "other@x.com"})
    assert other.json() == []


async def test_delete_client_cascades(client: AsyncClient, tenant_headers, store) -> None:
    await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    await client.post("/api/v1/clients/9876543210/years", json={"year": "2024-25"}, headers=tenant_headers)
    await client.post(
        "/api/v1/clients/9876543210/years/2024-25/documents",
        json={"name": "ITR", "file_name": "itr.pdf", "file_url": "https://files/itr.pdf"},
        headers=tenant_headers,
    )

    response = await client.delete("/api/v1/clients/9876543210", headers=tenant_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["complete"] is True
    assert (data["deleted_years"], data["deleted_documents"]) == (1, 1)
    assert store.paths() == []


async def test_remove_push_token(client: AsyncClient, tenant_headers, store, refs) -> None:
    await client.post("/api/v1/clients", json=CLIENT, headers=tenant_headers)
    await store.update(refs.client("a.b@x.com", "9876543210"), {"fcmToken": "tok"})
    assert (await client.get("/api/v1/clients/9876543210", headers=tenant_headers)).json()[
        "has_push_token"
    ] is True

    response = await client.delete("/api/v1/clients/9876543210/push-token", headers=tenant_headers)

    assert response.json() == {"client_id": "9876543210", "removed": True}
    missing = await client.delete("/api/v1/clients/9000000009/push-token", headers=tenant_headers)
    assert missing.status_code == 404


async def test_bulk_import_reports_rows(client: AsyncClient, tenant_headers) -> None:
    response = await client.post(
        "/api/v1/clients/bulk",
        json={"clients": [CLIENT, {"name": "Ravi", "contact": "123"}, {"contact": "9123456780"}]},
        headers=tenant_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == ["9876543210"]
    assert [(f["row"], f["contact"]) for f in body["failed"]] == [(2, "123"), (3, "9123456780")]
    listed = await client.get("/api/v1/clients", headers=tenant_headers)
    assert [c["id"] for c in listed.json()] == ["9876543210"]
