"""Tests for notification, token-failure and migration endpoints."""

from httpx import AsyncClient

from tests.fakes import seed_legacy_tenant


async def test_notification_crud(client: AsyncClient, tenant_headers) -> None:
    created = await client.post(
        "/api/v1/notifications",
        json={"title": "Filing due", "message": "File by 31 July", "priority": "high"},
        headers=tenant_headers,
    )
    assert created.status_code == 201
    notification_id = created.json()["id"]
    assert created.json()["priority"] == "high"

    patched = await client.patch(
        f"/api/v1/notifications/{notification_id}",
        json={"message": "File by 15 September", "image_url": "https://img/a.png"},
        headers=tenant_headers,
    )
    assert patched.json()["message"] == "File by 15 September"
    assert patched.json()["image_url"] == "https://img/a.png"

    listed = await client.get("/api/v1/notifications", headers=tenant_headers)
    assert [n["id"] for n in listed.json()] == [notification_id]

    deleted = await client.delete(f"/api/v1/notifications/{notification_id}", headers=tenant_headers)
    assert deleted.status_code == 204
    assert (await client.get("/api/v1/notifications", headers=tenant_headers)).json() == []


async def test_invalid_priority_returns_422(client: AsyncClient, tenant_headers) -> None:
    response = await client.post(
        "/api/v1/notifications",
        json={"title": "t", "message": "m", "priority": "urgent"},
        headers=tenant_headers,
    )
    assert response.status_code == 422


async def test_token_failures_prune_only_stale_tokens(
    client: AsyncClient, tenant_headers, store, refs
) -> None:
    for contact in ("9876543210", "9000000001"):
        await client.post(
            "/api/v1/clients", json={"name": "C", "contact": contact}, headers=tenant_headers
        )
        await store.update(refs.client("a.b@x.com", contact), {"fcmToken": f"tok-{contact}"})

    response = await client.post(
        "/api/v1/notifications/token-failures",
        json={
            "failures": [
                {"client_id": "9876543210", "code": "messaging/invalid-registration-token"},
                {"client_id": "9000000001", "code": "messaging/server-unavailable"},
            ]
        },
        headers=tenant_headers,
    )

    assert response.json() == {"removed": ["9876543210"]}
    kept = await client.get("/api/v1/clients/9000000001", headers=tenant_headers)
    assert kept.json()["has_push_token"] is True


async def test_run_migration_and_verify(client: AsyncClient, store) -> None:
    await seed_legacy_tenant(store, "a_b@x_com")

    response = await client.post("/api/v1/migration/run", json={"tenants": ["a.b@x.com"]})

    assert response.status_code == 200
    summary = response.json()
    assert summary["success"] is True
    assert summary["success_count"] == 1
    assert summary["results"][0]["operation_count"] == 13
    assert summary["errors"] == []

    verified = await client.get("/api/v1/migration/verify/a_b@x_com")
    assert verified.json()["clients"] == 2
    assert verified.json()["documents"] == 3


async def test_run_migration_requires_tenants(client: AsyncClient) -> None:
    response = await client.post("/api/v1/migration/run", json={"tenants": []})
    assert response.status_code == 422
