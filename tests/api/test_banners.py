"""Tests for banner endpoints."""

from httpx import AsyncClient

BANNER = {"name": "Tax Season 2025", "image_url": "https://img/tax.png", "file_type": "image/png"}


async def test_banner_lifecycle(client: AsyncClient, tenant_headers) -> None:
    created = await client.post("/api/v1/banners", json=BANNER, headers=tenant_headers)
    assert created.status_code == 201
    assert created.json()["id"] == "tax_season_2025"

    duplicate = await client.post("/api/v1/banners", json=BANNER, headers=tenant_headers)
    assert duplicate.status_code == 409

    renamed = await client.put(
        "/api/v1/banners/tax_season_2025",
        json={"name": "Filing Reminder"},
        headers=tenant_headers,
    )
    assert renamed.status_code == 200
    assert renamed.json()["id"] == "filing_reminder"
    assert renamed.json()["image_url"] == "https://img/tax.png"

    listed = await client.get("/api/v1/banners", headers=tenant_headers)
    assert [b["id"] for b in listed.json()] == ["filing_reminder"]
    gone = await client.get("/api/v1/banners/tax_season_2025", headers=tenant_headers)
    assert gone.status_code == 404

    deleted = await client.delete("/api/v1/banners/filing_reminder", headers=tenant_headers)
    assert deleted.status_code == 204


async def test_banner_without_image_returns_400(client: AsyncClient, tenant_headers) -> None:
    response = await client.post("/api/v1/banners", json={"name": "Promo"}, headers=tenant_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
