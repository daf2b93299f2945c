"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes use
dependencies from ca_admin.api.v1.dependencies only.
"""

from fastapi import APIRouter

from ca_admin.api.v1.endpoints import (
    banners,
    clients,
    documents,
    health,
    migration,
    notifications,
    years,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(years.router, prefix="/clients", tags=["years"])
api_router.include_router(documents.router, prefix="/clients", tags=["documents"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
api_router.include_router(banners.router, prefix="/banners", tags=["banners"])
api_router.include_router(migration.router, prefix="/migration", tags=["migration"])
