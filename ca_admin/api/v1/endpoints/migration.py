"""Migration API: run the legacy-layout migration and verify its result."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ca_admin.api.v1.dependencies import get_migration_service
from ca_admin.infrastructure.firebase.services import MigrationService
from ca_admin.schemas.migration import (
    MigrationRunRequest,
    MigrationSummaryResponse,
    TenantVerificationResponse,
)

router = APIRouter()

MigrationDep = Annotated[MigrationService, Depends(get_migration_service)]


@router.post("/run", response_model=MigrationSummaryResponse)
async def run_migration(body: MigrationRunRequest, migration: MigrationDep):
    """Migrate each tenant; failures are reported per tenant, never raised."""
    summary = await migration.migrate_all(body.tenants)
    return MigrationSummaryResponse.model_validate(summary)


@router.get("/verify/{tenant}", response_model=TenantVerificationResponse)
async def verify_tenant(tenant: str, migration: MigrationDep):
    return TenantVerificationResponse.model_validate(await migration.verify_tenant(tenant))
