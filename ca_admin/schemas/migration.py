"""Migration API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class MigrationRunRequest(BaseModel):
    """Tenants to migrate, as raw emails or safe ids."""

    tenants: list[str] = Field(..., min_length=1)


class MigrationLogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: str
    level: str
    message: str
    error: str | None = None


class TenantMigrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant: str
    success: bool
    operation_count: int
    commits: int
    error: str | None = None


class MigrationSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    success_count: int
    failure_count: int
    results: list[TenantMigrationResponse]
    log: list[MigrationLogEntryResponse]
    errors: list[MigrationLogEntryResponse]


class TenantVerificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant: str
    profile: bool
    clients: int
    years: int
    documents: int
    generic_documents: int
    banners: int
    admin: int
    error: str | None = None
