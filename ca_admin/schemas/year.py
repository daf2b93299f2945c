"""Year API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class YearCreateRequest(BaseModel):
    """Request body for adding a year: ``2024`` or ``2024-25``."""

    year: str | int = Field(..., description="Start year or fiscal-year label")


class YearResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_count: int
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class YearDeletionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: str
    deleted_documents: int
    errors: list[str]


class ReconcileResponse(BaseModel):
    year: str
    document_count: int


class YearRenameRequest(BaseModel):
    """New year for an existing folder: ``2025`` or ``2025-26``."""

    year: str | int = Field(..., description="Start year or fiscal-year label")


class YearRenameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    old_year: str
    new_year: str
    moved_documents: int
    errors: list[str]
