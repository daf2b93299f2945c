"""Client API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ClientCreateRequest(BaseModel):
    """Request body for creating (or re-submitting) a client.

    Contact, PAN and email are sanitized and validated server-side.
    """

    name: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=1, max_length=32)
    pan: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=254)
    firm_id: str | None = Field(default=None, max_length=128)


class ClientUpdateRequest(BaseModel):
    """Request body for a partial client update (contact is the id and cannot change)."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    pan: str | None = Field(default=None, max_length=32)
    email: str | None = Field(default=None, max_length=254)
    firm_id: str | None = Field(default=None, max_length=128)
    is_active: bool | None = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    contact: str
    pan: str
    email: str
    is_active: bool
    years: list[str]
    firm_id: str | None = None
    has_push_token: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CascadeErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    phase: str
    path: str
    message: str


class ClientDeletionResponse(BaseModel):
    """Result of a cascade delete."""

    model_config = ConfigDict(from_attributes=True)

    client_path: str
    deleted_years: int
    deleted_documents: int
    deleted_generic: int
    client_found: bool
    client_deleted: bool
    legacy_checked: bool
    complete: bool
    errors: list[CascadeErrorResponse]


class PushTokenRemovalResponse(BaseModel):
    client_id: str
    removed: bool


class BulkClientRow(BaseModel):
    """One import row. Kept unconstrained so bad rows are reported, not rejected as a whole."""

    name: str = ""
    contact: str = ""
    pan: str | None = None
    email: str | None = None
    firm_id: str | None = None


class BulkClientImportRequest(BaseModel):
    """Rows of a spreadsheet import; each row is validated on its own."""

    clients: list[BulkClientRow] = Field(..., min_length=1, max_length=1000)


class BulkImportFailureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    name: str
    contact: str
    error: str


class BulkImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    imported: list[str]
    failed: list[BulkImportFailureResponse]
