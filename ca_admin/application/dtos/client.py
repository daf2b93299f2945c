"""DTOs for client, year and document use cases (write-models and read-models)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ClientInput:
    """Raw client submission; repository sanitizes and validates before any I/O."""

    name: str
    contact: str
    pan: str | None = None
    email: str | None = None
    firm_id: str | None = None


@dataclass(frozen=True)
class ClientResult:
    """Client read-model."""

    id: str
    name: str
    contact: str
    pan: str
    email: str
    is_active: bool
    years: list[str] = field(default_factory=list)
    firm_id: str | None = None
    fcm_token: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class YearResult:
    """Year folder read-model."""

    id: str
    document_count: int
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class DocumentInput:
    """Document metadata written after the caller has stored the file.

    Exactly one of file_url/file_data is normally set; both are opaque.
    """

    name: str
    file_name: str
    doc_name: str | None = None
    file_url: str | None = None
    file_path: str | None = None
    file_data: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None

    def to_fields(self) -> dict[str, Any]:
        """Store field names for this input; unset optional fields are omitted."""
        fields: dict[str, Any] = {"name": self.name, "fileName": self.file_name}
        optional = {
            "docName": self.doc_name,
            "fileUrl": self.file_url,
            "filePath": self.file_path,
            "fileData": self.file_data,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "uploadedAt": self.uploaded_at,
            "uploadedBy": self.uploaded_by,
        }
        fields.update({k: v for k, v in optional.items() if v is not None})
        return fields


@dataclass(frozen=True)
class DocumentResult:
    """Document (year-scoped or generic) read-model."""

    id: str
    name: str
    file_name: str
    year: str | None
    doc_name: str | None = None
    file_url: str | None = None
    file_path: str | None = None
    file_data: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class YearDeletionResult:
    """Outcome of deleting one year folder."""

    year: str
    deleted_documents: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PushTarget:
    """Client that can receive push notifications."""

    client_id: str
    token: str


@dataclass(frozen=True)
class TokenFailure:
    """Per-token delivery failure reported by the push layer."""

    client_id: str
    code: str


@dataclass(frozen=True)
class YearRenameResult:
    """Outcome of moving a year folder to a new year id."""

    old_year: str
    new_year: str
    moved_documents: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BulkImportFailure:
    """One rejected row of a bulk client import (row is 1-based)."""

    row: int
    name: str
    contact: str
    error: str


@dataclass(frozen=True)
class BulkImportResult:
    imported: list[str] = field(default_factory=list)
    failed: list[BulkImportFailure] = field(default_factory=list)
