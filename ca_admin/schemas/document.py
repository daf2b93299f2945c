"""Document API schemas (year documents and generic documents share a shape)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentCreateRequest(BaseModel):
    """Metadata for a file already stored by the caller (blob reference or inline data)."""

    name: str = Field(..., min_length=1, max_length=255)
    file_name: str = Field(..., min_length=1, max_length=255)
    doc_name: str | None = Field(default=None, max_length=255)
    file_url: str | None = None
    file_path: str | None = None
    file_data: str | None = Field(default=None, description="Inline base64 payload")
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = Field(default=None, max_length=255)
    uploaded_by: str | None = Field(default=None, max_length=254)

    @model_validator(mode="after")
    def _requires_payload(self) -> "DocumentCreateRequest":
        if not (self.file_url or self.file_path or self.file_data):
            raise ValueError("One of file_url, file_path or file_data is required")
        return self


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    file_name: str
    year: str | None = None
    doc_name: str | None = None
    file_url: str | None = None
    file_path: str | None = None
    file_data: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    created_at: datetime | None = None
