"""Banner API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BannerRequest(BaseModel):
    """Banner name plus a reference to an image the caller already uploaded.

    On update, omitted image fields keep their stored values.
    """

    name: str = Field(..., min_length=1, max_length=100)
    image_url: str | None = None
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = None
    note: str | None = Field(default=None, max_length=500)


class BannerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image_url: str
    is_active: bool
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
