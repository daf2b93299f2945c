"""Notification and push-token maintenance API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ca_admin.domain.enums import NotificationPriority


class NotificationImage(BaseModel):
    """Reference to an image already uploaded by the caller."""

    image_url: str | None = None
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    file_type: str | None = None


class NotificationCreateRequest(NotificationImage):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    priority: NotificationPriority = NotificationPriority.MEDIUM


class NotificationUpdateRequest(NotificationImage):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    message: str | None = Field(default=None, min_length=1, max_length=2000)
    priority: NotificationPriority | None = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    priority: str
    image_url: str | None = None
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    created_at: datetime | None = None


class TokenFailureItem(BaseModel):
    client_id: str = Field(..., min_length=1)
    code: str = Field(..., description="Push API error code, e.g. messaging/invalid-registration-token")


class TokenFailuresRequest(BaseModel):
    """Per-token delivery failures reported after a push fan-out."""

    failures: list[TokenFailureItem]


class TokenPruneResponse(BaseModel):
    removed: list[str]
