"""DTOs for tenant notifications."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ca_admin.domain.enums import NotificationPriority


@dataclass(frozen=True)
class NotificationInput:
    """Notification write-model; image fields are stored only when present."""

    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    image_url: str | None = None
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "title": self.title,
            "message": self.message,
            "priority": self.priority.value,
        }
        optional = {
            "imageUrl": self.image_url,
            "imagePath": self.image_path,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
        }
        fields.update({k: v for k, v in optional.items() if v})
        return fields


@dataclass(frozen=True)
class NotificationResult:
    """Notification read-model."""

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
