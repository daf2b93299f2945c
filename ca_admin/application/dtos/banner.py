"""DTOs for tenant banners (promotional images shown in the client app)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BannerInput:
    """Banner write-model. The image is uploaded by the caller beforehand."""

    name: str
    image_url: str | None = None
    image_path: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    note: str | None = None

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"bannerName": self.name.strip()}
        optional = {
            "imageUrl": self.image_url,
            "imagePath": self.image_path,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "note": self.note,
        }
        fields.update({k: v for k, v in optional.items() if v})
        return fields


@dataclass(frozen=True)
class BannerResult:
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
