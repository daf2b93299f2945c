"""Notification repository (tenant-level broadcast messages)."""

from __future__ import annotations

import logging
from typing import Any

from ca_admin.application.dtos.notification import NotificationInput, NotificationResult
from ca_admin.application.dtos.store import StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.enums import NotificationPriority
from ca_admin.domain.exceptions import (
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require

logger = logging.getLogger(__name__)


def to_notification_result(record: StoreRecord) -> NotificationResult:
    d = record.data
    return NotificationResult(
        id=record.id,
        title=d.get("title", ""),
        message=d.get("message", ""),
        priority=d.get("priority", NotificationPriority.MEDIUM.value),
        image_url=d.get("imageUrl"),
        image_path=d.get("imagePath"),
        file_name=d.get("fileName"),
        file_size=d.get("fileSize"),
        file_type=d.get("fileType"),
        created_at=d.get("createdAt"),
    )


def _required_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationException(f"Notification {field} is required", field=field)
    return text


class NotificationRepository:
    """CRUD for a tenant's notifications."""

    def __init__(self, store: IDocumentStore, refs: ReferenceBuilder) -> None:
        self._store = store
        self._refs = refs

    async def create(self, tenant: str, data: NotificationInput) -> NotificationResult:
        _required_text(data.title, "title")
        _required_text(data.message, "message")
        collection = require(self._refs.notifications(tenant))
        notification_id = await self._store.create(collection, data.to_fields())
        logger.info("Created notification %s for %s", notification_id, collection.path)
        result = await self.get(tenant, notification_id)
        if result is None:
            raise ResourceNotFoundException("notification", notification_id)
        return result

    async def get(self, tenant: str, notification_id: str) -> NotificationResult | None:
        doc_ref = require(self._refs.notification(tenant, notification_id), "notification")
        record = await self._store.get(doc_ref)
        return to_notification_result(record) if record else None

    async def list(self, tenant: str) -> list[NotificationResult]:
        """Notifications, newest first."""
        collection = require(self._refs.notifications(tenant))
        records = await self._store.list(collection, order_by="createdAt", descending=True)
        return [to_notification_result(r) for r in records]

    async def update(
        self,
        tenant: str,
        notification_id: str,
        *,
        title: str | None = None,
        message: str | None = None,
        priority: NotificationPriority | None = None,
        image: dict[str, Any] | None = None,
    ) -> NotificationResult:
        """Change the given fields; ``image`` holds imageUrl/imagePath/fileName/... values."""
        fields: dict[str, Any] = {}
        if title is not None:
            fields["title"] = _required_text(title, "title")
        if message is not None:
            fields["message"] = _required_text(message, "message")
        if priority is not None:
            fields["priority"] = NotificationPriority(priority).value
        if image:
            fields.update({k: v for k, v in image.items() if v})
        doc_ref = require(self._refs.notification(tenant, notification_id), "notification")
        try:
            await self._store.update(doc_ref, fields)
        except StoreException as e:
            if e.code == "not-found":
                raise ResourceNotFoundException("notification", notification_id) from e
            raise
        result = await self.get(tenant, notification_id)
        if result is None:
            raise ResourceNotFoundException("notification", notification_id)
        return result

    async def delete(self, tenant: str, notification_id: str) -> None:
        doc_ref = require(self._refs.notification(tenant, notification_id), "notification")
        if await self._store.get(doc_ref) is None:
            raise ResourceNotFoundException("notification", notification_id)
        await self._store.delete(doc_ref)
        logger.info("Deleted notification %s", doc_ref.path)
