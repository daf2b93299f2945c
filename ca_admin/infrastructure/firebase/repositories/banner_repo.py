"""Banner repository: tenant banners keyed by a slug of their name."""

from __future__ import annotations

import logging
import re

from ca_admin.application.dtos.banner import BannerInput, BannerResult
from ca_admin.application.dtos.store import SERVER_TIMESTAMP, StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from ca_admin.domain.value_objects.paths import DocumentPath
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require

logger = logging.getLogger(__name__)

_NON_KEY_RE = re.compile(r"[^a-zA-Z0-9\s]")
_SPACE_RE = re.compile(r"\s+")


def banner_key(name: str | None) -> str:
    """Document id for a banner name: 'Diwali Offer!' -> 'diwali_offer'."""
    key = _SPACE_RE.sub("_", _NON_KEY_RE.sub("", (name or "").strip())).lower()
    if not key:
        raise ValidationException("Banner name is required", field="name")
    return key


def to_banner_result(record: StoreRecord) -> BannerResult:
    d = record.data
    return BannerResult(
        id=record.id,
        name=d.get("bannerName", record.id),
        image_url=d.get("imageUrl", ""),
        is_active=bool(d.get("isActive", True)),
        image_path=d.get("imagePath"),
        file_name=d.get("fileName"),
        file_size=d.get("fileSize"),
        file_type=d.get("fileType"),
        note=d.get("note"),
        created_at=d.get("createdAt"),
        updated_at=d.get("updatedAt"),
    )


class BannerRepository:
    """CRUD for a tenant's banners.

    The id is derived from the banner name, so names are unique per tenant
    and renaming a banner moves it to a new id.
    """

    def __init__(self, store: IDocumentStore, refs: ReferenceBuilder) -> None:
        self._store = store
        self._refs = refs

    def _ref(self, tenant: str, banner_id: str) -> DocumentPath:
        if "/" in banner_id:
            raise ValidationException("Invalid banner id", field="banner")
        return require(self._refs.banners(tenant)).document(banner_id)

    async def create(self, tenant: str, data: BannerInput) -> BannerResult:
        """Add a banner; an image reference is required.

        Raises:
            ValidationException: Missing name or image.
            ResourceAlreadyExistsException: A banner with the same name exists.
        """
        key = banner_key(data.name)
        if not data.image_url:
            raise ValidationException("Banner image is required", field="image_url")
        doc_ref = self._ref(tenant, key)
        if await self._store.get(doc_ref) is not None:
            raise ResourceAlreadyExistsException("banner", key)
        await self._store.set(
            doc_ref, {**data.to_fields(), "isActive": True, "createdAt": SERVER_TIMESTAMP}
        )
        logger.info("Created banner %s", doc_ref.path)
        return await self._require(tenant, key)

    async def get(self, tenant: str, banner_id: str) -> BannerResult | None:
        record = await self._store.get(self._ref(tenant, banner_id))
        return to_banner_result(record) if record else None

    async def _require(self, tenant: str, banner_id: str) -> BannerResult:
        banner = await self.get(tenant, banner_id)
        if banner is None:
            raise ResourceNotFoundException("banner", banner_id)
        return banner

    async def list(self, tenant: str) -> list[BannerResult]:
        """Banners, newest first."""
        records = await self._store.list(
            require(self._refs.banners(tenant)), order_by="createdAt", descending=True
        )
        return [to_banner_result(r) for r in records]

    async def update(self, tenant: str, banner_id: str, data: BannerInput) -> BannerResult:
        """Replace the banner's name, image and metadata.

        Fields not given keep their stored values. When the name maps to a
        different id, the banner moves there and keeps its ``createdAt``.

        Raises:
            ResourceNotFoundException: Banner does not exist.
            ResourceAlreadyExistsException: The new name belongs to another banner.
        """
        key = banner_key(data.name)
        old_ref = self._ref(tenant, banner_id)
        current = await self._store.get(old_ref)
        if current is None:
            raise ResourceNotFoundException("banner", banner_id)

        if key == banner_id:
            await self._store.set(old_ref, data.to_fields(), merge=True)
            logger.info("Updated banner %s", old_ref.path)
            return await self._require(tenant, key)

        new_ref = self._ref(tenant, key)
        if await self._store.get(new_ref) is not None:
            raise ResourceAlreadyExistsException("banner", key)
        kept = {k: v for k, v in current.data.items() if k != "updatedAt"}
        batch = self._store.batch()
        batch.set(new_ref, {**kept, **data.to_fields()})
        batch.delete(old_ref)
        await batch.commit()
        logger.info("Moved banner %s to %s", old_ref.path, new_ref.path)
        return await self._require(tenant, key)

    async def delete(self, tenant: str, banner_id: str) -> None:
        doc_ref = self._ref(tenant, banner_id)
        if await self._store.get(doc_ref) is None:
            raise ResourceNotFoundException("banner", banner_id)
        await self._store.delete(doc_ref)
        logger.info("Deleted banner %s", doc_ref.path)
