"""Client repository: identity-keyed clients with push-token maintenance."""

from __future__ import annotations

import logging
from typing import Any

from ca_admin.application.dtos.cascade import CascadeDeleteResult
from ca_admin.application.dtos.client import (
    BulkImportFailure,
    BulkImportResult,
    ClientInput,
    ClientResult,
    PushTarget,
    TokenFailure,
)
from ca_admin.application.dtos.store import DELETE_FIELD, SERVER_TIMESTAMP, QueryFilter, StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.enums import PushFailureCode
from ca_admin.domain.exceptions import (
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from ca_admin.domain.value_objects import ContactNumber, EmailAddress, PanNumber
from ca_admin.domain.value_objects.core import sort_years_desc
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require
from ca_admin.infrastructure.firebase.services.cascade_delete import CascadeDeleteService

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100


def _clean_name(raw: str | None) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationException("Client name is required", field="name")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationException(
            f"Client name must be at most {NAME_MAX_LENGTH} characters", field="name"
        )
    return name


def to_client_result(record: StoreRecord) -> ClientResult:
    d = record.data
    return ClientResult(
        id=record.id,
        name=d.get("name", ""),
        contact=d.get("contact", record.id),
        pan=d.get("pan", ""),
        email=d.get("email", ""),
        is_active=bool(d.get("isActive", False)),
        years=sort_years_desc(list(d.get("years") or [])),
        firm_id=d.get("firmId"),
        fcm_token=d.get("fcmToken") or None,
        created_at=d.get("createdAt"),
        updated_at=d.get("updatedAt"),
    )


class ClientRepository:
    """Client CRUD keyed by the sanitized contact number."""

    def __init__(
        self,
        store: IDocumentStore,
        refs: ReferenceBuilder,
        cascade: CascadeDeleteService,
    ) -> None:
        self._store = store
        self._refs = refs
        self._cascade = cascade

    async def upsert_client(self, tenant: str, data: ClientInput) -> ClientResult:
        """Create the client or merge into the existing one.

        All fields are validated before any I/O. An existing client keeps
        its ``years`` and is reactivated. A new client first has any
        orphaned subcollections at its id removed.
        """
        return await self._upsert(tenant, data, {})

    async def bulk_upsert(self, tenant: str, rows: list[ClientInput]) -> BulkImportResult:
        """Upsert many clients, one row at a time.

        A rejected row (validation or store failure) is reported with its
        1-based position and never stops the rows after it. Imported
        clients are tagged with ``importedViaBulk``.
        """
        require(self._refs.clients(tenant))
        result = BulkImportResult()
        extra = {"importedViaBulk": True, "importTimestamp": SERVER_TIMESTAMP}
        for row, data in enumerate(rows, start=1):
            try:
                client = await self._upsert(tenant, data, extra)
            except (ValidationException, StoreException) as e:
                logger.warning("Bulk import row %s (%s) rejected: %s", row, data.name, e.message)
                result.failed.append(
                    BulkImportFailure(row=row, name=data.name, contact=data.contact, error=e.message)
                )
                continue
            result.imported.append(client.id)
        logger.info(
            "Bulk import for %s: %s imported, %s failed", tenant, len(result.imported), len(result.failed)
        )
        return result

    async def _upsert(self, tenant: str, data: ClientInput, extra: dict[str, Any]) -> ClientResult:
        name = _clean_name(data.name)
        contact = ContactNumber.parse(data.contact).value
        pan = PanNumber.parse(data.pan).value
        email = EmailAddress.parse(data.email).value
        client_ref = require(self._refs.client(tenant, contact))

        fields: dict[str, Any] = {
            "name": name,
            "contact": contact,
            "pan": pan,
            "email": email,
            "isActive": True,
        }
        if data.firm_id is not None:
            fields["firmId"] = data.firm_id
        fields.update(extra)

        if await self._store.get(client_ref) is not None:
            await self._store.set(client_ref, fields, merge=True)
            logger.info("Updated client %s", client_ref.path)
        else:
            orphans = await self._cascade.purge_client_subtree(client_ref)
            if orphans.deleted_years or orphans.deleted_documents or orphans.deleted_generic:
                logger.warning(
                    "Removed orphaned data at %s: %s years, %s documents, %s generic documents",
                    client_ref.path,
                    orphans.deleted_years,
                    orphans.deleted_documents,
                    orphans.deleted_generic,
                )
            await self._store.set(
                client_ref,
                {**fields, "years": [], "createdAt": SERVER_TIMESTAMP},
                merge=False,
            )
            logger.info("Created client %s", client_ref.path)

        record = await self._store.get(client_ref)
        if record is None:
            raise ResourceNotFoundException("client", contact)
        return to_client_result(record)

    async def get_client(self, tenant: str, contact: str) -> ClientResult | None:
        record = await self._store.get(require(self._refs.client(tenant, contact), "contact"))
        return to_client_result(record) if record else None

    async def list_clients(self, tenant: str, active_only: bool = False) -> list[ClientResult]:
        """Return clients sorted by name (case-insensitive)."""
        filters = [QueryFilter("isActive", "==", True)] if active_only else None
        records = await self._store.list(require(self._refs.clients(tenant)), filters)
        clients = [to_client_result(r) for r in records]
        return sorted(clients, key=lambda c: (c.name.casefold(), c.id))

    async def _update(self, tenant: str, contact: str, fields: dict[str, Any]) -> ClientResult:
        client_ref = require(self._refs.client(tenant, contact), "contact")
        try:
            await self._store.update(client_ref, fields)
        except StoreException as e:
            if e.code == "not-found":
                raise ResourceNotFoundException("client", contact) from e
            raise
        record = await self._store.get(client_ref)
        if record is None:
            raise ResourceNotFoundException("client", contact)
        return to_client_result(record)

    async def update_client(
        self,
        tenant: str,
        contact: str,
        *,
        name: str | None = None,
        pan: str | None = None,
        email: str | None = None,
        firm_id: str | None = None,
    ) -> ClientResult:
        """Change only the given fields; the contact (client id) cannot change."""
        fields: dict[str, Any] = {}
        if name is not None:
            fields["name"] = _clean_name(name)
        if pan is not None:
            fields["pan"] = PanNumber.parse(pan).value
        if email is not None:
            fields["email"] = EmailAddress.parse(email).value
        if firm_id is not None:
            fields["firmId"] = firm_id
        return await self._update(tenant, contact, fields)

    async def set_active(self, tenant: str, contact: str, active: bool) -> ClientResult:
        return await self._update(tenant, contact, {"isActive": active})

    async def delete_client(self, tenant: str, contact: str) -> CascadeDeleteResult:
        return await self._cascade.delete_client(tenant, contact)

    async def remove_token(self, tenant: str, contact: str) -> bool:
        """Delete the client's push token. False when the client does not exist."""
        client_ref = require(self._refs.client(tenant, contact), "contact")
        try:
            await self._store.update(client_ref, {"fcmToken": DELETE_FIELD})
        except StoreException as e:
            if e.code == "not-found":
                return False
            raise
        logger.info("Removed push token for %s", client_ref.path)
        return True

    async def list_push_targets(self, tenant: str) -> list[PushTarget]:
        """Active clients that have a push token."""
        records = await self._store.list(
            require(self._refs.clients(tenant)), [QueryFilter("isActive", "==", True)]
        )
        return [
            PushTarget(client_id=r.id, token=r.data["fcmToken"])
            for r in records
            if r.data.get("fcmToken")
        ]

    async def prune_stale_tokens(self, tenant: str, failures: list[TokenFailure]) -> list[str]:
        """Remove tokens whose delivery failed as unregistered or invalid.

        Other failure codes are transient and leave the token in place.
        Returns the ids of clients whose token was removed.
        """
        removed: list[str] = []
        for failure in failures:
            if not PushFailureCode.is_stale(failure.code):
                continue
            try:
                if await self.remove_token(tenant, failure.client_id):
                    removed.append(failure.client_id)
            except StoreException as e:
                logger.warning(
                    "Failed to remove stale token for client %s: %s", failure.client_id, e.message
                )
        return removed
