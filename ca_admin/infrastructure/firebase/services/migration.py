"""Migration from the legacy flat layout into the tenant hierarchy.

Legacy data lives at ``{tenantId}/user/{clients|banners|admin}/...``; each
record is rewritten at the same relative position under
``{tenant_root}/{tenantId}/...`` with its id preserved and tagged with
``migratedAt`` / ``migratedFrom``. Writes go through a bounded batch that
commits whenever it reaches the store's per-commit ceiling.

Failure isolation:
    - a sub-collection that cannot be read is logged and skipped;
    - a commit that still fails after retries fails the tenant;
    - a failed tenant never stops the remaining tenants.
"""

from __future__ import annotations

import logging
from typing import Any

from ca_admin.application.dtos.migration import (
    MigrationLogEntry,
    MigrationSummary,
    TenantMigrationResult,
    TenantVerification,
)
from ca_admin.application.dtos.store import SERVER_TIMESTAMP, StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore, IWriteBatch
from ca_admin.core.config import FIRESTORE_BATCH_LIMIT
from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase.collections import (
    COLLECTION_ADMIN,
    COLLECTION_BANNERS,
    COLLECTION_CLIENTS,
    COLLECTION_UPLOADED_IMAGES,
)
from ca_admin.infrastructure.firebase.paths import email_from_tenant_id, normalize_tenant
from ca_admin.infrastructure.firebase.references import (
    ReferenceBuilder,
    admin_images,
    client_generic_documents,
    client_years,
    year_documents,
)
from ca_admin.shared.utils.datetime import iso_utc_now

logger = logging.getLogger(__name__)


class BoundedBatch:
    """Write batch that commits itself before exceeding ``limit`` operations.

    Each commit is retried up to ``attempts`` times; the last StoreException
    propagates when every attempt fails.
    """

    def __init__(self, store: IDocumentStore, limit: int = FIRESTORE_BATCH_LIMIT, attempts: int = 3) -> None:
        if not 1 <= limit <= FIRESTORE_BATCH_LIMIT:
            raise ValueError(f"Batch limit must be between 1 and {FIRESTORE_BATCH_LIMIT}")
        self._store = store
        self._limit = limit
        self._attempts = max(1, attempts)
        self._batch: IWriteBatch = store.batch()
        self.operation_count = 0
        self.commits = 0

    async def set(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        if len(self._batch) >= self._limit:
            await self.flush()
        self._batch.set(doc, data)
        self.operation_count += 1

    async def flush(self) -> None:
        """Commit staged writes (no-op when empty)."""
        if len(self._batch) == 0:
            return
        for attempt in range(1, self._attempts + 1):
            try:
                await self._batch.commit()
                break
            except StoreException as e:
                if attempt == self._attempts:
                    raise
                logger.warning(
                    "Batch commit attempt %s/%s failed (%s operations): %s",
                    attempt,
                    self._attempts,
                    len(self._batch),
                    e.message,
                )
        self.commits += 1
        self._batch = self._store.batch()


class MigrationService:
    """Moves tenants from the flat layout to the hierarchy and verifies the result."""

    def __init__(
        self,
        store: IDocumentStore,
        refs: ReferenceBuilder,
        *,
        batch_limit: int = FIRESTORE_BATCH_LIMIT,
        commit_attempts: int = 3,
    ) -> None:
        self._store = store
        self._refs = refs
        self._batch_limit = batch_limit
        self._commit_attempts = commit_attempts
        self.log: list[MigrationLogEntry] = []
        self.errors: list[MigrationLogEntry] = []

    # Logging

    def _info(self, message: str) -> None:
        self.log.append(MigrationLogEntry(iso_utc_now(), "info", message))
        logger.info("[migration] %s", message)

    def _error(self, message: str, error: Exception) -> None:
        detail = getattr(error, "message", None) or str(error)
        entry = MigrationLogEntry(iso_utc_now(), "error", message, detail)
        self.log.append(entry)
        self.errors.append(entry)
        logger.error("[migration] %s: %s", message, detail)

    # Reads

    async def _read(self, collection: CollectionPath) -> list[StoreRecord]:
        try:
            return await self._store.list(collection)
        except StoreException as e:
            self._error(f"Failed to read {collection.path}", e)
            return []

    def _target(self, tenant_id: str, source: DocumentPath) -> DocumentPath:
        """Same relative position under the canonical tenant root."""
        return DocumentPath((self._refs.tenant_root, tenant_id, *source.segments[2:]))

    async def _copy(self, batch: BoundedBatch, tenant_id: str, record: StoreRecord) -> None:
        data = {
            **record.data,
            "migratedAt": SERVER_TIMESTAMP,
            "migratedFrom": record.path.path,
        }
        await batch.set(self._target(tenant_id, record.path), data)

    async def _copy_all(self, batch: BoundedBatch, tenant_id: str, collection: CollectionPath) -> list[StoreRecord]:
        records = await self._read(collection)
        for record in records:
            await self._copy(batch, tenant_id, record)
        return records

    # Migration

    async def _migrate_clients(self, batch: BoundedBatch, tenant_id: str) -> int:
        source = self._refs.legacy_source(tenant_id, COLLECTION_CLIENTS)
        clients = await self._copy_all(batch, tenant_id, source)
        for client in clients:
            years = await self._copy_all(batch, tenant_id, client_years(client.path))
            for year in years:
                await self._copy_all(batch, tenant_id, year_documents(year.path))
            await self._copy_all(batch, tenant_id, client_generic_documents(client.path))
        self._info(f"Migrated {len(clients)} clients for {tenant_id}")
        return len(clients)

    async def _migrate_banners(self, batch: BoundedBatch, tenant_id: str) -> int:
        source = self._refs.legacy_source(tenant_id, COLLECTION_BANNERS)
        banners = await self._copy_all(batch, tenant_id, source)
        self._info(f"Migrated {len(banners)} banners for {tenant_id}")
        return len(banners)

    async def _migrate_admin(self, batch: BoundedBatch, tenant_id: str) -> int:
        source = self._refs.legacy_source(tenant_id, COLLECTION_ADMIN)
        docs = await self._copy_all(batch, tenant_id, source)
        if any(d.id == COLLECTION_UPLOADED_IMAGES for d in docs):
            await self._copy_all(batch, tenant_id, admin_images(source))
        self._info(f"Migrated {len(docs)} admin documents for {tenant_id}")
        return len(docs)

    async def migrate_tenant(self, tenant: str) -> TenantMigrationResult:
        """Migrate one tenant (safe id or raw email). Never raises for store failures."""
        tenant_id = normalize_tenant(tenant)
        if tenant_id is None:
            self._error(f"Invalid tenant identifier: {tenant!r}", ValueError("empty or contains '/'"))
            return TenantMigrationResult(tenant=str(tenant), success=False, error="Invalid tenant identifier")

        self._info(f"Starting migration for {tenant_id}")
        batch = BoundedBatch(self._store, self._batch_limit, self._commit_attempts)
        email = email_from_tenant_id(tenant.strip())
        try:
            await batch.set(
                self._refs.profile(tenant_id),
                {
                    "email": email,
                    "name": email.split("@")[0],
                    "role": "user",
                    "createdAt": SERVER_TIMESTAMP,
                    "lastLogin": SERVER_TIMESTAMP,
                    "migratedAt": SERVER_TIMESTAMP,
                },
            )
            await self._migrate_clients(batch, tenant_id)
            await self._migrate_banners(batch, tenant_id)
            await self._migrate_admin(batch, tenant_id)
            await batch.flush()
        except StoreException as e:
            self._error(f"Failed to migrate {tenant_id}", e)
            return TenantMigrationResult(
                tenant=tenant_id,
                success=False,
                operation_count=batch.operation_count,
                commits=batch.commits,
                error=e.message,
            )

        self._info(
            f"Migrated {batch.operation_count} documents for {tenant_id} in {batch.commits} commits"
        )
        return TenantMigrationResult(
            tenant=tenant_id,
            success=True,
            operation_count=batch.operation_count,
            commits=batch.commits,
        )

    async def migrate_all(self, tenants: list[str]) -> MigrationSummary:
        """Migrate each tenant in order; the summary carries this run's log and errors."""
        self.log = []
        self.errors = []
        summary = MigrationSummary()
        if not tenants:
            self._info("No tenants to migrate")
        for tenant in tenants:
            summary.results.append(await self.migrate_tenant(tenant))
        self._info(
            f"Migration completed: {summary.success_count} successful, "
            f"{summary.failure_count} failed"
        )
        summary.log = list(self.log)
        summary.errors = list(self.errors)
        return summary

    async def verify_tenant(self, tenant: str) -> TenantVerification:
        """Count what exists in the hierarchy for a tenant."""
        tenant_id = normalize_tenant(tenant)
        if tenant_id is None:
            return TenantVerification(
                tenant=str(tenant), profile=False, clients=0, years=0, documents=0,
                error="Invalid tenant identifier",
            )
        try:
            profile = await self._store.get(self._refs.profile(tenant_id)) is not None
            clients = await self._store.list(self._refs.clients(tenant_id))
            years = documents = generic = 0
            for client in clients:
                client_year_records = await self._store.list(client_years(client.path))
                years += len(client_year_records)
                for year in client_year_records:
                    documents += len(await self._store.list(year_documents(year.path)))
                generic += len(await self._store.list(client_generic_documents(client.path)))
            banners = len(await self._store.list(self._refs.banners(tenant_id)))
            admin = len(await self._store.list(self._refs.admin(tenant_id)))
        except StoreException as e:
            self._error(f"Failed to verify {tenant_id}", e)
            return TenantVerification(
                tenant=tenant_id, profile=False, clients=0, years=0, documents=0, error=e.message
            )
        return TenantVerification(
            tenant=tenant_id,
            profile=profile,
            clients=len(clients),
            years=years,
            documents=documents,
            generic_documents=generic,
            banners=banners,
            admin=admin,
        )
