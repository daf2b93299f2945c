"""Maintenance of the derived per-year ``documentCount``.

Increments are atomic on the store side and fire-and-forget: a failed
counter update never fails the document write it accompanies. The count
may drift under failures; ``reconcile`` recomputes it from the documents
subcollection, which is the ground truth.
"""

import logging

from ca_admin.application.dtos.store import Increment
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.exceptions import (
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from ca_admin.domain.value_objects.core import sort_years_desc
from ca_admin.domain.value_objects.paths import DocumentPath
from ca_admin.infrastructure.firebase.references import (
    ReferenceBuilder,
    client_years,
    year_documents,
)

logger = logging.getLogger(__name__)

COUNT_FIELD = "documentCount"


class CounterAggregator:
    """Keeps Year.documentCount in step with the year's documents."""

    def __init__(self, store: IDocumentStore, refs: ReferenceBuilder) -> None:
        self._store = store
        self._refs = refs

    async def _adjust(self, year_ref: DocumentPath, delta: int) -> bool:
        try:
            await self._store.update(year_ref, {COUNT_FIELD: Increment(delta)})
            return True
        except StoreException as e:
            logger.warning(
                "Failed to adjust %s by %s on %s: %s",
                COUNT_FIELD,
                delta,
                year_ref.path,
                e.message,
            )
            return False

    async def on_document_created(self, year_ref: DocumentPath) -> bool:
        """Increment the year's count; False when the update failed (logged)."""
        return await self._adjust(year_ref, 1)

    async def on_document_deleted(self, year_ref: DocumentPath) -> bool:
        """Decrement the year's count; False when the update failed (logged)."""
        return await self._adjust(year_ref, -1)

    async def reconcile(self, year_ref: DocumentPath) -> int:
        """Set documentCount to the number of documents actually present.

        Raises:
            ResourceNotFoundException: The year does not exist.
        """
        if await self._store.get(year_ref) is None:
            raise ResourceNotFoundException("year", year_ref.id)
        count = len(await self._store.list(year_documents(year_ref)))
        await self._store.set(year_ref, {COUNT_FIELD: count}, merge=True)
        logger.info("Reconciled %s on %s to %s", COUNT_FIELD, year_ref.path, count)
        return count

    async def reconcile_client(self, tenant_email: str, contact: str) -> dict[str, int]:
        """Reconcile every year of a client; returns {year: count}, newest year first."""
        client_ref = self._refs.client(tenant_email, contact)
        if client_ref is None:
            raise ValidationException("Tenant email and client contact are required", field="contact")
        if await self._store.get(client_ref) is None:
            raise ResourceNotFoundException("client", contact)
        years = await self._store.list(client_years(client_ref))
        counts = {}
        for year in years:
            counts[year.id] = await self.reconcile(year.path)
        return {label: counts[label] for label in sort_years_desc(list(counts))}
