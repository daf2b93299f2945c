"""Year repository: explicit year folders kept in sync with ``Client.years``."""

from __future__ import annotations

import logging
from typing import Any

from ca_admin.application.dtos.client import YearDeletionResult, YearRenameResult, YearResult
from ca_admin.application.dtos.store import SERVER_TIMESTAMP, StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.enums import YearStatus
from ca_admin.domain.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from ca_admin.domain.value_objects import FiscalYear, sort_years_desc, year_sort_key
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require, year_documents
from ca_admin.infrastructure.firebase.services.cascade_delete import CascadeDeleteService
from ca_admin.infrastructure.firebase.services.migration import BoundedBatch

logger = logging.getLogger(__name__)


def _without_update_stamp(data: dict[str, Any]) -> dict[str, Any]:
    # updatedAt is re-stamped by the store on every write
    return {k: v for k, v in data.items() if k != "updatedAt"}


def to_year_result(record: StoreRecord) -> YearResult:
    d = record.data
    return YearResult(
        id=record.id,
        document_count=int(d.get("documentCount") or 0),
        status=d.get("status", YearStatus.ACTIVE.value),
        created_at=d.get("createdAt"),
        updated_at=d.get("updatedAt"),
    )


class YearRepository:
    """Adds, lists, renames and deletes a client's fiscal-year folders."""

    def __init__(
        self,
        store: IDocumentStore,
        refs: ReferenceBuilder,
        cascade: CascadeDeleteService,
    ) -> None:
        self._store = store
        self._refs = refs
        self._cascade = cascade

    async def add_year(self, tenant: str, contact: str, year: str | int) -> YearResult:
        """Create a year folder and add it to the client's ``years``.

        Accepts ``2024`` or ``2024-25``. The year document and the client's
        ``years`` update are committed together.

        Raises:
            ValidationException: Malformed year or identifiers.
            ResourceNotFoundException: Client does not exist.
            ResourceAlreadyExistsException: Year already exists for the client.
        """
        label = FiscalYear.parse(year).value
        client_ref = require(self._refs.client(tenant, contact), "contact")
        year_ref = require(self._refs.year(tenant, contact, label), "year")

        client = await self._store.get(client_ref)
        if client is None:
            raise ResourceNotFoundException("client", contact)
        if await self._store.get(year_ref) is not None:
            raise ResourceAlreadyExistsException("year", label)

        years = sort_years_desc([*(client.data.get("years") or []), label])
        batch = self._store.batch()
        batch.set(
            year_ref,
            {
                "year": label,
                "documentCount": 0,
                "status": YearStatus.ACTIVE.value,
                "createdAt": SERVER_TIMESTAMP,
            },
        )
        batch.update(client_ref, {"years": years})
        await batch.commit()
        logger.info("Added year %s for %s", label, client_ref.path)

        record = await self._store.get(year_ref)
        if record is None:
            raise ResourceNotFoundException("year", label)
        return to_year_result(record)

    async def list_years(self, tenant: str, contact: str) -> list[YearResult]:
        """Year folders, newest start-year first."""
        records = await self._store.list(require(self._refs.years(tenant, contact), "contact"))
        years = [to_year_result(r) for r in records]
        return sorted(years, key=lambda y: year_sort_key(y.id), reverse=True)

    async def delete_year(self, tenant: str, contact: str, year: str) -> YearDeletionResult:
        """Delete the year's documents, the year, then its ``years`` entry.

        Raises:
            ResourceNotFoundException: Year does not exist.
        """
        label = FiscalYear.existing(year)
        client_ref = require(self._refs.client(tenant, contact), "contact")
        year_ref = require(self._refs.year(tenant, contact, label), "year")
        if await self._store.get(year_ref) is None:
            raise ResourceNotFoundException("year", label)

        subtree = await self._cascade.delete_year_subtree(year_ref)
        errors = [f"{e.path}: {e.message}" for e in subtree.errors]

        client = await self._store.get(client_ref)
        if client is not None:
            years = [y for y in client.data.get("years") or [] if y != label]
            try:
                await self._store.update(client_ref, {"years": sort_years_desc(years)})
            except StoreException as e:
                logger.warning("Failed to remove year %s from %s: %s", label, client_ref.path, e.message)
                errors.append(f"{client_ref.path}: {e.message}")

        logger.info(
            "Deleted year %s for %s (%s documents)", label, client_ref.path, subtree.deleted_documents
        )
        return YearDeletionResult(
            year=label, deleted_documents=subtree.deleted_documents, errors=errors
        )

    async def rename_year(
        self, tenant: str, contact: str, old_year: str, new_year: str | int
    ) -> YearRenameResult:
        """Move a year folder and its documents to another year.

        The new year and a copy of every document (same ids, ``year``
        rewritten) are committed first, then the client's ``years`` entry
        is replaced, then the old folder is deleted. A failed copy leaves
        the old folder untouched.

        Raises:
            ValidationException: Malformed years, or both resolve to the same folder.
            ResourceNotFoundException: Client or old year does not exist.
            ResourceAlreadyExistsException: The new year already exists.
        """
        old_label = FiscalYear.existing(old_year)
        new_label = FiscalYear.parse(new_year).value
        if new_label == old_label:
            raise ValidationException("New year must differ from the current year", field="year")
        client_ref = require(self._refs.client(tenant, contact), "contact")
        old_ref = require(self._refs.year(tenant, contact, old_label), "year")
        new_ref = require(self._refs.year(tenant, contact, new_label), "year")

        client = await self._store.get(client_ref)
        if client is None:
            raise ResourceNotFoundException("client", contact)
        old = await self._store.get(old_ref)
        if old is None:
            raise ResourceNotFoundException("year", old_label)
        if await self._store.get(new_ref) is not None:
            raise ResourceAlreadyExistsException("year", new_label)

        documents = await self._store.list(year_documents(old_ref))
        batch = BoundedBatch(self._store)
        await batch.set(
            new_ref,
            {**_without_update_stamp(old.data), "year": new_label, "documentCount": len(documents)},
        )
        for doc in documents:
            await batch.set(
                year_documents(new_ref).document(doc.id),
                {**_without_update_stamp(doc.data), "year": new_label},
            )
        await batch.flush()

        years = [y for y in client.data.get("years") or [] if y != old_label]
        await self._store.update(client_ref, {"years": sort_years_desc([*years, new_label])})

        subtree = await self._cascade.delete_year_subtree(old_ref)
        errors = [f"{e.path}: {e.message}" for e in subtree.errors]
        logger.info(
            "Renamed year %s to %s for %s (%s documents)",
            old_label,
            new_label,
            client_ref.path,
            len(documents),
        )
        return YearRenameResult(
            old_year=old_label, new_year=new_label, moved_documents=len(documents), errors=errors
        )
