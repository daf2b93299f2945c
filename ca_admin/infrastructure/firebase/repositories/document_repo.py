"""Document repository: year-scoped documents and client-level generic documents.

Year documents keep the parent's ``documentCount`` up to date through the
counter aggregator. Generic documents are not counted.
"""

from __future__ import annotations

import logging
from typing import Any

from ca_admin.application.dtos.client import DocumentInput, DocumentResult
from ca_admin.application.dtos.store import SERVER_TIMESTAMP, StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.exceptions import (
    ResourceNotFoundException,
    StoreException,
    ValidationException,
)
from ca_admin.domain.value_objects import FiscalYear
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase.references import ReferenceBuilder, require, year_documents
from ca_admin.infrastructure.firebase.services.counter_aggregator import CounterAggregator

logger = logging.getLogger(__name__)

# Fields a caller may change after upload.
UPDATABLE_FIELDS = frozenset(
    {"name", "docName", "fileName", "fileUrl", "filePath", "fileData", "fileSize", "fileType"}
)


def to_document_result(record: StoreRecord) -> DocumentResult:
    d = record.data
    return DocumentResult(
        id=record.id,
        name=d.get("name", ""),
        file_name=d.get("fileName", ""),
        year=d.get("year"),
        doc_name=d.get("docName"),
        file_url=d.get("fileUrl"),
        file_path=d.get("filePath"),
        file_data=d.get("fileData"),
        file_size=d.get("fileSize"),
        file_type=d.get("fileType"),
        uploaded_at=d.get("uploadedAt"),
        uploaded_by=d.get("uploadedBy"),
        created_at=d.get("createdAt"),
    )


def _validate(data: DocumentInput) -> None:
    if not data.name or not data.name.strip():
        raise ValidationException("Document name is required", field="name")
    if not data.file_name or not data.file_name.strip():
        raise ValidationException("File name is required", field="fileName")


class DocumentRepository:
    """CRUD for documents under a year and generic documents under a client."""

    def __init__(
        self,
        store: IDocumentStore,
        refs: ReferenceBuilder,
        counter: CounterAggregator,
    ) -> None:
        self._store = store
        self._refs = refs
        self._counter = counter

    async def _require_year(self, tenant: str, contact: str, year: str) -> DocumentPath:
        label = FiscalYear.existing(year)
        year_ref = require(self._refs.year(tenant, contact, label), "year")
        if await self._store.get(year_ref) is None:
            raise ResourceNotFoundException("year", label)
        return year_ref

    async def _require_client(self, tenant: str, contact: str) -> DocumentPath:
        client_ref = require(self._refs.client(tenant, contact), "contact")
        if await self._store.get(client_ref) is None:
            raise ResourceNotFoundException("client", contact)
        return client_ref

    async def _create(self, collection: CollectionPath, fields: dict[str, Any]) -> DocumentResult:
        fields.setdefault("uploadedAt", SERVER_TIMESTAMP)
        doc_id = await self._store.create(collection, fields)
        record = await self._store.get(collection.document(doc_id))
        if record is None:
            raise ResourceNotFoundException("document", doc_id)
        return to_document_result(record)

    # Year documents

    async def add_document(
        self, tenant: str, contact: str, year: str, data: DocumentInput
    ) -> DocumentResult:
        """Record an uploaded document under an existing year and bump its count."""
        _validate(data)
        year_ref = await self._require_year(tenant, contact, year)
        fields = data.to_fields()
        fields["year"] = year_ref.id
        result = await self._create(year_documents(year_ref), fields)
        await self._counter.on_document_created(year_ref)
        logger.info("Added document %s under %s", result.id, year_ref.path)
        return result

    async def get_document(
        self, tenant: str, contact: str, year: str, document_id: str
    ) -> DocumentResult | None:
        label = FiscalYear.existing(year)
        doc_ref = require(self._refs.document(tenant, contact, label, document_id), "document")
        record = await self._store.get(doc_ref)
        return to_document_result(record) if record else None

    async def list_documents(self, tenant: str, contact: str, year: str) -> list[DocumentResult]:
        """Documents of a year, newest first."""
        label = FiscalYear.existing(year)
        collection = require(self._refs.documents(tenant, contact, label), "year")
        records = await self._store.list(collection, order_by="createdAt", descending=True)
        return [to_document_result(r) for r in records]

    async def update_document(
        self, tenant: str, contact: str, year: str, document_id: str, changes: dict[str, Any]
    ) -> DocumentResult:
        """Change metadata fields; the ``year`` field always stays the parent year."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )
        label = FiscalYear.existing(year)
        doc_ref = require(self._refs.document(tenant, contact, label, document_id), "document")
        try:
            await self._store.update(doc_ref, {**changes, "year": label})
        except StoreException as e:
            if e.code == "not-found":
                raise ResourceNotFoundException("document", document_id) from e
            raise
        record = await self._store.get(doc_ref)
        if record is None:
            raise ResourceNotFoundException("document", document_id)
        return to_document_result(record)

    async def delete_document(self, tenant: str, contact: str, year: str, document_id: str) -> None:
        """Delete a document and decrement its year's count.

        Raises:
            ResourceNotFoundException: Document does not exist (count untouched).
        """
        label = FiscalYear.existing(year)
        doc_ref = require(self._refs.document(tenant, contact, label, document_id), "document")
        if await self._store.get(doc_ref) is None:
            raise ResourceNotFoundException("document", document_id)
        await self._store.delete(doc_ref)
        year_ref = require(self._refs.year(tenant, contact, label), "year")
        await self._counter.on_document_deleted(year_ref)
        logger.info("Deleted document %s", doc_ref.path)

    # Generic documents

    async def add_generic_document(
        self, tenant: str, contact: str, data: DocumentInput
    ) -> DocumentResult:
        _validate(data)
        client_ref = await self._require_client(tenant, contact)
        collection = require(self._refs.generic_documents(tenant, contact), "contact")
        result = await self._create(collection, data.to_fields())
        logger.info("Added generic document %s under %s", result.id, client_ref.path)
        return result

    async def list_generic_documents(self, tenant: str, contact: str) -> list[DocumentResult]:
        collection = require(self._refs.generic_documents(tenant, contact), "contact")
        records = await self._store.list(collection, order_by="createdAt", descending=True)
        return [to_document_result(r) for r in records]

    async def delete_generic_document(self, tenant: str, contact: str, document_id: str) -> None:
        doc_ref = require(self._refs.generic_document(tenant, contact, document_id), "document")
        if await self._store.get(doc_ref) is None:
            raise ResourceNotFoundException("document", document_id)
        await self._store.delete(doc_ref)
        logger.info("Deleted generic document %s", doc_ref.path)
