"""Cascade deletion of a client subtree (years, documents, generic documents).

The document store does not delete subcollections with their parent, so
descendants are removed explicitly, leaf-first. Each phase is isolated:
a failed list or delete is logged and reported in the result, and the
remaining phases still run. Only a failure to delete the client document
itself fails the operation.
"""

from __future__ import annotations

import logging

from ca_admin.application.dtos.cascade import (
    CascadeDeleteResult,
    CascadeError,
    SubtreeDeleteResult,
)
from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.domain.exceptions import (
    PartialCascadeException,
    StoreException,
    ValidationException,
)
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase.references import (
    ReferenceBuilder,
    client_generic_documents,
    client_years,
    year_documents,
)

logger = logging.getLogger(__name__)


class CascadeDeleteService:
    """Best-effort, idempotent subtree deletion over an injected document store."""

    def __init__(self, store: IDocumentStore, refs: ReferenceBuilder) -> None:
        self._store = store
        self._refs = refs

    async def _list_ids(
        self, collection: CollectionPath, phase: str, errors: list[CascadeError]
    ) -> list[DocumentPath]:
        try:
            return [r.path for r in await self._store.list(collection)]
        except StoreException as e:
            logger.warning("Cascade: failed to list %s: %s", collection.path, e.message)
            errors.append(CascadeError(phase, collection.path, e.message))
            return []

    async def _delete_one(
        self, doc: DocumentPath, phase: str, errors: list[CascadeError]
    ) -> bool:
        try:
            await self._store.delete(doc)
            return True
        except StoreException as e:
            logger.warning("Cascade: failed to delete %s: %s", doc.path, e.message)
            errors.append(CascadeError(phase, doc.path, e.message))
            return False

    async def delete_year_subtree(self, year_ref: DocumentPath) -> SubtreeDeleteResult:
        """Delete every document of a year, then the year itself."""
        result = SubtreeDeleteResult()
        for doc in await self._list_ids(year_documents(year_ref), "documents", result.errors):
            if await self._delete_one(doc, "documents", result.errors):
                result.deleted_documents += 1
        if await self._delete_one(year_ref, "years", result.errors):
            result.deleted_years = 1
        return result

    async def purge_client_subtree(self, client_ref: DocumentPath) -> SubtreeDeleteResult:
        """Delete all years (with documents) and generic documents; keep the client document.

        Used before deleting a client and before creating a client at an id
        that may still carry orphaned subcollections.
        """
        result = SubtreeDeleteResult()
        for year_ref in await self._list_ids(client_years(client_ref), "years", result.errors):
            year_result = await self.delete_year_subtree(year_ref)
            result.deleted_years += year_result.deleted_years
            result.deleted_documents += year_result.deleted_documents
            result.errors.extend(year_result.errors)

        generic = client_generic_documents(client_ref)
        for doc in await self._list_ids(generic, "generic", result.errors):
            if await self._delete_one(doc, "generic", result.errors):
                result.deleted_generic += 1
        return result

    async def _clean_legacy(self, tenant_email: str, contact: str, result: CascadeDeleteResult) -> None:
        legacy_ref = self._refs.legacy_client(tenant_email, contact)
        if legacy_ref is None or legacy_ref.path == result.client_path:
            return
        result.legacy_checked = True
        subtree = await self.purge_client_subtree(legacy_ref)
        result.deleted_years += subtree.deleted_years
        result.deleted_documents += subtree.deleted_documents
        result.deleted_generic += subtree.deleted_generic
        for error in subtree.errors:
            logger.warning("Cascade (legacy): %s %s: %s", error.phase, error.path, error.message)
        try:
            await self._store.delete(legacy_ref)
        except StoreException as e:
            logger.warning("Cascade (legacy): failed to delete %s: %s", legacy_ref.path, e.message)

    async def delete_client(self, tenant_email: str, contact: str) -> CascadeDeleteResult:
        """Delete a client and everything beneath it, then re-check the legacy location.

        Safe to call repeatedly: a second call reports zero counts.

        Raises:
            ValidationException: Tenant or contact missing.
            PartialCascadeException: The client document itself could not be
                deleted; carries the partial result.
        """
        client_ref = self._refs.client(tenant_email, contact)
        if client_ref is None:
            raise ValidationException("Tenant email and client contact are required", field="contact")

        result = CascadeDeleteResult(client_path=client_ref.path)
        try:
            result.client_found = await self._store.get(client_ref) is not None
        except StoreException as e:
            logger.warning("Cascade: failed to read %s: %s", client_ref.path, e.message)
            result.errors.append(CascadeError("client", client_ref.path, e.message))

        subtree = await self.purge_client_subtree(client_ref)
        result.deleted_years = subtree.deleted_years
        result.deleted_documents = subtree.deleted_documents
        result.deleted_generic = subtree.deleted_generic
        result.errors.extend(subtree.errors)

        try:
            await self._store.delete(client_ref)
        except StoreException as e:
            logger.error("Cascade: failed to delete client %s: %s", client_ref.path, e.message)
            result.errors.append(CascadeError("client", client_ref.path, e.message))
            raise PartialCascadeException(result) from e
        result.client_deleted = True

        await self._clean_legacy(tenant_email, contact, result)

        logger.info(
            "Deleted client %s: %s years, %s documents, %s generic documents (%s errors)",
            client_ref.path,
            result.deleted_years,
            result.deleted_documents,
            result.deleted_generic,
            len(result.errors),
        )
        return result
