"""Document store interfaces (ports) for the application layer.

Protocols define the contract the Firestore REST store and the in-memory
store both fulfill (DIP). Engines and repositories receive an instance
explicitly; nothing reaches for global app state.

Write semantics shared by all implementations:
    - every write stamps ``updatedAt`` with server time; ``create`` also
      stamps ``createdAt``;
    - ``update`` fails with StoreException(code='not-found') on a missing
      document, ``delete`` is idempotent;
    - failures raise StoreException(code, message).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ca_admin.application.dtos.store import QueryFilter, StoreRecord
    from ca_admin.domain.exceptions import StoreException
    from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath


# Snapshot payload: list of records for a collection, record-or-None for a document.
SnapshotCallback = Callable[[Any], None]
ErrorCallback = Callable[["StoreException"], None]
Unsubscribe = Callable[[], None]


class IWriteBatch(Protocol):
    """Atomic group of writes committed together (at most ``max_operations``)."""

    max_operations: int

    def set(self, doc: DocumentPath, data: dict[str, Any], merge: bool = False) -> None:
        """Stage a create-or-overwrite (or merge) write."""

    def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        """Stage a partial update of an existing document."""

    def delete(self, doc: DocumentPath) -> None:
        """Stage a delete."""

    def __len__(self) -> int:
        """Number of staged operations."""

    async def commit(self) -> None:
        """Apply all staged writes atomically; raise StoreException on failure."""


class IDocumentStore(Protocol):
    """Protocol for the remote document database (DIP)."""

    async def create(self, collection: CollectionPath, data: dict[str, Any]) -> str:
        """Create a document with a generated id; return the id."""

    async def set(
        self, doc: DocumentPath, data: dict[str, Any], merge: bool = False
    ) -> None:
        """Create or overwrite a document; with merge, only the given fields change."""

    async def get(self, doc: DocumentPath) -> StoreRecord | None:
        """Return the document or None when it does not exist."""

    async def list(
        self,
        collection: CollectionPath,
        filters: Sequence[QueryFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoreRecord]:
        """Return every document directly in the collection (optionally filtered/ordered)."""

    async def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        """Change the given fields of an existing document."""

    async def delete(self, doc: DocumentPath) -> None:
        """Delete a single document (subcollections are not touched)."""

    def batch(self) -> IWriteBatch:
        """Return a new empty write batch."""

    def subscribe(
        self,
        ref: CollectionPath | DocumentPath,
        on_data: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Start delivering full snapshots of ``ref``; return an unsubscribe function."""

    async def aclose(self) -> None:
        """Release transport resources."""
