"""Firestore implementation of the document store (REST v1 over httpx).

All writes go through ``documents:commit`` so single writes and batches
share one encoding path. Live subscriptions are emulated by polling,
since the REST API has no listen stream over plain HTTP/1.1.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from ca_admin.application.dtos.store import QueryFilter, StoreRecord, with_timestamps
from ca_admin.application.interfaces.store import (
    ErrorCallback,
    SnapshotCallback,
    Unsubscribe,
)
from ca_admin.core.config import FIRESTORE_BATCH_LIMIT
from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    build_structured_query,
)
from ca_admin.infrastructure.firebase._rest_encoding import (
    WriteMode,
    decode_document,
    encode_delete,
    encode_write,
)
from ca_admin.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _to_record(doc: dict) -> StoreRecord:
    relative, data = decode_document(doc)
    path = DocumentPath.from_string(relative)
    return StoreRecord(id=path.id, path=path, data=data)


class FirestoreWriteBatch:
    """Staged writes committed in one ``documents:commit`` call."""

    def __init__(self, store: FirestoreDocumentStore, max_operations: int = FIRESTORE_BATCH_LIMIT):
        self._store = store
        self.max_operations = max_operations
        self._writes: list[dict] = []

    def _stage(self, write: dict) -> None:
        if len(self._writes) >= self.max_operations:
            raise StoreException(
                "invalid-argument",
                f"Write batch is full ({self.max_operations} operations)",
            )
        self._writes.append(write)

    def set(self, doc: DocumentPath, data: dict[str, Any], merge: bool = False) -> None:
        mode: WriteMode = "merge" if merge else "set"
        self._stage(self._store._encode(doc, with_timestamps(data), mode))

    def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        self._stage(self._store._encode(doc, with_timestamps(data), "update"))

    def delete(self, doc: DocumentPath) -> None:
        self._stage(encode_delete(self._store.client.name_for(doc.path)))

    def __len__(self) -> int:
        return len(self._writes)

    async def commit(self) -> None:
        if not self._writes:
            return
        await self._store.client.commit(self._writes)
        self._writes = []


class FirestoreDocumentStore:
    """Document store backed by the Firestore REST API."""

    def __init__(self, client: FirestoreRESTClient, *, poll_interval: float = 2.0) -> None:
        self.client = client
        self._poll_interval = poll_interval
        self._listeners: set[asyncio.Task] = set()

    def _encode(
        self,
        doc: DocumentPath,
        data: dict[str, Any],
        mode: WriteMode,
        *,
        must_exist: bool | None = None,
    ) -> dict:
        try:
            return encode_write(self.client.name_for(doc.path), data, mode, must_exist=must_exist)
        except TypeError as e:
            raise StoreException("invalid-argument", str(e), doc.path) from e

    async def _commit_one(self, doc: DocumentPath, write: dict) -> None:
        try:
            await self.client.commit([write])
        except StoreException as e:
            # commit errors carry no path; attach the single document involved
            raise StoreException(e.code, e.message, doc.path) from e

    async def create(self, collection: CollectionPath, data: dict[str, Any]) -> str:
        doc = collection.document(generate_cuid())
        write = self._encode(doc, with_timestamps(data, created=True), "set", must_exist=False)
        await self._commit_one(doc, write)
        return doc.id

    async def set(self, doc: DocumentPath, data: dict[str, Any], merge: bool = False) -> None:
        mode: WriteMode = "merge" if merge else "set"
        await self._commit_one(doc, self._encode(doc, with_timestamps(data), mode))

    async def get(self, doc: DocumentPath) -> StoreRecord | None:
        out = await self.client.get_document(doc.path)
        if not out:
            return None
        return _to_record(out)

    async def list(
        self,
        collection: CollectionPath,
        filters: Sequence[QueryFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoreRecord]:
        if not filters and order_by is None:
            docs = await self.client.list_documents(collection.path)
        else:
            structured = build_structured_query(
                collection.id, list(filters or []), order_by, descending
            )
            parent = collection.parent
            docs = await self.client.run_query(parent.path if parent else None, structured)
        return [_to_record(d) for d in docs]

    async def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        await self._commit_one(doc, self._encode(doc, with_timestamps(data), "update"))

    async def delete(self, doc: DocumentPath) -> None:
        await self._commit_one(doc, encode_delete(self.client.name_for(doc.path)))

    def batch(self) -> FirestoreWriteBatch:
        return FirestoreWriteBatch(self)

    async def _snapshot(self, ref: CollectionPath | DocumentPath) -> Any:
        if isinstance(ref, CollectionPath):
            return await self.list(ref)
        return await self.get(ref)

    async def _poll(
        self,
        ref: CollectionPath | DocumentPath,
        on_data: SnapshotCallback,
        on_error: ErrorCallback | None,
    ) -> None:
        sentinel = object()
        last: Any = sentinel
        while True:
            try:
                snapshot = await self._snapshot(ref)
            except StoreException as e:
                logger.warning("Listener on %s failed: %s", ref.path, e.message)
                if on_error is not None:
                    on_error(e)
                return
            except Exception as e:
                logger.exception("Listener on %s failed unexpectedly", ref.path)
                if on_error is not None:
                    on_error(StoreException("internal", str(e), ref.path))
                return
            if last is sentinel or snapshot != last:
                last = snapshot
                try:
                    on_data(snapshot)
                except Exception:
                    # a failing consumer does not end the listener
                    logger.exception("Listener callback on %s raised", ref.path)
            await asyncio.sleep(self._poll_interval)

    def subscribe(
        self,
        ref: CollectionPath | DocumentPath,
        on_data: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Poll ``ref`` and deliver a snapshot on first read and on every change.

        Must be called with a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self._poll(ref, on_data, on_error))
        self._listeners.add(task)
        task.add_done_callback(self._listeners.discard)

        def unsubscribe() -> None:
            task.cancel()

        return unsubscribe

    async def aclose(self) -> None:
        for task in list(self._listeners):
            task.cancel()
        if self._listeners:
            await asyncio.gather(*self._listeners, return_exceptions=True)
        await self.client.aclose()
