"""In-process document store with the same contract as the Firestore store.

Used by tests and by local development (STORE_BACKEND=memory). Documents
are kept as deep copies keyed by path; collections exist implicitly.
Subscribers are notified synchronously after each mutation that touches
the watched document or a direct child of the watched collection.
"""

from __future__ import annotations

import copy
import logging
import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ca_admin.application.dtos.store import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    Increment,
    QueryFilter,
    StoreRecord,
    with_timestamps,
)
from ca_admin.application.interfaces.store import (
    ErrorCallback,
    SnapshotCallback,
    Unsubscribe,
)
from ca_admin.core.config import FIRESTORE_BATCH_LIMIT
from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.shared.utils.datetime import utc_now
from ca_admin.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda a, b: a in b,
    "not-in": lambda a, b: a not in b,
    "array-contains": lambda a, b: isinstance(a, list) and b in a,
    "array-contains-any": lambda a, b: isinstance(a, list) and any(x in a for x in b),
}


def _matches(data: dict[str, Any], f: QueryFilter) -> bool:
    op = _OPERATORS.get(f.op)
    if op is None:
        raise StoreException("invalid-argument", f"Unsupported filter operator: {f.op!r}")
    if f.field not in data:
        return False
    try:
        return bool(op(data[f.field], f.value))
    except TypeError:
        return False


@dataclass
class _Op:
    kind: str  # 'set', 'merge', 'update', 'delete'
    doc: DocumentPath
    data: dict[str, Any] | None = None
    must_exist: bool | None = None


@dataclass(eq=False)
class _Listener:
    ref: CollectionPath | DocumentPath
    on_data: SnapshotCallback
    on_error: ErrorCallback | None
    active: bool = True


class InMemoryWriteBatch:
    """Staged writes applied all-or-nothing on commit."""

    def __init__(self, store: InMemoryDocumentStore, max_operations: int = FIRESTORE_BATCH_LIMIT):
        self._store = store
        self.max_operations = max_operations
        self._ops: list[_Op] = []

    def _stage(self, op: _Op) -> None:
        if len(self._ops) >= self.max_operations:
            raise StoreException(
                "invalid-argument",
                f"Write batch is full ({self.max_operations} operations)",
            )
        self._ops.append(op)

    def set(self, doc: DocumentPath, data: dict[str, Any], merge: bool = False) -> None:
        self._stage(_Op("merge" if merge else "set", doc, with_timestamps(data)))

    def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        self._stage(_Op("update", doc, with_timestamps(data), must_exist=True))

    def delete(self, doc: DocumentPath) -> None:
        self._stage(_Op("delete", doc))

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        if not self._ops:
            return
        self._store._apply(self._ops)
        self._ops = []
        self._store.commit_count += 1


class InMemoryDocumentStore:
    """Dict-backed document store.

    Attributes:
        commit_count: Number of non-empty batch commits (single writes excluded).
    """

    def __init__(self) -> None:
        self._docs: dict[tuple[str, ...], dict[str, Any]] = {}
        self._listeners: list[_Listener] = []
        self.commit_count = 0

    # Write path

    def _resolve(self, current: dict[str, Any] | None, data: dict[str, Any], replace: bool) -> dict[str, Any]:
        now = utc_now()
        result: dict[str, Any] = {} if replace or current is None else copy.deepcopy(current)
        for key, value in data.items():
            if value is SERVER_TIMESTAMP:
                result[key] = now
            elif isinstance(value, Increment):
                base = (current or {}).get(key)
                base = base if isinstance(base, (int, float)) and not isinstance(base, bool) else 0
                result[key] = base + value.amount
            elif value is DELETE_FIELD:
                if replace:
                    raise StoreException(
                        "invalid-argument", "DELETE_FIELD is only allowed in merge or update writes"
                    )
                result.pop(key, None)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def _apply(self, ops: list[_Op]) -> None:
        """Validate every precondition first, then apply (all-or-nothing)."""
        staged = dict(self._docs)
        touched: list[DocumentPath] = []
        for op in ops:
            key = op.doc.segments
            exists = key in staged
            if op.must_exist is True and not exists:
                raise StoreException("not-found", f"No document to update: {op.doc.path}", op.doc.path)
            if op.must_exist is False and exists:
                raise StoreException("already-exists", f"Document already exists: {op.doc.path}", op.doc.path)
            if op.kind == "delete":
                staged.pop(key, None)
            else:
                staged[key] = self._resolve(staged.get(key), op.data or {}, replace=op.kind == "set")
            touched.append(op.doc)
        self._docs = staged
        self._notify(touched)

    async def create(self, collection: CollectionPath, data: dict[str, Any]) -> str:
        doc = collection.document(generate_cuid())
        self._apply([_Op("set", doc, with_timestamps(data, created=True), must_exist=False)])
        return doc.id

    async def set(self, doc: DocumentPath, data: dict[str, Any], merge: bool = False) -> None:
        self._apply([_Op("merge" if merge else "set", doc, with_timestamps(data))])

    async def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        self._apply([_Op("update", doc, with_timestamps(data), must_exist=True)])

    async def delete(self, doc: DocumentPath) -> None:
        self._apply([_Op("delete", doc)])

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    # Read path

    def _record(self, key: tuple[str, ...]) -> StoreRecord:
        path = DocumentPath(key)
        return StoreRecord(id=path.id, path=path, data=copy.deepcopy(self._docs[key]))

    def _get_now(self, doc: DocumentPath) -> StoreRecord | None:
        if doc.segments not in self._docs:
            return None
        return self._record(doc.segments)

    def _list_now(
        self,
        collection: CollectionPath,
        filters: Sequence[QueryFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoreRecord]:
        depth = len(collection.segments) + 1
        keys = sorted(
            k for k in self._docs if len(k) == depth and k[:-1] == collection.segments
        )
        records = [self._record(k) for k in keys]
        for f in filters or []:
            records = [r for r in records if _matches(r.data, f)]
        if order_by is not None:
            # Documents without the ordering field are excluded, like Firestore.
            records = [r for r in records if r.data.get(order_by) is not None]
            records.sort(key=lambda r: r.data[order_by], reverse=descending)
        return records

    async def get(self, doc: DocumentPath) -> StoreRecord | None:
        return self._get_now(doc)

    async def list(
        self,
        collection: CollectionPath,
        filters: Sequence[QueryFilter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[StoreRecord]:
        return self._list_now(collection, filters, order_by, descending)

    def paths(self) -> list[str]:
        """Every stored document path, sorted (test helper)."""
        return sorted("/".join(k) for k in self._docs)

    # Subscriptions

    def _snapshot(self, ref: CollectionPath | DocumentPath) -> Any:
        if isinstance(ref, CollectionPath):
            return self._list_now(ref)
        return self._get_now(ref)

    def _deliver(self, listener: _Listener) -> None:
        try:
            snapshot = self._snapshot(listener.ref)
        except StoreException as e:
            listener.active = False
            if listener.on_error is not None:
                listener.on_error(e)
            else:
                logger.warning("Listener on %s failed: %s", listener.ref.path, e.message)
            return
        try:
            listener.on_data(snapshot)
        except Exception:
            # a failing consumer never fails the write that triggered it
            logger.exception("Listener callback on %s raised", listener.ref.path)

    def _notify(self, touched: list[DocumentPath]) -> None:
        for listener in list(self._listeners):
            if not listener.active:
                continue
            ref = listener.ref
            if isinstance(ref, DocumentPath):
                hit = any(doc == ref for doc in touched)
            else:
                hit = any(doc.parent == ref for doc in touched)
            if hit:
                self._deliver(listener)

    def subscribe(
        self,
        ref: CollectionPath | DocumentPath,
        on_data: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Deliver the current snapshot now and again after each relevant change."""
        listener = _Listener(ref, on_data, on_error)
        self._listeners.append(listener)
        self._deliver(listener)

        def unsubscribe() -> None:
            listener.active = False
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def aclose(self) -> None:
        self._listeners.clear()
