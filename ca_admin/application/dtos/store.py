"""Store-level DTOs: records, query filters and write sentinels.

Shared by every DocumentStore implementation so engines never depend
on a concrete backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ca_admin.domain.value_objects.paths import DocumentPath


@dataclass(frozen=True)
class StoreRecord:
    """Snapshot of one stored document (id + path + field data)."""

    id: str
    path: DocumentPath
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the ``{"id": ..., **fields}`` shape callers consume."""
        return {"id": self.id, **self.data}


@dataclass(frozen=True)
class QueryFilter:
    """Single field filter for ``DocumentStore.list`` (e.g. ``isActive == True``)."""

    field: str
    op: str
    value: Any


class _ServerTimestamp:
    """Sentinel: store assigns its own commit time to the field."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


class _DeleteField:
    """Sentinel: remove the field from the document (update/merge only)."""

    _instance: _DeleteField | None = None

    def __new__(cls) -> _DeleteField:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE_FIELD"


SERVER_TIMESTAMP = _ServerTimestamp()
DELETE_FIELD = _DeleteField()


@dataclass(frozen=True)
class Increment:
    """Sentinel: atomically add ``amount`` to a numeric field (missing counts as 0)."""

    amount: int


def is_sentinel(value: Any) -> bool:
    """True for values the store resolves itself instead of storing verbatim."""
    return value is SERVER_TIMESTAMP or value is DELETE_FIELD or isinstance(value, Increment)


def with_timestamps(data: dict[str, Any], *, created: bool = False) -> dict[str, Any]:
    """Copy of ``data`` with ``updatedAt`` (and ``createdAt`` on create) stamped.

    Values the caller already set are kept, so migrated records can carry
    their original timestamps.
    """
    stamped = dict(data)
    stamped.setdefault("updatedAt", SERVER_TIMESTAMP)
    if created:
        stamped.setdefault("createdAt", SERVER_TIMESTAMP)
    return stamped
