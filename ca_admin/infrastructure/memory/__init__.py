"""In-process document store (tests, local development)."""

from ca_admin.infrastructure.memory.store import InMemoryDocumentStore, InMemoryWriteBatch

__all__ = ["InMemoryDocumentStore", "InMemoryWriteBatch"]
