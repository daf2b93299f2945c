"""Application ports."""

from ca_admin.application.interfaces.store import IDocumentStore, IWriteBatch

__all__ = ["IDocumentStore", "IWriteBatch"]
