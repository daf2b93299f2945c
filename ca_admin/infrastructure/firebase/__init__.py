"""Firestore integration: REST store, path resolution and store-level services."""

from ca_admin.infrastructure.firebase.client import create_firestore_store
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.store import FirestoreDocumentStore, FirestoreWriteBatch

__all__ = [
    "FirestoreDocumentStore",
    "FirestoreWriteBatch",
    "ReferenceBuilder",
    "create_firestore_store",
]
