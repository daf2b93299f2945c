"""Store doubles and seed helpers shared by unit and API tests."""

from typing import Any

from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.memory import InMemoryDocumentStore
from ca_admin.infrastructure.memory.store import InMemoryWriteBatch


class FaultyWriteBatch(InMemoryWriteBatch):
    async def commit(self) -> None:
        store: FaultyStore = self._store
        if store.fail_commits > 0:
            store.fail_commits -= 1
            raise StoreException("unavailable", "commit rejected")
        if store.fail_commit_containing and any(
            store.fail_commit_containing in op.doc.path for op in self._ops
        ):
            raise StoreException("unavailable", "commit rejected")
        await super().commit()


class FaultyStore(InMemoryDocumentStore):
    """In-memory store that fails selected operations with StoreException.

    - fail_delete: document paths whose delete fails
    - fail_list: collection paths whose list fails
    - fail_update: document paths whose update fails
    - fail_commits: number of upcoming batch commits that fail
    - fail_commit_containing: batch commits touching a path containing this text fail
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_delete: set[str] = set()
        self.fail_list: set[str] = set()
        self.fail_update: set[str] = set()
        self.fail_commits = 0
        self.fail_commit_containing: str | None = None

    async def delete(self, doc: DocumentPath) -> None:
        if doc.path in self.fail_delete:
            raise StoreException("permission-denied", "delete rejected", doc.path)
        await super().delete(doc)

    async def update(self, doc: DocumentPath, data: dict[str, Any]) -> None:
        if doc.path in self.fail_update:
            raise StoreException("unavailable", "update rejected", doc.path)
        await super().update(doc, data)

    async def list(self, collection: CollectionPath, *args: Any, **kwargs: Any):
        if collection.path in self.fail_list:
            raise StoreException("unavailable", "list rejected", collection.path)
        return await super().list(collection, *args, **kwargs)

    def batch(self) -> FaultyWriteBatch:
        return FaultyWriteBatch(self)


async def seed_client(
    store: InMemoryDocumentStore,
    refs: ReferenceBuilder,
    tenant: str,
    contact: str,
    years: dict[str, int] | None = None,
    generic: int = 0,
    *,
    legacy: bool = False,
) -> DocumentPath:
    """Write a client with ``{year: n_documents}`` and ``generic`` generic documents."""
    years = years or {}
    client_ref = refs.legacy_client(tenant, contact) if legacy else refs.client(tenant, contact)
    await store.set(
        client_ref,
        {"name": "Seed", "contact": contact, "isActive": True, "years": sorted(years)},
    )
    for label, count in years.items():
        year_ref = client_ref.collection("years").document(label)
        await store.set(year_ref, {"year": label, "documentCount": count, "status": "active"})
        for i in range(count):
            await store.set(
                year_ref.collection("documents").document(f"doc{i}"),
                {"name": f"Doc {i}", "fileName": f"doc{i}.pdf", "year": label},
            )
    for i in range(generic):
        await store.set(
            client_ref.collection("genericDocuments").document(f"gen{i}"),
            {"name": f"Generic {i}", "fileName": f"gen{i}.pdf"},
        )
    return client_ref


async def seed_legacy_tenant(store: InMemoryDocumentStore, tenant_id: str) -> None:
    """Flat-layout data under ``{tenant_id}/user``: 2 clients, 1 banner, admin images."""
    user = DocumentPath((tenant_id, "user"))
    clients = user.collection("clients")
    for contact, years in (("9876543210", {"2023-24": 2, "2024-25": 1}), ("9123456780", {})):
        client = clients.document(contact)
        await store.set(client, {"name": f"Client {contact}", "contact": contact, "years": sorted(years)})
        for label, count in years.items():
            year = client.collection("years").document(label)
            await store.set(year, {"year": label, "documentCount": count})
            for i in range(count):
                await store.set(
                    year.collection("documents").document(f"{label}-{i}"),
                    {"name": f"Doc {i}", "fileName": f"{i}.pdf"},
                )
    await store.set(
        clients.document("9876543210").collection("genericDocuments").document("g1"),
        {"name": "PAN card", "fileName": "pan.pdf"},
    )
    await store.set(user.collection("banners").document("b1"), {"title": "Welcome"})
    admin = user.collection("admin")
    await store.set(admin.document("settings"), {"theme": "dark"})
    await store.set(admin.document("uploadedImages"), {"count": 1})
    await store.set(
        admin.document("uploadedImages").collection("images").document("img1"),
        {"url": "https://example.com/a.png"},
    )
