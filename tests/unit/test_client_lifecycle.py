"""End-to-end lifecycle of one client through the repositories and engines."""

from ca_admin.application.dtos.client import ClientInput, DocumentInput
from ca_admin.infrastructure.firebase.repositories import (
    ClientRepository,
    DocumentRepository,
    YearRepository,
)
from ca_admin.infrastructure.firebase.services import CascadeDeleteService, CounterAggregator

TENANT = "a_b@x.com"
CONTACT = "9876543210"


async def test_client_year_document_lifecycle(store, refs) -> None:
    cascade = CascadeDeleteService(store, refs)
    counter = CounterAggregator(store, refs)
    clients = ClientRepository(store, refs, cascade)
    years = YearRepository(store, refs, cascade)
    documents = DocumentRepository(store, refs, counter)

    client = await clients.upsert_client(TENANT, ClientInput(name="Asha", contact=CONTACT))
    assert refs.client(TENANT, CONTACT).path == "tenants/a_b@x_com/clients/9876543210"
    assert client.years == []

    await years.add_year(TENANT, CONTACT, "2024-25")
    for name in ("ITR-V", "Form 16", "Form 26AS"):
        await documents.add_document(
            TENANT, CONTACT, "2024-25", DocumentInput(name=name, file_name=f"{name}.pdf", file_data="JVBERi0=")
        )

    year_ref = refs.year(TENANT, CONTACT, "2024-25")
    assert await counter.reconcile(year_ref) == 3

    deleted = await years.delete_year(TENANT, CONTACT, "2024-25")
    assert deleted.deleted_documents == 3
    assert (await clients.get_client(TENANT, CONTACT)).years == []
    assert await store.list(refs.documents(TENANT, CONTACT, "2024-25")) == []

    result = await clients.delete_client(TENANT, CONTACT)
    assert result.complete
    assert store.paths() == []
