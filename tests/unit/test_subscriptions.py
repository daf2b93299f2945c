"""Tests for Subscription and SubscriptionManager over the in-memory store."""

from ca_admin.domain.exceptions import StoreException
from ca_admin.infrastructure.firebase.services import Subscription, SubscriptionManager
from ca_admin.infrastructure.memory import InMemoryDocumentStore
from tests.conftest import CONTACT, TENANT


class BrokenSnapshotStore(InMemoryDocumentStore):
    def _snapshot(self, ref):
        raise StoreException("permission-denied", "Missing or insufficient permissions", ref.path)


async def test_collection_subscription_delivers_dicts(store, refs) -> None:
    manager = SubscriptionManager(store)
    events = []
    subscription = manager.subscribe_collection(refs.clients(TENANT), events.append)

    assert subscription.active
    assert manager.active_count == 1
    assert events == [[]]
    await store.set(refs.client(TENANT, CONTACT), {"name": "Asha"})
    assert events[-1][0]["id"] == CONTACT
    assert events[-1][0]["name"] == "Asha"


async def test_stop_is_idempotent_and_ends_delivery(store, refs) -> None:
    manager = SubscriptionManager(store)
    events = []
    subscription = manager.subscribe_collection(refs.clients(TENANT), events.append)

    subscription()
    subscription.stop()
    await store.set(refs.client(TENANT, CONTACT), {"name": "Asha"})

    assert not subscription.active
    assert manager.active_count == 0
    assert len(events) == 1


async def test_order_by_puts_missing_field_last(store, refs) -> None:
    notifications = refs.notifications(TENANT)
    await store.set(notifications.document("n1"), {"title": "old", "rank": 1})
    await store.set(notifications.document("n2"), {"title": "none"})
    await store.set(notifications.document("n3"), {"title": "new", "rank": 2})
    events = []

    SubscriptionManager(store).subscribe_collection(
        notifications, events.append, order_by="rank", descending=True
    )

    assert [item["id"] for item in events[-1]] == ["n3", "n1", "n2"]


async def test_document_subscription(store, refs) -> None:
    events = []
    SubscriptionManager(store).subscribe_document(refs.profile(TENANT), events.append)
    await store.set(refs.profile(TENANT), {"email": TENANT})
    await store.delete(refs.profile(TENANT))

    assert events[0] is None
    assert events[1]["id"] == "main"
    assert events[1]["email"] == TENANT
    assert events[2] is None


async def test_error_stops_subscription_and_reaches_callback(refs) -> None:
    manager = SubscriptionManager(BrokenSnapshotStore())
    errors = []
    events = []

    subscription = manager.subscribe_collection(refs.clients(TENANT), events.append, errors.append)

    assert not subscription.active
    assert manager.active_count == 0
    assert events == []
    assert errors[0].code == "permission-denied"


async def test_error_without_callback_is_logged(refs, caplog) -> None:
    subscription = Subscription(BrokenSnapshotStore(), refs.clients(TENANT), lambda s: None).start()
    assert not subscription.active
    assert "Subscription on" in caplog.text


async def test_stop_all(store, refs) -> None:
    manager = SubscriptionManager(store)
    first = manager.subscribe_collection(refs.clients(TENANT), lambda items: None)
    second = manager.subscribe_document(refs.profile(TENANT), lambda item: None)

    manager.stop_all()

    assert manager.active_count == 0
    assert not first.active
    assert not second.active
