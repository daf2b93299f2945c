"""Live subscriptions with explicit start/stop lifecycle.

Each event carries the full current state: a list of ``{"id", **fields}``
dicts for a collection, a dict or None for a single document. Store
errors end the subscription and are forwarded to the error callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ca_admin.application.dtos.store import StoreRecord
from ca_admin.application.interfaces.store import IDocumentStore, Unsubscribe
from ca_admin.domain.exceptions import StoreException
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath

logger = logging.getLogger(__name__)

ListCallback = Callable[[list[dict[str, Any]]], None]
RecordCallback = Callable[[dict[str, Any] | None], None]
ErrorHandler = Callable[[StoreException], None]


class Subscription:
    """Handle for one live listener. Calling the handle stops it."""

    def __init__(
        self,
        store: IDocumentStore,
        ref: CollectionPath | DocumentPath,
        on_event: Callable[[Any], None],
        on_error: ErrorHandler | None = None,
        *,
        on_stop: Callable[[Subscription], None] | None = None,
    ) -> None:
        self._store = store
        self.ref = ref
        self._on_event = on_event
        self._on_error = on_error
        self._on_stop = on_stop
        self._unsubscribe: Unsubscribe | None = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> Subscription:
        if self._active:
            return self
        self._active = True
        unsubscribe = self._store.subscribe(self.ref, self._handle_data, self._handle_error)
        if self._active:
            self._unsubscribe = unsubscribe
        else:
            # failed during the initial delivery
            unsubscribe()
        return self

    def stop(self) -> None:
        """Stop delivering events. Safe to call more than once."""
        was_active = self._active
        self._active = False
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()
        if was_active and self._on_stop is not None:
            self._on_stop(self)

    __call__ = stop

    def _handle_data(self, snapshot: Any) -> None:
        if self._active:
            self._on_event(snapshot)

    def _handle_error(self, error: StoreException) -> None:
        if not self._active:
            return
        self.stop()
        if self._on_error is not None:
            self._on_error(error)
        else:
            logger.warning("Subscription on %s ended: %s", self.ref.path, error.message)


class SubscriptionManager:
    """Creates subscriptions over an injected store and tracks the live ones."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store
        self._live: list[Subscription] = []

    @property
    def active_count(self) -> int:
        return len(self._live)

    def _track(self, subscription: Subscription) -> Subscription:
        self._live.append(subscription)
        subscription.start()
        return subscription

    def _forget(self, subscription: Subscription) -> None:
        if subscription in self._live:
            self._live.remove(subscription)

    def subscribe_collection(
        self,
        ref: CollectionPath,
        on_list: ListCallback,
        on_error: ErrorHandler | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> Subscription:
        """Deliver the whole collection as a list of dicts on every change.

        With ``order_by``, items lacking the field sort last.
        """

        def emit(records: list[StoreRecord]) -> None:
            items = [r.to_dict() for r in records]
            if order_by is not None:
                present = [i for i in items if i.get(order_by) is not None]
                missing = [i for i in items if i.get(order_by) is None]
                present.sort(key=lambda i: i[order_by], reverse=descending)
                items = present + missing
            on_list(items)

        return self._track(Subscription(self._store, ref, emit, on_error, on_stop=self._forget))

    def subscribe_document(
        self,
        ref: DocumentPath,
        on_record: RecordCallback,
        on_error: ErrorHandler | None = None,
    ) -> Subscription:
        """Deliver the document as a dict (or None when it does not exist) on every change."""

        def emit(record: StoreRecord | None) -> None:
            on_record(record.to_dict() if record is not None else None)

        return self._track(Subscription(self._store, ref, emit, on_error, on_stop=self._forget))

    def stop_all(self) -> None:
        for subscription in list(self._live):
            subscription.stop()
        self._live.clear()
