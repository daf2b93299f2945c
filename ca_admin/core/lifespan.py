"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: the document store the routes
use, the reference builder and the subscription manager. A store already
placed on app.state (tests) is used as-is and not closed here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.core.config import Settings, get_settings
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.services.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings) -> IDocumentStore | None:
    """Return the configured store, or None when Firestore cannot be initialized."""
    if settings.store_backend == "memory":
        from ca_admin.infrastructure.memory.store import InMemoryDocumentStore

        logger.warning("Using in-memory document store; data is lost on shutdown")
        return InMemoryDocumentStore()

    from ca_admin.infrastructure.firebase.client import create_firestore_store

    try:
        return create_firestore_store(settings)
    except Exception:
        logger.exception("Firestore initialization failed")
        return None


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store on startup; stop subscriptions and close the store on shutdown."""
    settings = get_settings()

    # ---- Startup ----
    owned_store: IDocumentStore | None = None
    store = getattr(app.state, "document_store", None)
    if store is None:
        owned_store = store = build_document_store(settings)
        app.state.document_store = store
    app.state.references = ReferenceBuilder(settings.tenant_root, settings.legacy_tenant_root)
    app.state.subscriptions = SubscriptionManager(store) if store is not None else None

    yield

    # ---- Shutdown ----
    if getattr(app.state, "subscriptions", None) is not None:
        app.state.subscriptions.stop_all()
        logger.info("Subscriptions stopped")

    if owned_store is not None:
        await owned_store.aclose()
        app.state.document_store = None
        logger.info("Document store closed")
