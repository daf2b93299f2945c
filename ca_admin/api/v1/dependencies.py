"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the tenant, the document store and the
repositories/services built on it. Routes depend only on these, never
on infrastructure construction directly. The store itself is created by
the lifespan and held on app.state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from ca_admin.application.interfaces.store import IDocumentStore
from ca_admin.core.config import get_settings
from ca_admin.infrastructure.firebase.paths import tenant_id_from_email
from ca_admin.infrastructure.firebase.references import ReferenceBuilder
from ca_admin.infrastructure.firebase.repositories import (
    BannerRepository,
    ClientRepository,
    DocumentRepository,
    NotificationRepository,
    YearRepository,
)
from ca_admin.infrastructure.firebase.services import (
    CascadeDeleteService,
    CounterAggregator,
    MigrationService,
)


def get_tenant(request: Request) -> str:
    """Tenant email from the configured header (400 when missing or unusable)."""
    name = get_settings().tenant_header_name
    value = request.headers.get(name)
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"Missing required header: {name}")
    if tenant_id_from_email(value) is None:
        raise HTTPException(status_code=400, detail=f"Invalid tenant in header: {name}")
    return value.strip()


def get_document_store(request: Request) -> IDocumentStore:
    """Store from app.state; 503 when the backend could not be initialized."""
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Document store is not configured")
    return store


def get_references(request: Request) -> ReferenceBuilder:
    refs = getattr(request.app.state, "references", None)
    if refs is None:
        settings = get_settings()
        refs = ReferenceBuilder(settings.tenant_root, settings.legacy_tenant_root)
    return refs


StoreDep = Annotated[IDocumentStore, Depends(get_document_store)]
RefsDep = Annotated[ReferenceBuilder, Depends(get_references)]


def get_cascade_service(store: StoreDep, refs: RefsDep) -> CascadeDeleteService:
    return CascadeDeleteService(store, refs)


def get_counter_aggregator(store: StoreDep, refs: RefsDep) -> CounterAggregator:
    return CounterAggregator(store, refs)


def get_client_repo(
    store: StoreDep,
    refs: RefsDep,
    cascade: Annotated[CascadeDeleteService, Depends(get_cascade_service)],
) -> ClientRepository:
    return ClientRepository(store, refs, cascade)


def get_year_repo(
    store: StoreDep,
    refs: RefsDep,
    cascade: Annotated[CascadeDeleteService, Depends(get_cascade_service)],
) -> YearRepository:
    return YearRepository(store, refs, cascade)


def get_document_repo(
    store: StoreDep,
    refs: RefsDep,
    counter: Annotated[CounterAggregator, Depends(get_counter_aggregator)],
) -> DocumentRepository:
    return DocumentRepository(store, refs, counter)


def get_notification_repo(store: StoreDep, refs: RefsDep) -> NotificationRepository:
    return NotificationRepository(store, refs)


def get_banner_repo(store: StoreDep, refs: RefsDep) -> BannerRepository:
    return BannerRepository(store, refs)


def get_migration_service(store: StoreDep, refs: RefsDep) -> MigrationService:
    settings = get_settings()
    return MigrationService(
        store,
        refs,
        batch_limit=settings.migration_batch_limit,
        commit_attempts=settings.migration_commit_attempts,
    )


TenantDep = Annotated[str, Depends(get_tenant)]
