"""Year API: year folders under a client, renames and count reconciliation."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ca_admin.api.v1.dependencies import (
    RefsDep,
    TenantDep,
    get_counter_aggregator,
    get_year_repo,
)
from ca_admin.domain.value_objects import FiscalYear
from ca_admin.infrastructure.firebase.references import require
from ca_admin.infrastructure.firebase.repositories import YearRepository
from ca_admin.infrastructure.firebase.services import CounterAggregator
from ca_admin.schemas.year import (
    ReconcileResponse,
    YearCreateRequest,
    YearDeletionResponse,
    YearRenameRequest,
    YearRenameResponse,
    YearResponse,
)

router = APIRouter()

YearRepoDep = Annotated[YearRepository, Depends(get_year_repo)]


@router.get("/{contact}/years", response_model=list[YearResponse])
async def list_years(contact: str, tenant: TenantDep, repo: YearRepoDep):
    """Years of a client, newest first."""
    return [YearResponse.model_validate(y) for y in await repo.list_years(tenant, contact)]


@router.post("/{contact}/years", response_model=YearResponse, status_code=201)
async def add_year(contact: str, body: YearCreateRequest, tenant: TenantDep, repo: YearRepoDep):
    year = await repo.add_year(tenant, contact, body.year)
    return YearResponse.model_validate(year)


@router.patch("/{contact}/years/{year}", response_model=YearRenameResponse)
async def rename_year(
    contact: str, year: str, body: YearRenameRequest, tenant: TenantDep, repo: YearRepoDep
):
    """Move a year and its documents to another year."""
    result = await repo.rename_year(tenant, contact, year, body.year)
    return YearRenameResponse.model_validate(result)


@router.delete("/{contact}/years/{year}", response_model=YearDeletionResponse)
async def delete_year(contact: str, year: str, tenant: TenantDep, repo: YearRepoDep):
    """Delete a year with its documents and drop it from the client's years."""
    result = await repo.delete_year(tenant, contact, year)
    return YearDeletionResponse.model_validate(result)


@router.post("/{contact}/years/{year}/reconcile", response_model=ReconcileResponse)
async def reconcile_year(
    contact: str,
    year: str,
    tenant: TenantDep,
    refs: RefsDep,
    counter: Annotated[CounterAggregator, Depends(get_counter_aggregator)],
):
    """Recompute documentCount from the documents actually present."""
    label = FiscalYear.existing(year)
    count = await counter.reconcile(require(refs.year(tenant, contact, label), "year"))
    return ReconcileResponse(year=label, document_count=count)
