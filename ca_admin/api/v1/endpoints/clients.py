"""Client API: thin routes delegating to ClientRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ca_admin.api.v1.dependencies import TenantDep, get_client_repo
from ca_admin.application.dtos.client import ClientInput, ClientResult
from ca_admin.domain.exceptions import ResourceNotFoundException
from ca_admin.infrastructure.firebase.repositories import ClientRepository
from ca_admin.schemas.client import (
    BulkClientImportRequest,
    BulkImportResponse,
    ClientCreateRequest,
    ClientDeletionResponse,
    ClientResponse,
    ClientUpdateRequest,
    PushTokenRemovalResponse,
)

router = APIRouter()

ClientRepoDep = Annotated[ClientRepository, Depends(get_client_repo)]


def _to_response(client: ClientResult) -> ClientResponse:
    response = ClientResponse.model_validate(client)
    return response.model_copy(update={"has_push_token": bool(client.fcm_token)})


@router.get("", response_model=list[ClientResponse])
async def list_clients(
    tenant: TenantDep,
    repo: ClientRepoDep,
    active_only: Annotated[bool, Query(description="Only active clients")] = False,
):
    """List the tenant's clients sorted by name."""
    clients = await repo.list_clients(tenant, active_only=active_only)
    return [_to_response(c) for c in clients]


@router.post("", response_model=ClientResponse, status_code=201)
async def upsert_client(body: ClientCreateRequest, tenant: TenantDep, repo: ClientRepoDep):
    """Create a client, or merge into the existing one with the same contact."""
    client = await repo.upsert_client(
        tenant,
        ClientInput(
            name=body.name,
            contact=body.contact,
            pan=body.pan,
            email=body.email,
            firm_id=body.firm_id,
        ),
    )
    return _to_response(client)


@router.post("/bulk", response_model=BulkImportResponse)
async def bulk_import_clients(
    body: BulkClientImportRequest, tenant: TenantDep, repo: ClientRepoDep
):
    """Upsert many clients; rejected rows are reported and do not stop the import."""
    rows = [
        ClientInput(
            name=row.name,
            contact=row.contact,
            pan=row.pan,
            email=row.email,
            firm_id=row.firm_id,
        )
        for row in body.clients
    ]
    return BulkImportResponse.model_validate(await repo.bulk_upsert(tenant, rows))


@router.get("/{contact}", response_model=ClientResponse)
async def get_client(contact: str, tenant: TenantDep, repo: ClientRepoDep):
    client = await repo.get_client(tenant, contact)
    if client is None:
        raise ResourceNotFoundException("client", contact)
    return _to_response(client)


@router.patch("/{contact}", response_model=ClientResponse)
async def update_client(
    contact: str, body: ClientUpdateRequest, tenant: TenantDep, repo: ClientRepoDep
):
    """Partial update; ``is_active`` toggles the client without touching other fields."""
    client = await repo.update_client(
        tenant,
        contact,
        name=body.name,
        pan=body.pan,
        email=body.email,
        firm_id=body.firm_id,
    )
    if body.is_active is not None:
        client = await repo.set_active(tenant, contact, body.is_active)
    return _to_response(client)


@router.delete("/{contact}", response_model=ClientDeletionResponse)
async def delete_client(contact: str, tenant: TenantDep, repo: ClientRepoDep):
    """Delete the client with all years, documents and generic documents."""
    result = await repo.delete_client(tenant, contact)
    return ClientDeletionResponse.model_validate(result)


@router.delete("/{contact}/push-token", response_model=PushTokenRemovalResponse)
async def remove_push_token(contact: str, tenant: TenantDep, repo: ClientRepoDep):
    removed = await repo.remove_token(tenant, contact)
    if not removed:
        raise ResourceNotFoundException("client", contact)
    return PushTokenRemovalResponse(client_id=contact, removed=True)
