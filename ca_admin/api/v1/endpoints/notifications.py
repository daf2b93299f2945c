"""Notification API and push-token maintenance."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from ca_admin.api.v1.dependencies import TenantDep, get_client_repo, get_notification_repo
from ca_admin.application.dtos.client import TokenFailure
from ca_admin.application.dtos.notification import NotificationInput
from ca_admin.infrastructure.firebase.repositories import (
    ClientRepository,
    NotificationRepository,
)
from ca_admin.schemas.notification import (
    NotificationCreateRequest,
    NotificationResponse,
    NotificationUpdateRequest,
    TokenFailuresRequest,
    TokenPruneResponse,
)

router = APIRouter()

NotificationRepoDep = Annotated[NotificationRepository, Depends(get_notification_repo)]


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(tenant: TenantDep, repo: NotificationRepoDep):
    """Notifications, newest first."""
    return [NotificationResponse.model_validate(n) for n in await repo.list(tenant)]


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    body: NotificationCreateRequest, tenant: TenantDep, repo: NotificationRepoDep
):
    created = await repo.create(
        tenant,
        NotificationInput(
            title=body.title,
            message=body.message,
            priority=body.priority,
            image_url=body.image_url,
            image_path=body.image_path,
            file_name=body.file_name,
            file_size=body.file_size,
            file_type=body.file_type,
        ),
    )
    return NotificationResponse.model_validate(created)


@router.patch("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: str,
    body: NotificationUpdateRequest,
    tenant: TenantDep,
    repo: NotificationRepoDep,
):
    image = {
        "imageUrl": body.image_url,
        "imagePath": body.image_path,
        "fileName": body.file_name,
        "fileSize": body.file_size,
        "fileType": body.file_type,
    }
    updated = await repo.update(
        tenant,
        notification_id,
        title=body.title,
        message=body.message,
        priority=body.priority,
        image=image,
    )
    return NotificationResponse.model_validate(updated)


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: str, tenant: TenantDep, repo: NotificationRepoDep
) -> Response:
    await repo.delete(tenant, notification_id)
    return Response(status_code=204)


@router.post("/token-failures", response_model=TokenPruneResponse)
async def report_token_failures(
    body: TokenFailuresRequest,
    tenant: TenantDep,
    clients: Annotated[ClientRepository, Depends(get_client_repo)],
):
    """Remove push tokens whose delivery failed as unregistered or invalid."""
    failures = [TokenFailure(client_id=f.client_id, code=f.code) for f in body.failures]
    removed = await clients.prune_stale_tokens(tenant, failures)
    return TokenPruneResponse(removed=removed)
