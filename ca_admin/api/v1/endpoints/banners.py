"""Banner API: thin routes delegating to BannerRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from ca_admin.api.v1.dependencies import TenantDep, get_banner_repo
from ca_admin.application.dtos.banner import BannerInput
from ca_admin.domain.exceptions import ResourceNotFoundException
from ca_admin.infrastructure.firebase.repositories import BannerRepository
from ca_admin.schemas.banner import BannerRequest, BannerResponse

router = APIRouter()

BannerRepoDep = Annotated[BannerRepository, Depends(get_banner_repo)]


def _to_input(body: BannerRequest) -> BannerInput:
    return BannerInput(
        name=body.name,
        image_url=body.image_url,
        image_path=body.image_path,
        file_name=body.file_name,
        file_size=body.file_size,
        file_type=body.file_type,
        note=body.note,
    )


@router.get("", response_model=list[BannerResponse])
async def list_banners(tenant: TenantDep, repo: BannerRepoDep):
    """Banners, newest first."""
    return [BannerResponse.model_validate(b) for b in await repo.list(tenant)]


@router.post("", response_model=BannerResponse, status_code=201)
async def create_banner(body: BannerRequest, tenant: TenantDep, repo: BannerRepoDep):
    return BannerResponse.model_validate(await repo.create(tenant, _to_input(body)))


@router.get("/{banner_id}", response_model=BannerResponse)
async def get_banner(banner_id: str, tenant: TenantDep, repo: BannerRepoDep):
    banner = await repo.get(tenant, banner_id)
    if banner is None:
        raise ResourceNotFoundException("banner", banner_id)
    return BannerResponse.model_validate(banner)


@router.put("/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: str, body: BannerRequest, tenant: TenantDep, repo: BannerRepoDep
):
    """Update a banner; a changed name moves it to the matching id."""
    return BannerResponse.model_validate(await repo.update(tenant, banner_id, _to_input(body)))


@router.delete("/{banner_id}", status_code=204)
async def delete_banner(banner_id: str, tenant: TenantDep, repo: BannerRepoDep) -> Response:
    await repo.delete(tenant, banner_id)
    return Response(status_code=204)
