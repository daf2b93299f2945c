"""Health check endpoint. No tenant; used for liveness checks."""

from fastapi import APIRouter, Request

from ca_admin.core.config import get_settings
from ca_admin.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok plus whether the document store is available."""
    store = getattr(request.app.state, "document_store", None)
    return HealthResponse(
        store_backend=get_settings().store_backend,
        store_ready=store is not None,
    )
