"""API v1."""

from ca_admin.api.v1.router import api_router

__all__ = ["api_router"]
