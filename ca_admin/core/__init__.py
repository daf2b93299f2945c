"""Core: configuration, lifespan, exception handlers."""

from ca_admin.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
