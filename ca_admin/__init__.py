"""Tenant-scoped document store and back-office API for CA firms."""

__version__ = "1.0.0"
