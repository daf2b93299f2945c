"""Shared utilities: logging and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from ca_admin.shared.utils import ensure_utc, generate_cuid, iso_utc_now, utc_now

__all__ = ["ensure_utc", "generate_cuid", "iso_utc_now", "utc_now"]
