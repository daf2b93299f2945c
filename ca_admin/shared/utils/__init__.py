"""Shared helpers: UTC datetimes and id generation."""

from ca_admin.shared.utils.datetime import ensure_utc, iso_utc_now, utc_now
from ca_admin.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "iso_utc_now", "utc_now"]
