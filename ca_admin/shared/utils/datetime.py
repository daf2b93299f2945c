"""UTC datetime helpers. Every timestamp the store sees is timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize before encoding: naive values are taken as UTC, aware ones converted."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_utc_now() -> str:
    """Current UTC time as ISO-8601, for migration log entries."""
    return utc_now().isoformat()
