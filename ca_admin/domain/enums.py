"""Domain enumerations for the CA admin back office.

Enums represent fixed sets of domain values stored on records.
"""

from enum import Enum


class YearStatus(str, Enum):
    """Lifecycle status stored on a Year record."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class NotificationPriority(str, Enum):
    """Priority shown on a tenant notification."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid priority values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [priority.value for priority in cls]


class PushFailureCode(str, Enum):
    """Push delivery failure codes that mean a client token is stale."""

    TOKEN_NOT_REGISTERED = "registration-token-not-registered"
    INVALID_TOKEN = "invalid-registration-token"

    @classmethod
    def is_stale(cls, code: str | None) -> bool:
        """Return True when the delivery failure code marks the token for removal.

        Accepts codes with or without the 'messaging/' prefix the push API adds.
        """
        if not code:
            return False
        bare = code.removeprefix("messaging/")
        return bare in {c.value for c in cls}
