"""Domain value objects for client identity and fiscal years.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value. Each ``parse``
classmethod sanitizes raw form input first, then validates.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from ca_admin.domain.exceptions import ValidationException

_NON_DIGIT_RE = re.compile(r"\D")
_NON_PAN_RE = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class ContactNumber:
    """Ten-digit Indian mobile number; doubles as the client document id."""

    value: str

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[6-9]\d{9}$")

    def __post_init__(self) -> None:
        if not self.value:
            raise ValidationException("Contact number is required", field="contact")
        if len(self.value) != 10:
            raise ValidationException(
                "Contact number must be exactly 10 digits", field="contact"
            )
        if not self.PATTERN.match(self.value):
            raise ValidationException(
                "Contact number must start with 6, 7, 8, or 9", field="contact"
            )

    @classmethod
    def parse(cls, raw: str | None) -> "ContactNumber":
        """Strip every non-digit (spaces, dashes, brackets) then validate."""
        return cls(_NON_DIGIT_RE.sub("", raw or ""))


@dataclass(frozen=True)
class PanNumber:
    """Permanent Account Number (5 letters, 4 digits, 1 letter). Empty when not given."""

    value: str

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

    def __post_init__(self) -> None:
        if self.value and not self.PATTERN.match(self.value):
            raise ValidationException(
                "Invalid PAN format. Expected format: ABCDE1234F", field="pan"
            )

    @classmethod
    def parse(cls, raw: str | None) -> "PanNumber":
        if not raw or not raw.strip():
            return cls("")
        return cls(_NON_PAN_RE.sub("", raw.upper()))


@dataclass(frozen=True)
class EmailAddress:
    """Optional contact email for a client. Empty when not given."""

    value: str

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    MAX_LENGTH: ClassVar[int] = 254

    def __post_init__(self) -> None:
        if not self.value:
            return
        if not self.PATTERN.match(self.value):
            raise ValidationException(
                "Please enter a valid email address", field="email"
            )
        if len(self.value) > self.MAX_LENGTH:
            raise ValidationException("Email address is too long", field="email")

    @classmethod
    def parse(cls, raw: str | None) -> "EmailAddress":
        return cls((raw or "").strip().lower())


@dataclass(frozen=True)
class FiscalYear:
    """Indian fiscal-year label such as '2024-25' (April 2024 to March 2025).

    Accepts either the full label or the 4-digit start year. The short
    suffix must be the start year plus one, modulo 100.
    """

    value: str

    LABEL_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^(\d{4})-(\d{2})$")
    STORED_ID_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^(\d{4})(?:-\d{2})?$")
    MIN_START: ClassVar[int] = 1900
    MAX_START: ClassVar[int] = 2100

    def __post_init__(self) -> None:
        match = self.LABEL_PATTERN.match(self.value)
        if not match:
            raise ValidationException(
                "Year must be a 4-digit year or a label like 2024-25", field="year"
            )
        start = int(match.group(1))
        if start < self.MIN_START or start > self.MAX_START:
            raise ValidationException(
                f"Please enter a year between {self.MIN_START} and {self.MAX_START}",
                field="year",
            )
        if int(match.group(2)) != (start + 1) % 100:
            raise ValidationException(
                f"Year label {self.value} does not span consecutive years", field="year"
            )

    @property
    def start_year(self) -> int:
        return int(self.value[:4])

    @classmethod
    def parse(cls, raw: str | int | None) -> "FiscalYear":
        """Build from '2024' / 2024 (formatted as '2024-25') or from '2024-25'."""
        text = str(raw).strip() if raw is not None else ""
        if text.isdigit() and len(text) == 4:
            start = int(text)
            return cls(f"{start}-{str(start + 1)[-2:]}")
        return cls(text)

    @classmethod
    def existing(cls, raw: str | int | None) -> str:
        """Validate the id of a stored year folder and return it unchanged.

        Older folders are keyed by the bare start year ('2024'), newer ones
        by the label ('2024-25'); both must stay addressable as written.
        """
        text = str(raw).strip() if raw is not None else ""
        match = cls.STORED_ID_PATTERN.match(text)
        if not match:
            raise ValidationException(
                "Year must be a 4-digit year or a label like 2024-25", field="year"
            )
        start = int(match.group(1))
        if start < cls.MIN_START or start > cls.MAX_START:
            raise ValidationException(
                f"Please enter a year between {cls.MIN_START} and {cls.MAX_START}",
                field="year",
            )
        return text


def year_sort_key(label: str) -> int:
    """Start year of a year label ('2024-25' -> 2024); unparseable labels sort last."""
    head = label.split("-", 1)[0]
    return int(head) if head.isdigit() else -1


def sort_years_desc(labels: list[str]) -> list[str]:
    """De-duplicate and order year labels newest start-year first."""
    return sorted(set(labels), key=year_sort_key, reverse=True)
