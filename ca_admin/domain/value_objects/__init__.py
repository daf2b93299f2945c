"""Domain value objects (immutable, self-validating)."""

from ca_admin.domain.value_objects.core import (
    ContactNumber,
    EmailAddress,
    FiscalYear,
    PanNumber,
    sort_years_desc,
    year_sort_key,
)
from ca_admin.domain.value_objects.paths import CollectionPath, DocumentPath, StorePath

__all__ = [
    "CollectionPath",
    "ContactNumber",
    "DocumentPath",
    "EmailAddress",
    "FiscalYear",
    "PanNumber",
    "StorePath",
    "sort_years_desc",
    "year_sort_key",
]
