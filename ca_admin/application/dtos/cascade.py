"""DTOs for cascade deletion results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CascadeError:
    """One failed step inside a cascade (logged, never fatal on its own)."""

    phase: str
    """'years', 'documents', 'generic', 'client' or 'legacy'."""

    path: str
    message: str


@dataclass
class CascadeDeleteResult:
    """Outcome of deleting a client and its subtree.

    Counts cover both the canonical and the legacy client location.
    """

    client_path: str
    deleted_years: int = 0
    deleted_documents: int = 0
    deleted_generic: int = 0
    client_found: bool = False
    client_deleted: bool = False
    legacy_checked: bool = False
    errors: list[CascadeError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when the client is gone and no descendant step failed."""
        return self.client_deleted and not self.errors


@dataclass
class SubtreeDeleteResult:
    """Counts for a client or year subtree purge (no root document delete)."""

    deleted_years: int = 0
    deleted_documents: int = 0
    deleted_generic: int = 0
    errors: list[CascadeError] = field(default_factory=list)
