"""DTOs for legacy-layout migration runs."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MigrationLogEntry:
    """Timestamped line in the migration log (also used for errors)."""

    timestamp: str
    level: str
    message: str
    error: str | None = None


@dataclass(frozen=True)
class TenantMigrationResult:
    """Result of migrating one tenant's legacy subtree."""

    tenant: str
    success: bool
    operation_count: int = 0
    commits: int = 0
    error: str | None = None


@dataclass
class MigrationSummary:
    """Result of a multi-tenant run; one failed tenant never stops the rest."""

    results: list[TenantMigrationResult] = field(default_factory=list)
    log: list[MigrationLogEntry] = field(default_factory=list)
    errors: list[MigrationLogEntry] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def success(self) -> bool:
        return bool(self.results) and self.failure_count == 0


@dataclass(frozen=True)
class TenantVerification:
    """Counts re-read from the new structure, for comparison with the legacy source."""

    tenant: str
    profile: bool
    clients: int
    years: int
    documents: int
    generic_documents: int = 0
    banners: int = 0
    admin: int = 0
    error: str | None = None
