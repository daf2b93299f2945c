"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Store backend credentials and batch limits are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Hard ceiling on operations inside one Firestore commit.
FIRESTORE_BATCH_LIMIT = 500


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_backend_and_limits rejects a
    Firestore backend without credentials and migration batch limits
    above the store's commit ceiling.
    """

    # App
    app_name: str = "ca-admin"
    app_version: str = "1.0.0"
    debug: bool = False

    # Document store: "firestore" (REST v1) or "memory" (in-process, tests/dev)
    store_backend: str = "firestore"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_timeout_seconds: float = 30.0

    # Hierarchy roots. Clients created by the previous console live under
    # legacy_tenant_root; cascade delete re-checks that location.
    tenant_root: str = "tenants"
    legacy_tenant_root: str = "ca_admin"

    # Live listeners over REST poll at this interval.
    listen_poll_interval_seconds: float = 2.0

    # Migration
    migration_batch_limit: int = FIRESTORE_BATCH_LIMIT
    migration_commit_attempts: int = 3

    # HTTP
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"
    tenant_header_name: str = "X-Tenant-Email"
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend_and_limits(self) -> "Settings":
        """Validate store backend and numeric limits.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no credentials; data lives for the process lifetime.
        """
        if self.store_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When store_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.store_backend != "memory":
            raise ValueError(
                f"store_backend must be 'firestore' or 'memory', got: {self.store_backend!r}"
            )
        if not 1 <= self.migration_batch_limit <= FIRESTORE_BATCH_LIMIT:
            raise ValueError(
                f"migration_batch_limit must be between 1 and {FIRESTORE_BATCH_LIMIT}"
            )
        if self.migration_commit_attempts < 1:
            raise ValueError("migration_commit_attempts must be at least 1")
        if self.listen_poll_interval_seconds <= 0:
            raise ValueError("listen_poll_interval_seconds must be positive")
        for name in ("tenant_root", "legacy_tenant_root"):
            value = getattr(self, name)
            if not value or "/" in value:
                raise ValueError(f"{name} must be a single non-empty path segment")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
