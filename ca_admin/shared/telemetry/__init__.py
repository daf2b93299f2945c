"""Logging setup and per-request log context."""

from ca_admin.shared.telemetry.logging import request_id_var, setup_logging

__all__ = ["request_id_var", "setup_logging"]
