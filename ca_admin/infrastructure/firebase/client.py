"""Firestore store construction (REST-based, no firebase-admin).

Built at app startup (or by a script) from either FIREBASE_SERVICE_ACCOUNT_KEY
(JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (file path). The returned
store is owned by the caller, which must ``await store.aclose()``.
"""

import json
import logging
from pathlib import Path

from ca_admin.core.config import Settings
from ca_admin.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)
from ca_admin.infrastructure.firebase.store import FirestoreDocumentStore

logger = logging.getLogger(__name__)


def _load_key_dict(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def create_firestore_store(settings: Settings) -> FirestoreDocumentStore:
    """Build a Firestore-backed document store from service account settings.

    Raises:
        ValueError: Credentials are missing, unreadable or lack 'project_id'.
    """
    key_dict = _load_key_dict(settings)
    if not key_dict:
        raise ValueError("Firestore credentials are not configured")
    project_id = key_dict.get("project_id")
    if not project_id:
        raise ValueError("Firebase service account JSON missing 'project_id'")

    cred = _get_credentials(key_dict)
    client = FirestoreRESTClient(
        project_id, cred, timeout=settings.firestore_timeout_seconds
    )
    logger.info("Firestore store initialized for project %s", project_id)
    return FirestoreDocumentStore(
        client, poll_interval=settings.listen_poll_interval_seconds
    )
