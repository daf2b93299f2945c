"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Every non-success response is raised as StoreException with the
Firestore status in lowercase-hyphen form ('not-found', 'unavailable', ...).
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError

from ca_admin.application.dtos.store import QueryFilter
from ca_admin.domain.exceptions import StoreException
from ca_admin.infrastructure.firebase._rest_encoding import _encode_value

logger = logging.getLogger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_PAGE_SIZE = 300

_HTTP_STATUS_CODES: dict[int, str] = {
    400: "invalid-argument",
    401: "unauthenticated",
    403: "permission-denied",
    404: "not-found",
    409: "already-exists",
    412: "failed-precondition",
    429: "resource-exhausted",
    500: "internal",
    503: "unavailable",
    504: "deadline-exceeded",
}


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_from_response(resp: httpx.Response, path: str | None) -> StoreException:
    """Build a StoreException from a Firestore error body ({"error": {"status", "message"}})."""
    status = None
    message = resp.text or f"HTTP {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, list) and body:
        body = body[0]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        status = body["error"].get("status")
        message = body["error"].get("message") or message
    if status:
        code = status.lower().replace("_", "-")
    else:
        code = _HTTP_STATUS_CODES.get(resp.status_code, "unknown")
    return StoreException(code, message, path)


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    *,
    params: dict[str, Any] | None = None,
    path: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 on GET returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        if method == "GET":
            resp = await client.get(url, headers=headers, params=params)
        elif method == "POST":
            resp = await client.post(url, headers=headers, json=body, params=params)
        else:
            raise ValueError(f"Unsupported method: {method!r}")
    except httpx.HTTPError as e:
        raise StoreException("unavailable", f"Firestore request failed: {e}", path) from e
    if resp.status_code == 404 and method == "GET":
        return None
    if resp.status_code not in (200, 204):
        raise _error_from_response(resp, path)
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array-contains": "ARRAY_CONTAINS",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


def build_structured_query(
    collection_id: str,
    filters: list[QueryFilter] | None = None,
    order_by: str | None = None,
    descending: bool = False,
) -> dict[str, Any]:
    """Build a runQuery ``structuredQuery`` for one collection (no descendants)."""
    structured: dict[str, Any] = {"from": [{"collectionId": collection_id}]}
    field_filters = []
    for f in filters or []:
        op = _OP_MAP.get(f.op)
        if op is None:
            raise StoreException("invalid-argument", f"Unsupported filter operator: {f.op!r}")
        field_filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": f.field},
                    "op": op,
                    "value": _encode_value(f.value),
                }
            }
        )
    if len(field_filters) == 1:
        structured["where"] = field_filters[0]
    elif field_filters:
        structured["where"] = {"compositeFilter": {"op": "AND", "filters": field_filters}}
    if order_by is not None:
        structured["orderBy"] = [
            {
                "field": {"fieldPath": order_by},
                "direction": "DESCENDING" if descending else "ASCENDING",
            }
        ]
    return structured


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin).

    Paths passed in are relative to the database root
    (e.g. ``tenants/a_b@x_com/clients``).
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._database = f"projects/{project_id}/databases/(default)"
        self._prefix = f"{self._database}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def prefix(self) -> str:
        return self._prefix

    def name_for(self, path: str) -> str:
        """Full resource name for a relative document path."""
        return f"{self._prefix}/{path}"

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        if self._credentials is None:
            return None
        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except GoogleAuthError as e:
            logger.warning("Firestore token refresh failed: %s", e)
            raise StoreException("unauthenticated", f"Token refresh failed: {e}") from e

    async def get_document(self, path: str) -> dict | None:
        """Fetch one document resource; None if it does not exist."""
        url = f"{_BASE}/{self._prefix}/{quote(path, safe='/@')}"
        return await _request_async(
            self._http, url, access_token=await self.get_token(), path=path
        )

    async def list_documents(self, collection_path: str) -> list[dict]:
        """List every document directly in a collection, following page tokens."""
        url = f"{_BASE}/{self._prefix}/{quote(collection_path, safe='/@')}"
        documents: list[dict] = []
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {"pageSize": _PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            out = await _request_async(
                self._http,
                url,
                access_token=await self.get_token(),
                params=params,
                path=collection_path,
            )
            if not out:
                break
            documents.extend(out.get("documents", []))
            page_token = out.get("nextPageToken")
            if not page_token:
                break
        return documents

    async def run_query(self, parent_path: str | None, structured: dict[str, Any]) -> list[dict]:
        """Execute a structured query under ``parent_path`` (None for root collections)."""
        parent = self._prefix
        if parent_path:
            parent = f"{self._prefix}/{quote(parent_path, safe='/@')}"
        url = f"{_BASE}/{parent}:runQuery"
        resp = await _request_async(
            self._http,
            url,
            method="POST",
            body={"structuredQuery": structured},
            access_token=await self.get_token(),
            path=parent_path,
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        return [item["document"] for item in items if "document" in item]

    async def commit(self, writes: list[dict]) -> dict:
        """Apply writes atomically via ``documents:commit``."""
        url = f"{_BASE}/{self._prefix}:commit"
        logger.debug("Committing %s Firestore writes", len(writes))
        return await _request_async(
            self._http,
            url,
            method="POST",
            body={"writes": writes},
            access_token=await self.get_token(),
        )
