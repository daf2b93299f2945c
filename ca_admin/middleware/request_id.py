"""Request ID middleware.

Forwards a safe client-supplied request id or generates one, exposes it to
log records through ``request_id_var`` and echoes it on the response.
Raw ASGI, so streaming responses are not buffered.
"""

import re
import uuid
from typing import Callable

from ca_admin.shared.telemetry.logging import request_id_var

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def _header_value(scope: dict, name: str) -> str | None:
    wanted = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Client value when it is safe to log, otherwise a fresh UUID4."""
    candidate = (raw or "").strip()
    if REQUEST_ID_ALLOWED_PATTERN.match(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestIDMiddleware:
    """Tag each HTTP request with an id (scope state, log context, response header)."""

    def __init__(self, app: Callable, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = resolve_request_id(_header_value(scope, self.header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        header = (self.header_name.lower().encode(), request_id.encode())

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [*message.get("headers", []), header]
            await send(message)

        token = request_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)
