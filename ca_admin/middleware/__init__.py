"""HTTP middleware."""

from ca_admin.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
