"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
See ca_admin.core.lifespan and ca_admin.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ca_admin.api.v1 import api_router
from ca_admin.core.config import get_settings
from ca_admin.core.exception_handlers import register_exception_handlers
from ca_admin.core.lifespan import create_lifespan
from ca_admin.middleware import RequestIDMiddleware
from ca_admin.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # First added = innermost. Request ID wraps CORS so preflights are tagged too.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
