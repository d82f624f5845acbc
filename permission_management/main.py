"""FastAPI application factory for services embedding permission management.

No business logic here: the lifespan wires the permission system from
settings (or uses the one passed in), and create_app registers the tenant
middleware and error handlers.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from permission_management.api.exception_handlers import register_exception_handlers
from permission_management.composition import PermissionSystem, build_sql_permission_system
from permission_management.core.config import get_settings
from permission_management.infrastructure.persistence.database import (
    dispose_engine,
    get_session_factory,
)
from permission_management.middleware import TenantContextMiddleware
from permission_management.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(permission_system: PermissionSystem | None = None) -> FastAPI:
    """Create the FastAPI app.

    Args:
        permission_system: Pre-built system (tests, custom wiring). When None,
            the lifespan builds the SQL-backed system from settings.
    """
    settings = get_settings()
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        system = permission_system
        owns_engine = system is None
        if system is None:
            system = build_sql_permission_system(get_session_factory(), settings=settings)
        await system.startup()
        app.state.permission_system = system
        logger.info("%s %s started", settings.app_name, settings.app_version)
        try:
            yield
        finally:
            await system.shutdown()
            if owns_engine:
                await dispose_engine()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.add_middleware(TenantContextMiddleware)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
