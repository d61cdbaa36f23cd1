"""FastAPI application entrypoint and configuration.

This module provides the main FastAPI application factory. The application
lifespan plays the role of the plugin lifecycle: on startup every configured
WMTS server is ingested into the chart registry, on shutdown the plugin
reports itself stopped. The v1 chart routes are always served; the v2
resource provider routes only when the host major version is 2 or later.

Example:
    The application can be run with uvicorn:
        $ uvicorn wmts_charts.main:app --reload

    Or imported and used programmatically:
        >>> from wmts_charts.main import create_app
        >>> app = create_app(config.Settings(url="tiles.example.com/wmts"))
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

import fastapi
from fastapi import responses
from fastapi.middleware import cors

from wmts_charts.api import charts, resources
from wmts_charts.core import config, errors, lifecycle
from wmts_charts.db import registry as db_registry
from wmts_charts.services import resources as resource_services

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

logger = logging.getLogger(__name__)


def _plain_text_handler(status_code: int, body: str) -> Any:
    async def handler(
        request: fastapi.Request,
        exc: Exception,
    ) -> responses.PlainTextResponse:
        logger.debug("%s %s: %s", request.method, request.url.path, exc)
        return responses.PlainTextResponse(body, status_code=status_code)

    return handler


def create_app(
    settings: config.Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> fastapi.FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to apply; defaults to ``config.get_settings()``.
        transport: Custom httpx transport for upstream requests, e.g. an
            ``httpx.MockTransport`` in tests.

    Returns:
        Configured FastAPI application instance ready for ASGI server.
    """
    settings = settings or config.get_settings()
    registry = db_registry.ChartRegistry()
    status = lifecycle.PluginStatus()

    @contextlib.asynccontextmanager
    async def lifespan(_app: fastapi.FastAPI) -> AsyncIterator[None]:
        await lifecycle.start(registry, settings, status, transport)
        yield
        lifecycle.stop(status)

    app = fastapi.FastAPI(
        title="WMTS Chart Provider",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.status = status

    app.include_router(charts.router)
    if settings.host_major_version >= 2:
        logger.debug("** Registering v2 API paths **")
        app.state.resource_provider = resource_services.ChartResourceProvider(
            registry,
            settings,
            transport,
        )
        app.include_router(resources.router)

    app.add_middleware(
        cors.CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(
        errors.ChartNotFoundError,
        _plain_text_handler(404, "Not found"),
    )
    app.add_exception_handler(
        errors.NotImplementedOperationError,
        _plain_text_handler(501, "Not Implemented!"),
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # type: ignore[misc]
        """Health check endpoint reporting the plugin status.

        Returns:
            Dictionary with status "ok" and the last plugin status message.
        """
        return {"status": "ok", "plugin": status.message}

    return app


app = create_app()
