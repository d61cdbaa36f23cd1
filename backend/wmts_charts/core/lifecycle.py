"""Plugin start/stop lifecycle and status reporting.

Startup failures never propagate to the caller: they are logged and
reflected in the PluginStatus, which the ``/health`` endpoint exposes.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from typing import TYPE_CHECKING

from wmts_charts.core import errors
from wmts_charts.services import ingest

if TYPE_CHECKING:
    import httpx

    from wmts_charts.core import config
    from wmts_charts.db import registry as db_registry

logger = logging.getLogger(__name__)

MIN_PYTHON = (3, 12)


@dataclasses.dataclass
class PluginStatus:
    """Last status or error message reported by the plugin."""

    message: str = "Not started"
    error: bool = False

    def set_status(self, message: str) -> None:
        self.message = message
        self.error = False

    def set_error(self, message: str) -> None:
        self.message = message
        self.error = True


def check_runtime(version_info: tuple[int, ...] = tuple(sys.version_info)) -> None:
    """Verify the interpreter meets the minimum supported version.

    Raises:
        UnsupportedRuntimeError: If the interpreter is older than MIN_PYTHON.
    """
    if version_info[:2] < MIN_PYTHON:
        required = ".".join(str(part) for part in MIN_PYTHON)
        raise errors.UnsupportedRuntimeError(
            f"Error: Python {required} or later required!"
        )


async def start(
    registry: db_registry.ChartRegistry,
    settings: config.Settings,
    status: PluginStatus,
    transport_override: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Start the plugin: check the runtime, then ingest all servers.

    Args:
        registry: Registry to populate.
        settings: Applied settings.
        status: Status object updated with the outcome.
        transport_override: Custom httpx transport for upstream requests.
    """
    logger.debug("** starting..... **")
    try:
        check_runtime()
    except errors.UnsupportedRuntimeError as exc:
        logger.error("%s", exc)
        status.set_error(str(exc))
        return

    logger.debug(
        "Applied configuration: %s",
        [server.model_dump(by_alias=True) for server in settings.server_configs()],
    )
    try:
        await ingest.refresh_registry(registry, settings, transport_override)
    except Exception:
        logger.exception("** EXCEPTION: **")
        status.set_error("Started with errors!")
        return

    status.set_status("Started")


def stop(status: PluginStatus) -> None:
    logger.debug("** shutting down **")
    status.set_status("Stopped")
