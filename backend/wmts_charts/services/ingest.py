"""Capabilities ingestion across all configured WMTS servers.

Each server is ingested independently: fetch the capabilities document,
parse it, normalize every layer (document order) and, when derived resources
are enabled, expand each layer. All servers run concurrently and the batch
waits for every one to settle; failed servers are logged and contribute no
records. Successful results are merged in configuration order, so a later
server overrides an earlier one on identifier collision.

Example:
    Refresh the registry of a running application:
        >>> from wmts_charts.core.config import get_settings
        >>> from wmts_charts.db.registry import ChartRegistry
        >>> from wmts_charts.services.ingest import refresh_registry

        >>> registry = ChartRegistry()
        >>> count = await refresh_registry(registry, get_settings())
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import TYPE_CHECKING

import httpx

from wmts_charts.services import capabilities, derived, normalize, transport

if TYPE_CHECKING:
    from collections.abc import Sequence

    from wmts_charts.core import config
    from wmts_charts.db import models as db_models
    from wmts_charts.db import registry as db_registry

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class IngestionContext:
    """Collaborators shared by one ingestion batch.

    Attributes:
        client: HTTP client used for every upstream request.
        derived_resources: Expand layers into tile-JSON companions.
    """

    client: httpx.AsyncClient
    derived_resources: bool = False


async def ingest_server(
    context: IngestionContext,
    server: config.WMTSServerConfig,
) -> dict[str, db_models.ChartProvider]:
    """Ingest the layers advertised by one server.

    Args:
        context: Ingestion context.
        server: Configured upstream server.

    Returns:
        Charts keyed by identifier, in source document order.

    Raises:
        TransportError: If the capabilities document cannot be fetched.
        MalformedCapabilitiesError: If the document cannot be parsed.
    """
    xml_text = await transport.fetch_text(
        context.client,
        transport.capabilities_url(server),
        expect_capabilities=True,
    )
    nodes = capabilities.parse_capabilities(xml_text)

    layers: list[db_models.ChartProvider] = []
    for node in nodes:
        layer = normalize.normalize_layer(node, server.url)
        if layer is None:
            logger.debug("Skipping layer without identifier from %s", server.url)
            continue
        layers.append(layer)

    if context.derived_resources:
        charts = await derived.expand_layers(context, layers, server.url)
    else:
        charts = layers

    logger.debug("Ingested %d charts from %s", len(charts), server.url)
    return {chart.identifier: chart for chart in charts}


async def ingest(
    context: IngestionContext,
    servers: Sequence[config.WMTSServerConfig],
) -> dict[str, db_models.ChartProvider]:
    """Ingest all servers concurrently and merge the successful results.

    Args:
        context: Ingestion context.
        servers: Servers in configuration order.

    Returns:
        Merged charts keyed by identifier; later servers win collisions.
    """
    results = await asyncio.gather(
        *(ingest_server(context, server) for server in servers),
        return_exceptions=True,
    )

    merged: dict[str, db_models.ChartProvider] = {}
    for server, result in zip(servers, results, strict=True):
        if isinstance(result, BaseException):
            logger.warning("Ingestion of %s failed: %s", server.url, result)
            continue
        merged.update(result)

    return merged


async def refresh_registry(
    registry: db_registry.ChartRegistry,
    settings: config.Settings,
    transport_override: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run a full ingestion batch and replace the registry snapshot.

    Args:
        registry: Registry to replace.
        settings: Application settings (servers, timeout, derived flag).
        transport_override: Custom httpx transport, e.g. a MockTransport.

    Returns:
        Number of charts in the new snapshot.
    """
    async with httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=True,
        transport=transport_override,
    ) as client:
        context = IngestionContext(
            client=client,
            derived_resources=settings.derived_resources,
        )
        charts = await ingest(context, settings.server_configs())

    registry.replace(charts)
    logger.info("Registry refreshed with %d charts", len(charts))
    return len(charts)
