"""Derived tile-JSON resources for normalized WMTS layers.

For every layer ``<id>`` two companion resources can be published:

    - ``<id>-tilejson``: a descriptor pointing at ``<server>/<id>.json``,
      synthesized without any network access.
    - ``<id>-metadata``: the tile-JSON document at ``<server>/<id>.json``,
      fetched and tagged with the derived identifier and kind "tilelayer".

A failed metadata fetch only drops that one derived resource.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Literal

from wmts_charts.core import errors
from wmts_charts.db import models as db_models
from wmts_charts.services import transport

if TYPE_CHECKING:
    from wmts_charts.services import ingest

logger = logging.getLogger(__name__)

Variant = Literal["tilejson", "metadata"]

TILEJSON_SUFFIX = "-tilejson"
METADATA_SUFFIX = "-metadata"
METADATA_KIND: db_models.ChartKind = "tilelayer"


def split_identifier(identifier: str) -> tuple[str, Variant | None]:
    """Split a resource identifier into base layer id and variant.

    Args:
        identifier: Base, ``-tilejson`` or ``-metadata`` identifier.

    Returns:
        Tuple of the base layer identifier and the variant (None for the
        base layer itself).
    """
    if identifier.endswith(TILEJSON_SUFFIX):
        return identifier[: -len(TILEJSON_SUFFIX)], "tilejson"
    if identifier.endswith(METADATA_SUFFIX):
        return identifier[: -len(METADATA_SUFFIX)], "metadata"

    return identifier, None


def tilejson_url(layer: db_models.ChartProvider, server_url: str) -> str:
    return f"{server_url.rstrip('/')}/{layer.identifier}.json"


def tilejson_descriptor(
    layer: db_models.ChartProvider,
    server_url: str,
) -> db_models.ChartProvider:
    """Synthesize the ``-tilejson`` descriptor of a layer."""
    return db_models.ChartProvider(
        identifier=f"{layer.identifier}{TILEJSON_SUFFIX}",
        name=layer.name,
        description=layer.description,
        kind="tilejson",
        bounds=layer.bounds,
        format=layer.format,
        url=tilejson_url(layer, server_url),
    )


async def metadata_descriptor(
    context: ingest.IngestionContext,
    layer: db_models.ChartProvider,
    server_url: str,
) -> db_models.ChartProvider | None:
    """Fetch the tile-JSON metadata of a layer as a ``-metadata`` resource.

    Args:
        context: Ingestion context providing the HTTP client.
        layer: Normalized base layer.
        server_url: Configured server URL.

    Returns:
        The metadata resource, or None when the document could not be
        fetched or decoded.
    """
    url = tilejson_url(layer, server_url)
    try:
        payload = await transport.fetch_json(context.client, url)
    except errors.TransportError as exc:
        logger.warning(
            "Skipping metadata for layer %s: %s", layer.identifier, exc
        )
        return None

    name = payload.get("name")
    description = payload.get("description")
    return db_models.ChartProvider(
        identifier=f"{layer.identifier}{METADATA_SUFFIX}",
        name=name if isinstance(name, str) else layer.name,
        description=(
            description if isinstance(description, str) else layer.description
        ),
        kind=METADATA_KIND,
        extra={
            key: value
            for key, value in payload.items()
            if key not in ("name", "description", "identifier", "type")
        },
    )


async def expand_layer(
    context: ingest.IngestionContext,
    layer: db_models.ChartProvider,
    server_url: str,
    identifier: str | None = None,
) -> list[db_models.ChartProvider]:
    """Compute a layer and its derived resources.

    Args:
        context: Ingestion context providing the HTTP client.
        layer: Normalized base layer.
        server_url: Configured server URL.
        identifier: When given, only the matching variant is computed.

    Returns:
        The requested records: base layer, tilejson descriptor and metadata
        resource when no identifier is given.
    """
    if identifier is not None:
        base_id, variant = split_identifier(identifier)
        if base_id != layer.identifier:
            return []
        if variant is None:
            return [layer]
        if variant == "tilejson":
            return [tilejson_descriptor(layer, server_url)]

        metadata = await metadata_descriptor(context, layer, server_url)
        return [metadata] if metadata else []

    charts = [layer, tilejson_descriptor(layer, server_url)]
    metadata = await metadata_descriptor(context, layer, server_url)
    if metadata:
        charts.append(metadata)

    return charts


async def expand_layers(
    context: ingest.IngestionContext,
    layers: list[db_models.ChartProvider],
    server_url: str,
) -> list[db_models.ChartProvider]:
    """Expand every layer of one server concurrently, keeping layer order."""
    expanded = await asyncio.gather(
        *(expand_layer(context, layer, server_url) for layer in layers)
    )
    return [chart for charts in expanded for chart in charts]
