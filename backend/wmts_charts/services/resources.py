"""Version-aware rendering and the ``charts`` resource provider.

``render`` turns a stored ChartProvider into the plain record returned to
API consumers. Version 1 carries the legacy ``tilemapUrl``/``chartLayers``
fields, version 2 the ``url``/``layers`` fields. The record is always built
fresh, so the stored snapshot is never altered by a read.

Example:
    >>> from wmts_charts.services import resources
    >>> resources.render(chart, 1)
    {'identifier': 'bathymetry', 'name': 'Bathymetry', 'description': '',
     'type': 'wmts', 'format': 'png',
     'tilemapUrl': 'http://example.com/wmts', 'chartLayers': ['bathymetry']}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from wmts_charts.core import errors
from wmts_charts.services import derived, ingest

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wmts_charts.core import config
    from wmts_charts.db import models as db_models
    from wmts_charts.db import registry as db_registry

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "charts"


def render(provider: db_models.ChartProvider, version: int = 1) -> dict[str, Any]:
    """Build the API record of a chart for one API version.

    Args:
        provider: Stored chart record (left untouched).
        version: 1 for the tilemap view, 2 for the layers view.

    Returns:
        New dictionary with base fields and the requested view flattened in.

    Raises:
        ValueError: For versions other than 1 and 2.
    """
    if version == 1:
        view = provider.view_v1
    elif version == 2:
        view = provider.view_v2
    else:
        raise ValueError(f"Unsupported API version: {version}")

    record: dict[str, Any] = {
        "identifier": provider.identifier,
        "name": provider.name,
        "description": provider.description,
        "type": provider.kind,
    }
    optional = {
        "bounds": list(provider.bounds) if provider.bounds else None,
        "format": provider.format,
        "minzoom": provider.minzoom,
        "maxzoom": provider.maxzoom,
        "url": provider.url,
    }
    record.update({key: value for key, value in optional.items() if value is not None})
    record.update(provider.extra)
    if view is not None:
        record.update(view.as_dict())

    return record


def render_all(
    charts: Mapping[str, db_models.ChartProvider],
    version: int = 1,
) -> dict[str, dict[str, Any]]:
    """Render every chart of a snapshot keyed by identifier."""
    return {
        identifier: render(chart, version)
        for identifier, chart in charts.items()
    }


class ChartResourceProvider:
    """Generic list/get/set/delete provider for the ``charts`` type.

    Reads are served from the registry snapshot at API version 2. Chart
    resources are read-only: set and delete always fail.
    """

    type = RESOURCE_TYPE
    version = 2

    def __init__(
        self,
        registry: db_registry.ChartRegistry,
        settings: config.Settings,
        transport_override: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.transport_override = transport_override

    async def list_resources(
        self,
        query: Mapping[str, Any] | None = None,
    ) -> dict[str, dict[str, Any]]:
        logger.debug("Listing %s resources: %s", self.type, query)
        return render_all(self.registry.snapshot(), self.version)

    async def get_resource(self, identifier: str) -> dict[str, Any]:
        """Return one rendered chart.

        With derived resources enabled, a ``-metadata`` identifier is
        fetched live from its server; the stored record is the fallback.
        A stored record of another kind (a real layer whose identifier
        happens to end in ``-metadata``) is returned as is.

        Raises:
            ChartNotFoundError: If nothing is registered under the id.
        """
        stored = self.registry.get(identifier)
        chart = None
        if self.settings.derived_resources and (
            stored is None or stored.kind == derived.METADATA_KIND
        ):
            chart = await self._refresh_metadata(identifier)
        if chart is None:
            chart = stored
        if chart is None:
            raise errors.ChartNotFoundError(identifier)

        return render(chart, self.version)

    async def set_resource(self, identifier: str, value: Any) -> None:
        logger.debug("Rejected set of %s resource %s", self.type, identifier)
        raise errors.NotImplementedOperationError()

    async def delete_resource(self, identifier: str) -> None:
        logger.debug("Rejected delete of %s resource %s", self.type, identifier)
        raise errors.NotImplementedOperationError()

    async def _refresh_metadata(
        self,
        identifier: str,
    ) -> db_models.ChartProvider | None:
        base_id, variant = derived.split_identifier(identifier)
        if variant != "metadata":
            return None

        layer = self.registry.get(base_id)
        if layer is None or layer.view_v2 is None:
            return None

        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            follow_redirects=True,
            transport=self.transport_override,
        ) as client:
            context = ingest.IngestionContext(
                client=client,
                derived_resources=True,
            )
            charts = await derived.expand_layer(
                context,
                layer,
                layer.view_v2.url,
                identifier=identifier,
            )

        return charts[0] if charts else None
