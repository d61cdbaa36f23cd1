"""Chart resource query endpoints (v1 API).

This module provides the direct REST query path for chart resources. Every
record is rendered in the version 1 shape, carrying ``tilemapUrl`` and
``chartLayers``.

Example:
    List all registered charts:
        >>> response = client.get("/signalk/v1/api/resources/charts")
        >>> charts = response.json()
        >>> # Returns: {"bathymetry": {"identifier": "bathymetry",
        >>> #           "type": "wmts", "tilemapUrl": "...",
        >>> #           "chartLayers": ["bathymetry"], ...}, ...}

    Get one chart:
        >>> response = client.get(
        ...     "/signalk/v1/api/resources/charts/bathymetry"
        ... )
        >>> # Unknown identifiers return 404 with a plain-text body.
"""

from typing import Any

import fastapi

from wmts_charts.core import errors
from wmts_charts.db import registry as db_registry
from wmts_charts.services import resources

API_VERSION = 1

router = fastapi.APIRouter(
    prefix="/signalk/v1/api/resources/charts",
    tags=["charts"],
)


@router.get("")
async def list_charts(
    registry: db_registry.ChartRegistry = fastapi.Depends(  # noqa: B008
        db_registry.get_registry
    ),
) -> dict[str, dict[str, Any]]:
    """List all registered charts keyed by identifier.

    Args:
        registry: Chart registry (injected via FastAPI Depends).

    Returns:
        Mapping of chart identifier to its version 1 record.
    """
    return resources.render_all(registry.snapshot(), API_VERSION)


@router.get("/{identifier:path}")
async def get_chart(
    identifier: str,
    registry: db_registry.ChartRegistry = fastapi.Depends(  # noqa: B008
        db_registry.get_registry
    ),
) -> dict[str, Any]:
    """Get one chart by identifier.

    Args:
        identifier: Chart identifier.
        registry: Chart registry (injected via FastAPI Depends).

    Returns:
        The version 1 record of the chart.

    Raises:
        ChartNotFoundError: If the chart is unknown (rendered as 404).
    """
    chart = registry.get(identifier)
    if chart is None:
        raise errors.ChartNotFoundError(identifier)

    return resources.render(chart, API_VERSION)
