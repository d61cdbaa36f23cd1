"""Normalization of raw WMTS layer nodes into ChartProvider records.

Example:
    >>> from wmts_charts.services import capabilities, normalize
    >>> nodes = capabilities.parse_capabilities(xml_text)
    >>> chart = normalize.normalize_layer(nodes[0], "http://example.com/wmts")
    >>> chart.identifier, chart.format, chart.bounds
    ('bathymetry', 'png', (10.0, 20.0, 30.0, 40.0))
"""

from __future__ import annotations

import logging
import math

from wmts_charts.db import models as db_models
from wmts_charts.services import capabilities

logger = logging.getLogger(__name__)


def format_from_mime(value: str | None) -> db_models.ImageFormat:
    """Infer the tile image format from a declared format string.

    Args:
        value: MIME type or format name, e.g. ``image/jpg`` or
            ``image/png``; None when the layer declares no format.

    Returns:
        "jpg" when the string mentions jpg anywhere, "png" otherwise.
    """
    if value and "jpg" in value:
        return "jpg"

    return "png"


def _parse_corner(text: str | None) -> tuple[float, float]:
    parts = (text or "").split()
    if len(parts) < 2:
        raise ValueError(f"Invalid corner coordinate: {text!r}")

    lon, lat = float(parts[0]), float(parts[1])
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ValueError(f"Non-finite corner coordinate: {text!r}")

    return lon, lat


def parse_bounds(layer: capabilities.XmlNode) -> db_models.BBox | None:
    """Read the WGS84 bounding box of a layer.

    Args:
        layer: Raw layer node.

    Returns:
        (lowerLon, lowerLat, upperLon, upperLat), or None when the layer has
        no usable ``ows:WGS84BoundingBox``.
    """
    box = capabilities.first_child_element(layer, "ows:WGS84BoundingBox")
    if box is None:
        return None

    try:
        lower = _parse_corner(capabilities.first_child_text(box, "ows:LowerCorner"))
        upper = _parse_corner(capabilities.first_child_text(box, "ows:UpperCorner"))
    except ValueError as exc:
        logger.debug("Ignoring bounding box: %s", exc)
        return None

    return (lower[0], lower[1], upper[0], upper[1])


def normalize_layer(
    layer: capabilities.XmlNode,
    server_url: str,
) -> db_models.ChartProvider | None:
    """Convert one raw layer node into a ChartProvider.

    Args:
        layer: Raw layer node from ``parse_capabilities``.
        server_url: Configured server URL the views point at.

    Returns:
        The normalized chart, or None when the node has no identifier.
    """
    identifier = capabilities.first_child_text(layer, "ows:Identifier")
    if not identifier:
        return None

    return db_models.ChartProvider(
        identifier=identifier,
        name=capabilities.first_child_text(layer, "ows:Title") or "",
        description=capabilities.first_child_text(layer, "ows:Abstract") or "",
        kind="wmts",
        bounds=parse_bounds(layer),
        format=format_from_mime(capabilities.first_child_text(layer, "Format")),
        view_v1=db_models.ViewV1(
            tilemap_url=server_url,
            chart_layers=(identifier,),
        ),
        view_v2=db_models.ViewV2(url=server_url, layers=(identifier,)),
    )
