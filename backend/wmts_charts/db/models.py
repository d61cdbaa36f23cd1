"""Data models for chart resources.

This module defines the core data structures used throughout the application
to represent chart layers. A ChartProvider is the normalized form of one
layer advertised in a WMTS capabilities document (or of a companion resource
derived from it). Records are frozen: rendering for the API builds new
dictionaries and never changes a stored record.

Example:
    Creating a ChartProvider for a WMTS layer:
        >>> from wmts_charts.db.models import ChartProvider, ViewV1, ViewV2
        >>> chart = ChartProvider(
        ...     identifier="bathymetry",
        ...     name="Bathymetry",
        ...     description="Depth contours",
        ...     kind="wmts",
        ...     bounds=(10.0, 20.0, 30.0, 40.0),
        ...     format="png",
        ...     view_v1=ViewV1(
        ...         tilemap_url="http://tiles.example.com/wmts",
        ...         chart_layers=("bathymetry",),
        ...     ),
        ...     view_v2=ViewV2(
        ...         url="http://tiles.example.com/wmts",
        ...         layers=("bathymetry",),
        ...     ),
        ... )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, Literal

BBox = tuple[float, float, float, float]
ChartKind = Literal["wmts", "tilejson", "tilelayer"]
ImageFormat = Literal["jpg", "png"]


@dataclasses.dataclass(frozen=True)
class ViewV1:
    """Legacy tile-map view of a chart."""

    tilemap_url: str
    chart_layers: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "tilemapUrl": self.tilemap_url,
            "chartLayers": list(self.chart_layers),
        }


@dataclasses.dataclass(frozen=True)
class ViewV2:
    """Layer-list view of a chart."""

    url: str
    layers: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        return {"url": self.url, "layers": list(self.layers)}


@dataclasses.dataclass(frozen=True)
class ChartProvider:
    """Represents one chart resource the provider knows about.

    Attributes:
        identifier: Unique identifier within a registry snapshot.
        name: Display title, empty when the source has none.
        description: Abstract, empty when the source has none.
        kind: How the resource is consumed ("wmts", "tilejson" or
            "tilelayer"); rendered under the ``type`` key.
        bounds: WGS84 extent as (minLon, minLat, maxLon, maxLat), None when
            the source supplied no bounding box.
        format: Tile image format ("jpg" or "png").
        view_v1: Legacy tilemap view, None for derived resources.
        view_v2: Layer-list view, None for derived resources.
        minzoom: Reserved, not populated from capabilities.
        maxzoom: Reserved, not populated from capabilities.
        url: Descriptor URL of a derived tile-JSON resource.
        extra: Fields of a fetched tile-JSON metadata document.
    """

    identifier: str
    name: str = ""
    description: str = ""
    kind: ChartKind = "wmts"
    bounds: BBox | None = None
    format: ImageFormat | None = None
    view_v1: ViewV1 | None = None
    view_v2: ViewV2 | None = None
    minzoom: int | None = None
    maxzoom: int | None = None
    url: str | None = None
    extra: Mapping[str, Any] = dataclasses.field(default_factory=dict)
