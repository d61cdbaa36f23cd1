"""Unit tests for wmts_charts.db.models chart records.

Key coverage:
    - Creation of ChartProvider records with defaults for optional fields.
    - Immutability of stored records.
    - Wire shapes of the v1 and v2 views.

See Also:
    - backend/wmts_charts/db/models.py for the ChartProvider implementation.
"""

from __future__ import annotations

import dataclasses

import pytest

from wmts_charts.db import models as db_models


def test_chart_provider_defaults() -> None:
    """Only the identifier is required."""
    chart = db_models.ChartProvider(identifier="chart-a")
    assert chart.name == ""
    assert chart.description == ""
    assert chart.kind == "wmts"
    assert chart.bounds is None
    assert chart.format is None
    assert chart.view_v1 is None
    assert chart.view_v2 is None
    assert chart.minzoom is None
    assert chart.maxzoom is None
    assert chart.url is None
    assert chart.extra == {}


def test_chart_provider_is_frozen() -> None:
    """Stored records cannot be modified in place."""
    chart = db_models.ChartProvider(identifier="chart-a")
    with pytest.raises(dataclasses.FrozenInstanceError):
        chart.name = "changed"  # type: ignore[misc]


def test_view_v1_as_dict() -> None:
    """The legacy view uses tilemapUrl and chartLayers."""
    view = db_models.ViewV1(tilemap_url="http://a/wmts", chart_layers=("a",))
    assert view.as_dict() == {
        "tilemapUrl": "http://a/wmts",
        "chartLayers": ["a"],
    }


def test_view_v2_as_dict() -> None:
    """The layer-list view uses url and layers."""
    view = db_models.ViewV2(url="http://a/wmts", layers=("a",))
    assert view.as_dict() == {"url": "http://a/wmts", "layers": ["a"]}


def test_view_as_dict_returns_fresh_lists() -> None:
    """Changing a rendered view leaves the stored view unchanged."""
    view = db_models.ViewV2(url="http://a/wmts", layers=("a",))
    rendered = view.as_dict()
    rendered["layers"].append("b")
    assert view.layers == ("a",)
