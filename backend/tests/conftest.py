"""Shared fixtures for WMTS chart provider tests."""

from __future__ import annotations

import pytest

import capabilities_helper


@pytest.fixture
def capabilities_xml() -> str:
    """Capabilities document with two complete layers."""
    return capabilities_helper.make_capabilities(
        capabilities_helper.make_layer(
            identifier="chart-a",
            title="Chart A",
            abstract="First chart",
            lower="10.0 20.0",
            upper="30.0 40.0",
            fmt="image/png",
        ),
        capabilities_helper.make_layer(
            identifier="chart-b",
            title="Chart B",
            fmt="image/jpg",
        ),
    )
