"""Tests for WMTS capabilities XML parsing and tree accessors."""

from __future__ import annotations

import pytest

import capabilities_helper
from wmts_charts.core import errors
from wmts_charts.services import capabilities


def test_parse_capabilities_returns_layers_in_order(
    capabilities_xml: str,
) -> None:
    """Layer nodes come back in document order with prefixes kept."""
    layers = capabilities.parse_capabilities(capabilities_xml)
    assert len(layers) == 2
    assert [
        capabilities.first_child_text(layer, "ows:Identifier")
        for layer in layers
    ] == ["chart-a", "chart-b"]


def test_parse_capabilities_single_layer_is_a_list() -> None:
    """A lone Layer element is still returned as a one-item sequence."""
    xml = capabilities_helper.make_capabilities(
        capabilities_helper.make_layer(identifier="only")
    )
    layers = capabilities.parse_capabilities(xml)
    assert len(layers) == 1
    assert capabilities.first_child_text(layers[0], "ows:Identifier") == "only"


def test_parse_capabilities_without_layers() -> None:
    """A document advertising no layers is valid and yields nothing."""
    assert capabilities.parse_capabilities(
        capabilities_helper.make_capabilities()
    ) == []


def test_parse_capabilities_empty_contents_element() -> None:
    """A self-closing Contents element yields no layers."""
    xml = "<Capabilities><Contents/></Capabilities>"
    assert capabilities.parse_capabilities(xml) == []


def test_parse_capabilities_malformed_xml() -> None:
    """Unparseable XML raises MalformedCapabilitiesError."""
    with pytest.raises(errors.MalformedCapabilitiesError):
        capabilities.parse_capabilities("<Capabilities><Contents>")


def test_parse_capabilities_empty_document() -> None:
    """An empty body is not a capabilities document."""
    with pytest.raises(errors.MalformedCapabilitiesError):
        capabilities.parse_capabilities("")


def test_parse_capabilities_missing_contents() -> None:
    """Missing Contents raises MalformedCapabilitiesError."""
    with pytest.raises(errors.MalformedCapabilitiesError):
        capabilities.parse_capabilities("<Capabilities><Other/></Capabilities>")


def test_parse_capabilities_wrong_root() -> None:
    """A document without a Capabilities root is rejected."""
    with pytest.raises(errors.MalformedCapabilitiesError):
        capabilities.parse_capabilities("<ExceptionReport/>")


def test_first_child_text_variants() -> None:
    """Text is read from plain, attributed and empty elements."""
    node = {
        "plain": ["  value  "],
        "attributed": [{"@lang": "en", "#text": "hello"}],
        "attributed_list": [{"@lang": "en", "#text": ["hi"]}],
        "empty": [None],
        "blank": ["   "],
    }
    assert capabilities.first_child_text(node, "plain") == "value"
    assert capabilities.first_child_text(node, "attributed") == "hello"
    assert capabilities.first_child_text(node, "attributed_list") == "hi"
    assert capabilities.first_child_text(node, "empty") is None
    assert capabilities.first_child_text(node, "blank") is None
    assert capabilities.first_child_text(node, "missing") is None
    assert capabilities.first_child_text(None, "plain") is None


def test_child_element_accessors() -> None:
    """Element accessors skip text-only values and tolerate absence."""
    node = {"box": [{"corner": ["1 2"]}, "text only"], "text": ["value"]}
    assert capabilities.child_elements(node, "box") == [{"corner": ["1 2"]}]
    assert capabilities.first_child_element(node, "box") == {"corner": ["1 2"]}
    assert capabilities.first_child_element(node, "text") is None
    assert capabilities.first_child_element(node, "missing") is None
    assert capabilities.child_elements(None, "box") == []
