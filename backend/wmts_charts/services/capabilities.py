"""WMTS capabilities XML parsing.

The document is converted with xmltodict into a tree of plain mappings in
which every element name (namespace prefix kept verbatim, e.g.
``ows:Identifier``) maps to the ordered list of its occurrences. The
accessors below are total: a missing element yields None or an empty list,
so callers never index into the tree directly.

Example:
    >>> from wmts_charts.services import capabilities
    >>> layers = capabilities.parse_capabilities(xml_text)
    >>> capabilities.first_child_text(layers[0], "ows:Identifier")
    'bathymetry'
"""

from __future__ import annotations

import logging
from typing import Any
from xml.parsers import expat

import xmltodict

from wmts_charts.core import errors

logger = logging.getLogger(__name__)

XmlNode = dict[str, Any]


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value

    return [value]


def child_elements(node: XmlNode | None, name: str) -> list[XmlNode]:
    """Return all child elements called ``name`` that have content.

    Args:
        node: Parent element, or None.
        name: Element name including any namespace prefix.

    Returns:
        Child element mappings in document order; text-only and empty
        occurrences are left out.
    """
    if not node:
        return []

    return [child for child in _as_list(node.get(name)) if isinstance(child, dict)]


def first_child_element(node: XmlNode | None, name: str) -> XmlNode | None:
    """Return the first child element called ``name``, or None."""
    children = child_elements(node, name)
    return children[0] if children else None


def first_child_text(node: XmlNode | None, name: str) -> str | None:
    """Return the text of the first child element called ``name``.

    Handles text-only elements, elements that also carry attributes (text
    under ``#text``) and empty elements.

    Args:
        node: Parent element, or None.
        name: Element name including any namespace prefix.

    Returns:
        Stripped text, or None when the element is missing or empty.
    """
    if not node:
        return None

    values = _as_list(node.get(name))
    if not values:
        return None

    value = values[0]
    if isinstance(value, dict):
        text_values = _as_list(value.get("#text"))
        value = text_values[0] if text_values else None
    if value is None:
        return None

    text = str(value).strip()
    return text or None


def parse_document(xml_text: str) -> XmlNode:
    """Parse XML into the list-valued mapping tree.

    Raises:
        MalformedCapabilitiesError: If the text is not well-formed XML.
    """
    try:
        return xmltodict.parse(xml_text, force_list=True)
    except expat.ExpatError as exc:
        logger.debug("Error parsing capabilities XML: %s", exc)
        raise errors.MalformedCapabilitiesError(
            f"Unable to parse capabilities XML: {exc}"
        ) from exc


def parse_capabilities(xml_text: str) -> list[XmlNode]:
    """Extract raw layer nodes from a capabilities document.

    Walks ``Capabilities -> Contents[0] -> Layer``.

    Args:
        xml_text: Raw capabilities XML.

    Returns:
        Layer nodes in document order; empty when the document advertises
        no layers.

    Raises:
        MalformedCapabilitiesError: If the XML cannot be parsed or the
            ``Capabilities``/``Contents`` structure is missing.
    """
    document = parse_document(xml_text)
    root = first_child_element(document, "Capabilities")
    if root is None:
        raise errors.MalformedCapabilitiesError(
            "Capabilities element missing from document"
        )

    contents = _as_list(root.get("Contents"))
    if not contents:
        raise errors.MalformedCapabilitiesError(
            "Contents element missing from capabilities"
        )

    return child_elements(contents[0], "Layer")
