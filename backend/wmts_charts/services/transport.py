"""HTTP transport for capabilities documents and tile-JSON metadata.

All upstream traffic goes through an ``httpx.AsyncClient`` owned by the
ingestion context, so the same client (and its connection pool, timeout and
transport) serves every server of one ingestion batch. Any failure is
reported as a single error kind, TransportError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from wmts_charts.core import errors

if TYPE_CHECKING:
    from wmts_charts.core import config

logger = logging.getLogger(__name__)

CAPABILITIES_QUERY = "request=GetCapabilities&service=wmts"
CAPABILITIES_MARKER = "Capabilities"


def capabilities_url(server: config.WMTSServerConfig) -> str:
    """Build the GetCapabilities request URL for a server.

    Args:
        server: Configured upstream server.

    Returns:
        The bare URL when ``omit_capabilities_query`` is set, otherwise the
        URL with the standard capabilities query appended.
    """
    if server.omit_capabilities_query:
        return server.url

    separator = "&" if "?" in server.url else "?"
    return f"{server.url}{separator}{CAPABILITIES_QUERY}"


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    logger.debug("Fetching %s", url)
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise errors.TransportError(
            f"Error retrieving data from WMTS host {url}: {exc}"
        ) from exc

    return response


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    expect_capabilities: bool = False,
) -> str:
    """Issue a GET request and return the response body as text.

    Args:
        client: HTTP client (http and https).
        url: Absolute URL including scheme.
        expect_capabilities: Reject bodies that do not look like a
            capabilities document.

    Returns:
        Full response body.

    Raises:
        TransportError: On network errors, non-success status codes or a
            failed capabilities sanity check.
    """
    response = await _get(client, url)
    text = response.text
    if expect_capabilities and CAPABILITIES_MARKER not in text:
        raise errors.TransportError(
            f"Response from {url} is not a capabilities document"
        )

    return text


async def fetch_json(client: httpx.AsyncClient, url: str) -> dict[str, Any]:
    """Fetch a JSON object.

    Args:
        client: HTTP client.
        url: Absolute URL of the JSON document.

    Returns:
        Decoded JSON object.

    Raises:
        TransportError: On transport failure or when the body is not a JSON
            object.
    """
    response = await _get(client, url)
    try:
        payload = response.json()
    except ValueError as exc:
        raise errors.TransportError(f"Invalid JSON from {url}") from exc

    if not isinstance(payload, dict):
        raise errors.TransportError(f"Expected a JSON object from {url}")

    return payload
