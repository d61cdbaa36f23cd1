"""Tests for the capabilities HTTP transport."""

from __future__ import annotations

import asyncio

import httpx
import pytest

import capabilities_helper
from wmts_charts.core import config, errors
from wmts_charts.services import transport


def _fetch(
    routes: dict[str, str | int | Exception],
    url: str,
    **kwargs: bool,
) -> str:
    async def run() -> str:
        async with httpx.AsyncClient(
            transport=capabilities_helper.mock_servers(routes)
        ) as client:
            return await transport.fetch_text(client, url, **kwargs)

    return asyncio.run(run())


def test_capabilities_url_appends_query() -> None:
    """The standard GetCapabilities query is appended by default."""
    server = config.WMTSServerConfig(url="http://a.example.com/wmts")
    assert transport.capabilities_url(server) == (
        "http://a.example.com/wmts?request=GetCapabilities&service=wmts"
    )


def test_capabilities_url_extends_existing_query() -> None:
    """An existing query string is extended with &."""
    server = config.WMTSServerConfig(url="http://a.example.com/wmts?key=abc")
    assert transport.capabilities_url(server) == (
        "http://a.example.com/wmts?key=abc&request=GetCapabilities&service=wmts"
    )


def test_capabilities_url_omitted_query() -> None:
    """omitCapabilitiesQuery requests the bare URL."""
    server = config.WMTSServerConfig(
        url="http://a.example.com/WMTSCapabilities.xml",
        omit_capabilities_query=True,
    )
    assert transport.capabilities_url(server) == (
        "http://a.example.com/WMTSCapabilities.xml"
    )


def test_fetch_text_returns_body(capabilities_xml: str) -> None:
    """A successful response body is returned as text."""
    body = _fetch(
        {"a.example.com": capabilities_xml},
        "http://a.example.com/wmts",
        expect_capabilities=True,
    )
    assert body == capabilities_xml


def test_fetch_text_https() -> None:
    """Encrypted endpoints go through the same client."""
    assert _fetch({"secure.example.com": "ok"}, "https://secure.example.com/") == "ok"


def test_fetch_text_error_status() -> None:
    """Non-success status codes raise TransportError."""
    with pytest.raises(errors.TransportError):
        _fetch({"a.example.com": 500}, "http://a.example.com/wmts")


def test_fetch_text_network_error() -> None:
    """Connection failures raise TransportError."""
    with pytest.raises(errors.TransportError):
        _fetch(
            {"a.example.com": httpx.ConnectError("connection refused")},
            "http://a.example.com/wmts",
        )


def test_fetch_text_rejects_non_capabilities() -> None:
    """The capabilities sanity check rejects unrelated payloads."""
    with pytest.raises(errors.TransportError):
        _fetch(
            {"a.example.com": "<html>login</html>"},
            "http://a.example.com/wmts",
            expect_capabilities=True,
        )


def test_fetch_json() -> None:
    """JSON objects are decoded; other payloads raise TransportError."""

    async def run(body: str) -> dict[str, object]:
        async with httpx.AsyncClient(
            transport=capabilities_helper.mock_servers({"a": body})
        ) as client:
            return await transport.fetch_json(client, "http://a/layer.json")

    assert asyncio.run(run('{"tilejson": "2.2.0"}')) == {"tilejson": "2.2.0"}
    with pytest.raises(errors.TransportError):
        asyncio.run(run("not json"))
    with pytest.raises(errors.TransportError):
        asyncio.run(run("[1, 2]"))


@pytest.mark.parametrize(
    "outcome",
    [404, 500, httpx.ConnectError("connection refused")],
)
def test_fetch_json_shares_failure_handling(outcome: int | Exception) -> None:
    """Status and network failures of JSON fetches raise TransportError."""

    async def run() -> dict[str, object]:
        async with httpx.AsyncClient(
            transport=capabilities_helper.mock_servers({"a": outcome})
        ) as client:
            return await transport.fetch_json(client, "http://a/layer.json")

    with pytest.raises(errors.TransportError, match="http://a/layer.json"):
        asyncio.run(run())


def test_fetch_json_decodes_utf8_body() -> None:
    """Non-ASCII JSON bodies are decoded from the response bytes."""

    async def run() -> dict[str, object]:
        async with httpx.AsyncClient(
            transport=capabilities_helper.mock_servers(
                {"a": '{"name": "Fjärdsund", "minzoom": 3}'}
            )
        ) as client:
            return await transport.fetch_json(client, "http://a/layer.json")

    assert asyncio.run(run()) == {"name": "Fjärdsund", "minzoom": 3}
