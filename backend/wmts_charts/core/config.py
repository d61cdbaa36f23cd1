"""Application settings and configuration management.

This module provides Pydantic-based settings management that loads
configuration from environment variables or a .env file. Settings describe
which WMTS servers are ingested, which host version is emulated (the major
version gates the v2 resource provider surface), whether derived tile-JSON
resources are produced, and HTTP/CORS options.

Three configuration shapes are accepted for the upstream servers and are
resolved into one ordered list by ``Settings.server_configs``:

    - single URL: ``{"url": "http://example.com/wmts"}``
    - multi-server: ``{"servers": [{"url": "...",
      "omitCapabilitiesQuery": false}]}``
    - legacy nested: ``{"wmts": {"url": "..."}}``

Example:
    Settings can be accessed via the cached get_settings() function:
        >>> from wmts_charts.core.config import get_settings
        >>> settings = get_settings()
        >>> [server.url for server in settings.server_configs()]
        ['http://localhost/wmts']

    Environment variables can override defaults:
        >>> URL=tiles.example.com/wmts
        >>> SERVERS='[{"url": "http://a/wmts"}, {"url": "http://b/wmts"}]'
        >>> SERVER_VERSION=1.46.0
        >>> PLUGIN_CONFIG_PATH=/home/pi/.signalk/plugin-config-data/wmts-charts.json
"""

from __future__ import annotations

import functools
import json
import pathlib
from collections.abc import Mapping
from typing import Any

import pydantic
import pydantic_settings

DEFAULT_URL = "http://localhost/wmts"


def normalize_url(url: str) -> str:
    """Prepend ``http://`` to a bare host or URL lacking a scheme.

    Args:
        url: Configured endpoint, with or without scheme.

    Returns:
        URL guaranteed to start with ``http``.
    """
    url = url.strip()
    if not url.startswith("http"):
        return f"http://{url}"

    return url


class WMTSServerConfig(pydantic.BaseModel):
    """One configured upstream WMTS server.

    Attributes:
        url: Base endpoint of the server, scheme-normalized.
        omit_capabilities_query: When true the capabilities document is
            requested from the bare URL instead of appending
            ``request=GetCapabilities&service=wmts``.
    """

    model_config = pydantic.ConfigDict(populate_by_name=True)

    url: str
    omit_capabilities_query: bool = pydantic.Field(
        default=False,
        alias="omitCapabilitiesQuery",
    )

    @pydantic.field_validator("url")
    @classmethod
    def _normalize_scheme(cls, value: str) -> str:
        return normalize_url(value)


class LegacyWMTSConfig(pydantic.BaseModel):
    """Legacy nested configuration shape ``{"wmts": {"url": ...}}``."""

    url: str | None = None


class Settings(pydantic_settings.BaseSettings):
    """Runtime configuration pulled from environment variables or defaults.

    Attributes:
        url: Single capabilities endpoint (single-URL shape).
        servers: Upstream servers (multi-server shape).
        wmts: Legacy nested shape.
        server_version: Version string of the host; its major part decides
            whether the v2 resource provider surface is registered.
        derived_resources: Also publish ``-tilejson`` and ``-metadata``
            companion resources for every layer.
        request_timeout: Timeout in seconds for upstream HTTP requests.
        allow_origins: List of allowed CORS origins (["*"] allows all).
        plugin_config_path: Saved plugin configuration (JSON) applied
            over the environment by ``get_settings``.
    """

    url: str | None = None
    servers: list[WMTSServerConfig] = []
    wmts: LegacyWMTSConfig | None = None
    server_version: str = "2.0.0"
    derived_resources: bool = False
    request_timeout: float = 30.0
    allow_origins: list[str] = ["*"]
    plugin_config_path: pathlib.Path | None = None

    model_config = pydantic_settings.SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def host_major_version(self) -> int:
        """Integer major part of ``server_version``."""
        return int(self.server_version.split(".")[0])

    def server_configs(self) -> list[WMTSServerConfig]:
        """Resolve the configured shapes into an ordered server list.

        ``servers`` wins when non-empty, then ``url``, then ``wmts.url``;
        with nothing configured the default local endpoint is used.

        Returns:
            Server configurations in ingestion (and merge) order.
        """
        if self.servers:
            return list(self.servers)
        if self.url:
            return [WMTSServerConfig(url=self.url)]
        if self.wmts and self.wmts.url:
            return [WMTSServerConfig(url=self.wmts.url)]

        return [WMTSServerConfig(url=DEFAULT_URL)]

    @classmethod
    def from_plugin_config(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from a host-provided plugin configuration.

        Accepts the bare configuration mapping or the envelope the host
        saves to disk, ``{"enabled": true, "configuration": {...}}``.

        Args:
            data: Plugin configuration object.

        Returns:
            Settings with the configuration applied over the environment.
        """
        configuration = data.get("configuration", data)
        if not isinstance(configuration, Mapping):
            configuration = {}

        return cls(**dict(configuration))


def load_plugin_config(path: str | pathlib.Path) -> Settings:
    """Load settings from a saved plugin configuration file.

    Args:
        path: JSON file holding the bare configuration or the host envelope.

    Returns:
        Settings built through ``Settings.from_plugin_config``.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    data = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError(f"Plugin configuration in {path} is not a JSON object")

    return Settings.from_plugin_config(data)


@functools.lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables or .env file and cached
    for the lifetime of the application. When ``PLUGIN_CONFIG_PATH`` names a
    saved plugin configuration, that file is applied on top.

    Returns:
        Settings instance with all configuration values populated.
    """
    settings = Settings()
    if settings.plugin_config_path is not None:
        return load_plugin_config(settings.plugin_config_path)

    return settings
