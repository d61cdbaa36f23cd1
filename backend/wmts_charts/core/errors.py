"""Exception hierarchy for the WMTS chart provider.

Errors raised while fetching or parsing a single server are isolated by the
ingestion orchestrator; the remaining kinds surface at the API boundary
where ``wmts_charts.main`` maps them onto HTTP responses.
"""


class ChartProviderError(Exception):
    """Base class for all chart provider errors."""


class TransportError(ChartProviderError):
    """Network failure, non-success status or unexpected payload."""


class MalformedCapabilitiesError(ChartProviderError):
    """Capabilities XML could not be parsed or lacks required structure."""


class NotImplementedOperationError(ChartProviderError):
    """Raised for write operations on read-only chart resources."""

    def __init__(self, message: str = "Not Implemented!") -> None:
        super().__init__(message)


class ChartNotFoundError(ChartProviderError):
    """No chart resource is registered under the requested identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Chart not found: {identifier}")
        self.identifier = identifier


class UnsupportedRuntimeError(ChartProviderError):
    """The interpreter lacks a capability the provider requires."""
