"""In-memory registry of chart resources."""

from __future__ import annotations

import types
from typing import TYPE_CHECKING

import fastapi

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from wmts_charts.db import models as db_models


class ChartRegistry:
    """Snapshot store mapping identifiers to ChartProvider records.

    The snapshot is replaced wholesale after every ingestion batch with a
    single assignment, so readers see either the previous or the next
    complete snapshot. Data is lost when the process exits.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._snapshot: Mapping[str, db_models.ChartProvider] = (
            types.MappingProxyType({})
        )

    def replace(
        self,
        charts: Mapping[str, db_models.ChartProvider],
    ) -> None:
        """Swap in a new snapshot.

        Args:
            charts: Complete mapping of identifier to chart; copied so later
                changes by the caller are not visible to readers.
        """
        self._snapshot = types.MappingProxyType(dict(charts))

    def get(self, identifier: str) -> db_models.ChartProvider | None:
        """Retrieve a chart by identifier.

        Args:
            identifier: Chart identifier.

        Returns:
            ChartProvider if registered, None otherwise.
        """
        return self._snapshot.get(identifier)

    def all(self) -> Iterable[db_models.ChartProvider]:
        return self._snapshot.values()

    def snapshot(self) -> Mapping[str, db_models.ChartProvider]:
        """Return the current read-only snapshot."""
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._snapshot


def get_registry(request: fastapi.Request) -> ChartRegistry:
    """Resolve the registry owned by the running application.

    Args:
        request: Incoming request (injected by FastAPI).

    Returns:
        The ChartRegistry stored on ``app.state``.
    """
    return request.app.state.registry
