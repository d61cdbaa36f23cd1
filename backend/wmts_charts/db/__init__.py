"""Chart data models and the in-memory registry.

Re-exports nothing; import ``wmts_charts.db.models`` for the ChartProvider
record types and ``wmts_charts.db.registry`` for the snapshot store and its
FastAPI dependency.

Example:
    Use in a FastAPI dependency:
        >>> from wmts_charts.db import registry
        >>> charts = registry.ChartRegistry()
        >>> len(charts)
        0
"""
