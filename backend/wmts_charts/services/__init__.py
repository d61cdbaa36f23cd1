"""Capabilities ingestion pipeline and resource rendering.

Submodules, leaf first:
    - transport: HTTP fetches of capabilities and tile-JSON documents.
    - capabilities: XML parsing and total tree accessors.
    - normalize: Layer node to ChartProvider conversion.
    - derived: ``-tilejson`` and ``-metadata`` companion resources.
    - ingest: Concurrent multi-server ingestion and registry refresh.
    - resources: Version-aware rendering and the resource provider.
"""
