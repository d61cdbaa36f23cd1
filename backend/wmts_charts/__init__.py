"""WMTS chart provider service.

This package ingests WMTS GetCapabilities documents from one or more map
servers, normalizes the advertised layers into chart resources and serves
them through a v1 REST query path and a v2 ``charts`` resource provider.

- Fetches capabilities over HTTP(S) with httpx, one request per server
- Parses capabilities XML with xmltodict into a list-valued mapping tree
- Normalizes layers (identifier, title, abstract, WGS84 bounds, format)
- Optionally derives tile-JSON descriptor and metadata resources per layer
- Keeps an in-memory registry replaced wholesale after each ingestion batch

See module sub-docstrings for details on architecture and usage.
"""
