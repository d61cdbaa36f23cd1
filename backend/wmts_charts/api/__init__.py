"""API router subpackage for the chart provider.

Submodules:
    - charts: Direct REST query path, version 1 record shape.
    - resources: ``charts`` resource provider, version 2 record shape,
      included only for host major version 2 or later.
"""
