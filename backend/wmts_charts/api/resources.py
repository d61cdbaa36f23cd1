"""Resource provider endpoints for the ``charts`` type (v2 API).

The routes delegate to ``ChartResourceProvider`` and are only included by
``wmts_charts.main`` when the host major version is 2 or later. Writes are
rejected with 501 Not Implemented.

Example:
    >>> client.get("/signalk/v2/api/resources/charts").json()
    >>> # {"bathymetry": {"identifier": "bathymetry", "url": "...",
    >>> #                 "layers": ["bathymetry"], ...}}
    >>> client.delete("/signalk/v2/api/resources/charts/bathymetry")
    >>> # 501, "Not Implemented!"
"""

from typing import Any

import fastapi

from wmts_charts.services import resources

router = fastapi.APIRouter(
    prefix=f"/signalk/v2/api/resources/{resources.RESOURCE_TYPE}",
    tags=["resources"],
)


def get_provider(request: fastapi.Request) -> resources.ChartResourceProvider:
    """Resolve the resource provider registered on the application."""
    return request.app.state.resource_provider


@router.get("")
async def list_resources(
    request: fastapi.Request,
    provider: resources.ChartResourceProvider = fastapi.Depends(  # noqa: B008
        get_provider
    ),
) -> dict[str, dict[str, Any]]:
    return await provider.list_resources(dict(request.query_params))


@router.get("/{identifier:path}")
async def get_resource(
    identifier: str,
    provider: resources.ChartResourceProvider = fastapi.Depends(  # noqa: B008
        get_provider
    ),
) -> dict[str, Any]:
    return await provider.get_resource(identifier)


@router.put("/{identifier:path}")
async def set_resource(
    identifier: str,
    request: fastapi.Request,
    provider: resources.ChartResourceProvider = fastapi.Depends(  # noqa: B008
        get_provider
    ),
) -> None:
    # The body is passed through unparsed; any payload is rejected with 501.
    await provider.set_resource(identifier, await request.body())


@router.delete("/{identifier:path}")
async def delete_resource(
    identifier: str,
    provider: resources.ChartResourceProvider = fastapi.Depends(  # noqa: B008
        get_provider
    ),
) -> None:
    await provider.delete_resource(identifier)
