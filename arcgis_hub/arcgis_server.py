# arcgis_server.py
"""MCP (stdio) surface for the ArcGIS connector; one tool per action."""
import json
import logging
from typing import Any, Dict, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from . import config
from .dispatcher import Intent, Outcome, dispatch
from .manifest import load_manifest

logger = logging.getLogger(__name__)

mcp = FastMCP("arcgis-mcp")

# Outbound client shared by the tools; None opens one per call.
http_client: Optional[httpx.AsyncClient] = None


async def _call(intent: Intent, args: Dict[str, Any]) -> str:
    return _render(await dispatch(intent, args, client=http_client))


def _render(outcome: Outcome) -> str:
    text = json.dumps(outcome.body, indent=2)
    if not outcome.ok:
        raise ToolError(text)
    return text


def _args(**kwargs: Any) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


@mcp.tool
async def get_layers(portal_url: str, token: str) -> str:
    """
    List Feature and Map services on an ArcGIS portal as {id, title, url}.

    Example:
      get_layers(portal_url="https://www.arcgis.com", token="...")
    """
    return await _call(Intent.LIST_LAYERS, _args(portal_url=portal_url, token=token))


@mcp.tool
async def query_layer(layer_url: str, token: str, geometry: Optional[Dict[str, Any]] = None) -> str:
    """Fetch up to 10 features (attributes only), optionally filtered by an ArcGIS geometry."""
    return await _call(
        Intent.QUERY_FEATURES, _args(layer_url=layer_url, token=token, geometry=geometry)
    )


@mcp.tool
async def get_statistics(layer_url: str, token: str, statFields: str) -> str:
    """
    Server-side statistics over a layer.

    statFields is "field:stat,field:stat" with stat one of
    sum, avg, min, max, count, stddev, var (sum when omitted), e.g. "population:sum,area".
    """
    return await _call(
        Intent.GET_STATISTICS, _args(layer_url=layer_url, token=token, statFields=statFields)
    )


@mcp.tool
async def export_map(map_service_url: str, token: str, bbox: Optional[str] = None) -> str:
    """Export a 1024x768 PNG of a map service; bbox is "xmin,ymin,xmax,ymax"."""
    return await _call(
        Intent.EXPORT_MAP, _args(map_service_url=map_service_url, token=token, bbox=bbox)
    )


@mcp.tool
async def get_tradeoffs(
    layer_url: str,
    token: str,
    strong_field: str,
    weak_field: str,
    strong_threshold: float,
    weak_threshold: float,
    name_field: Optional[str] = None,     # defaults to DISTRICT_NAME_FIELD
) -> str:
    """
    Districts where strong_field >= strong_threshold and weak_field <= weak_threshold.
    Result entries are keyed by the field names passed in.
    """
    return await _call(Intent.GET_TRADEOFFS, _args(
        layer_url=layer_url,
        token=token,
        strong_field=strong_field,
        weak_field=weak_field,
        strong_threshold=strong_threshold,
        weak_threshold=weak_threshold,
        name_field=name_field,
    ))


@mcp.tool
async def get_nearest_facility(feature_service_url: str, token: str, x: float, y: float) -> str:
    """Nearest point feature to (x=lon, y=lat) within a small WGS84 envelope."""
    return await _call(
        Intent.GET_NEAREST_FACILITY,
        _args(feature_service_url=feature_service_url, token=token, x=x, y=y),
    )


@mcp.resource("arcgis://manifest")
def manifest() -> str:
    return json.dumps(load_manifest(), indent=2)


def main():
    logging.basicConfig(format=config.LOG_FORMAT, level=config.LOG_LEVEL, datefmt=config.LOG_DATEFMT)
    mcp.run()  # stdio transport


if __name__ == "__main__":
    main()
