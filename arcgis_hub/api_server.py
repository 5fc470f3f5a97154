#!/usr/bin/env python3
"""
FastAPI server exposing the ArcGIS connector actions over HTTP.

Endpoints:
 - GET  /health
 - GET  /mcp/manifest
 - POST /mcp/getLayers             { "portal_url": "...", "token": "..." }
 - POST /mcp/query_layer           { "layer_url": "...", "token": "...", "geometry": {...} }
 - POST /mcp/get_statistics        { "layer_url": "...", "token": "...", "statFields": "pop:sum,area" }
 - POST /mcp/export_map            { "map_service_url": "...", "token": "...", "bbox": "..." }
 - POST /mcp/get_tradeoffs         { "layer_url": "...", "token": "...", "strong_field": "...",
                                     "weak_field": "...", "strong_threshold": 80, "weak_threshold": 20 }
 - POST /mcp/get_nearest_facility  { "feature_service_url": "...", "token": "...", "x": .., "y": .. }

Each request performs at most one GET against the ArcGIS service.
"""
import json
import logging
from typing import Any, Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__, config
from .dispatcher import Intent, Outcome, dispatch
from .errors import ClientInputError
from .manifest import load_manifest

logging.basicConfig(format=config.LOG_FORMAT, level=config.LOG_LEVEL, datefmt=config.LOG_DATEFMT)
logger = logging.getLogger(__name__)

app = FastAPI(title="arcgis-hub API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_http_client() -> Optional[httpx.AsyncClient]:
    """Outbound client; None lets the dispatcher open one per request."""
    return None


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ClientInputError("request body must be valid JSON") from e


async def _run(intent: Intent, request: Request, client: Optional[httpx.AsyncClient]) -> JSONResponse:
    try:
        body = await _read_body(request)
    except ClientInputError as e:
        outcome = Outcome(400, {"error": str(e)})
    else:
        outcome = await dispatch(intent, body, client=client)
    return JSONResponse(status_code=outcome.status, content=outcome.body)


@app.get("/health")
def health():
    return {"ok": True, "service": "arcgis-hub API", "version": __version__}


@app.get("/mcp/manifest")
def manifest():
    return load_manifest()


@app.post("/mcp/getLayers")
async def api_get_layers(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.LIST_LAYERS, request, client)


@app.post("/mcp/query_layer")
async def api_query_layer(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.QUERY_FEATURES, request, client)


@app.post("/mcp/get_statistics")
async def api_get_statistics(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.GET_STATISTICS, request, client)


@app.post("/mcp/export_map")
async def api_export_map(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.EXPORT_MAP, request, client)


@app.post("/mcp/get_tradeoffs")
async def api_get_tradeoffs(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.GET_TRADEOFFS, request, client)


@app.post("/mcp/get_nearest_facility")
async def api_get_nearest_facility(request: Request, client=Depends(get_http_client)):
    return await _run(Intent.GET_NEAREST_FACILITY, request, client)


def main():
    import uvicorn

    logger.info("ArcGIS MCP Connector running on http://%s:%s", config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
