# query_builder.py
"""
Outbound ArcGIS REST parameter sets, one builder per intent.

Every value is a string so the mapping can go straight onto a query string;
JSON-valued parameters are compact-serialized.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import config
from .nearest import WGS84_WKID, envelope_around
from .stat_spec import StatisticSpec

SEARCH_PATH = "/sharing/rest/search"
QUERY_PATH = "/query"
EXPORT_PATH = "/export"

LAYER_TYPES_QUERY = 'type:"Feature Service" OR type:"Map Service"'
SELECT_ALL = "1=1"


@dataclass
class OutboundQuery:
    url: str
    params: Dict[str, str] = field(default_factory=dict)


def _json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def service_url(base: str, operation: str) -> str:
    """Strip one trailing slash from ``base`` and append ``operation``."""
    if base.endswith("/"):
        base = base[:-1]
    return base + operation


def build_list_layers(portal_url: str, token: str) -> OutboundQuery:
    return OutboundQuery(
        service_url(portal_url, SEARCH_PATH),
        {
            "q": LAYER_TYPES_QUERY,
            "f": "json",
            "num": str(config.SEARCH_PAGE_SIZE),
            "token": token,
        },
    )


def build_query_features(layer_url: str, token: str, geometry: Optional[Dict[str, Any]] = None) -> OutboundQuery:
    params = {
        "where": SELECT_ALL,
        "outFields": "*",
        "resultRecordCount": str(config.RESULT_RECORD_COUNT),
        "returnGeometry": "false",
        "f": "json",
        "token": token,
    }
    if geometry:
        params["geometry"] = _json(geometry)
    return OutboundQuery(service_url(layer_url, QUERY_PATH), params)


def build_statistics(layer_url: str, token: str, specs: List[StatisticSpec]) -> OutboundQuery:
    return OutboundQuery(
        service_url(layer_url, QUERY_PATH),
        {
            "f": "json",
            "where": SELECT_ALL,
            "outStatistics": _json([s.to_arcgis() for s in specs]),
            "returnGeometry": "false",
            "token": token,
        },
    )


def build_export_map(map_service_url: str, token: str, bbox: Optional[str] = None) -> OutboundQuery:
    params = {
        "f": "json",
        "size": config.EXPORT_SIZE,
        "format": config.EXPORT_FORMAT,
        "token": token,
    }
    if bbox:
        params["bbox"] = bbox
    return OutboundQuery(service_url(map_service_url, EXPORT_PATH), params)


def build_tradeoffs(layer_url: str, token: str) -> OutboundQuery:
    # No record cap: the comparison has to see every district in the layer.
    return OutboundQuery(
        service_url(layer_url, QUERY_PATH),
        {
            "where": SELECT_ALL,
            "outFields": "*",
            "f": "json",
            "token": token,
            "returnGeometry": "false",
        },
    )


def build_nearest_facility(feature_service_url: str, token: str, x: float, y: float,
                           buffer: Optional[float] = None) -> OutboundQuery:
    if buffer is None:
        buffer = config.NEAREST_BUFFER_DEGREES
    envelope = envelope_around(x, y, buffer)
    return OutboundQuery(
        service_url(feature_service_url, QUERY_PATH),
        {
            "f": "json",
            "token": token,
            "geometry": _json(envelope.to_arcgis()),
            "geometryType": "esriGeometryEnvelope",
            "spatialRel": "esriSpatialRelIntersects",
            "outFields": "*",
            "returnGeometry": "true",
            "resultRecordCount": str(config.RESULT_RECORD_COUNT),
            "inSR": str(WGS84_WKID),
            "outSR": str(WGS84_WKID),
        },
    )
