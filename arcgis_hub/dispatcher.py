# dispatcher.py
"""
One inbound intent -> validation -> query builder -> single GET -> shaping.

``dispatch`` never raises: every failure is classified into an ``Outcome``
(client input error, remote service error, not found, or unexpected failure)
and resolved within the request that caused it.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

import httpx
from pydantic import BaseModel, ValidationError

from . import config
from .errors import ClientInputError, RemoteServiceError
from .nearest import select_nearest
from .normalizer import (
    normalize_export,
    normalize_features,
    normalize_layers,
    normalize_statistics,
    raise_for_remote_error,
)
from .query_builder import (
    OutboundQuery,
    build_export_map,
    build_list_layers,
    build_nearest_facility,
    build_query_features,
    build_statistics,
    build_tradeoffs,
)
from .schemas import (
    ExportMapRequest,
    ListLayersRequest,
    NearestFacilityRequest,
    QueryFeaturesRequest,
    StatisticsRequest,
    TradeoffsRequest,
)
from .stat_spec import parse_stat_fields
from .tradeoffs import compare_thresholds

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No facility found nearby."


class Intent(str, Enum):
    LIST_LAYERS = "list_layers"
    QUERY_FEATURES = "query_features"
    GET_STATISTICS = "get_statistics"
    EXPORT_MAP = "export_map"
    GET_TRADEOFFS = "get_tradeoffs"
    GET_NEAREST_FACILITY = "get_nearest_facility"


@dataclass
class Outcome:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status == 200


# ── Per-intent wiring ──────────────────────────────────────────────────────────
# (fields, message) groups are checked in order; the first group with any
# missing value is reported.
Required = Sequence[Tuple[Tuple[str, ...], str]]


@dataclass(frozen=True)
class _Handler:
    model: Type[BaseModel]
    required: Required
    build: Callable[[Any], OutboundQuery]
    finish: Callable[[Any, Any], Outcome]


# Forwarded verbatim: only absent or empty counts as missing, never blank.
OPAQUE_FIELDS = frozenset({"token"})


def _missing(name: str, value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value if name in OPAQUE_FIELDS else not value.strip()
    return False


def _finish_nearest(req: NearestFacilityRequest, data: Any) -> Outcome:
    raise_for_remote_error(data)
    features = data.get("features") if isinstance(data, dict) else None
    if not isinstance(features, list):
        raise RemoteServiceError("No features returned from layer")
    nearest = select_nearest(features, req.x, req.y)
    if nearest is None:
        return Outcome(404, {"message": NOT_FOUND_MESSAGE})
    return Outcome(200, nearest)


def _finish_tradeoffs(req: TradeoffsRequest, data: Any) -> Outcome:
    raise_for_remote_error(data)
    features = data.get("features") if isinstance(data, dict) else None
    return Outcome(200, compare_thresholds(
        features,
        req.strong_field,
        req.weak_field,
        req.strong_threshold,
        req.weak_threshold,
        name_field=req.name_field or config.DISTRICT_NAME_FIELD,
    ))


HANDLERS: Dict[Intent, _Handler] = {
    Intent.LIST_LAYERS: _Handler(
        ListLayersRequest,
        ((("portal_url",), "portal_url required"), (("token",), "token required")),
        lambda r: build_list_layers(r.portal_url, r.token),
        lambda r, data: Outcome(200, normalize_layers(data)),
    ),
    Intent.QUERY_FEATURES: _Handler(
        QueryFeaturesRequest,
        ((("layer_url",), "layer_url required"), (("token",), "token required")),
        lambda r: build_query_features(r.layer_url, r.token, r.geometry),
        lambda r, data: Outcome(200, normalize_features(data)),
    ),
    Intent.GET_STATISTICS: _Handler(
        StatisticsRequest,
        (
            (("layer_url",), "layer_url required"),
            (("token",), "token required"),
            (("statFields",), "statFields required"),
        ),
        lambda r: build_statistics(r.layer_url, r.token, parse_stat_fields(r.statFields)),
        lambda r, data: Outcome(200, normalize_statistics(data).as_response()),
    ),
    Intent.EXPORT_MAP: _Handler(
        ExportMapRequest,
        ((("map_service_url",), "map_service_url required"), (("token",), "token required")),
        lambda r: build_export_map(r.map_service_url, r.token, r.bbox),
        lambda r, data: Outcome(200, normalize_export(data)),
    ),
    Intent.GET_TRADEOFFS: _Handler(
        TradeoffsRequest,
        (
            (("layer_url",), "layer_url required"),
            (("token",), "token required"),
            (("strong_field", "weak_field"), "strong_field and weak_field required"),
            (("strong_threshold", "weak_threshold"), "strong_threshold and weak_threshold required"),
        ),
        lambda r: build_tradeoffs(r.layer_url, r.token),
        _finish_tradeoffs,
    ),
    Intent.GET_NEAREST_FACILITY: _Handler(
        NearestFacilityRequest,
        (
            (("feature_service_url",), "feature_service_url required"),
            (("token",), "token required"),
            (("x", "y"), "x and y coordinates required"),
        ),
        lambda r: build_nearest_facility(r.feature_service_url, r.token, r.x, r.y),
        _finish_nearest,
    ),
}


def _validate(handler: _Handler, payload: Any) -> BaseModel:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ClientInputError("request body must be a JSON object")
    try:
        req = handler.model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise ClientInputError(f"{loc}: {first.get('msg', 'invalid value')}") from e
    for fields, message in handler.required:
        if any(_missing(f, getattr(req, f)) for f in fields):
            raise ClientInputError(message)
    return req


# ── Outbound ───────────────────────────────────────────────────────────────────
async def fetch_json(client: httpx.AsyncClient, query: OutboundQuery) -> Any:
    """Single GET against the remote service; no retries."""
    logger.debug("GET %s", query.url)
    r = await client.get(query.url, params=query.params)
    r.raise_for_status()
    return r.json()


async def _fetch(client: Optional[httpx.AsyncClient], query: OutboundQuery) -> Any:
    if client is not None:
        return await fetch_json(client, query)
    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as owned:
        return await fetch_json(owned, query)


async def dispatch(intent: Any, payload: Any, client: Optional[httpx.AsyncClient] = None) -> Outcome:
    """Run one intent end to end and classify the result."""
    try:
        intent = Intent(intent)
    except ValueError:
        return Outcome(400, {"error": f"unknown intent: {intent}"})
    handler = HANDLERS[intent]

    try:
        req = _validate(handler, payload)
        query = handler.build(req)
    except ClientInputError as e:
        logger.info("[%s] rejected: %s", intent.value, e)
        return Outcome(400, {"error": str(e)})

    try:
        data = await _fetch(client, query)
        outcome = handler.finish(req, data)
    except RemoteServiceError as e:
        logger.warning("[%s] remote error from %s: %s", intent.value, query.url, e.detail)
        return Outcome(500, {"error": e.detail})
    except Exception as e:
        logger.exception("[%s] failed calling %s", intent.value, query.url)
        return Outcome(500, {"error": f"{intent.value} failed", "detail": str(e)})

    if outcome.status == 404:
        logger.info("[%s] no result for %s", intent.value, query.url)
    return outcome
