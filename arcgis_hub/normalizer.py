# normalizer.py
"""Reshape raw ArcGIS REST payloads into the small response contract per intent."""
from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import RemoteServiceError


def raise_for_remote_error(payload: Any) -> None:
    """ArcGIS reports most failures as HTTP 200 with an ``error`` member."""
    if isinstance(payload, dict) and payload.get("error"):
        raise RemoteServiceError(payload["error"])


def normalize_layers(payload: Any) -> Dict[str, List[Dict[str, Any]]]:
    raise_for_remote_error(payload)
    results = payload.get("results") if isinstance(payload, dict) else None
    items = [
        {"id": item.get("id"), "title": item.get("title"), "url": item.get("url") or None}
        for item in (results or [])
        if isinstance(item, dict)
    ]
    return {"items": items}


def normalize_features(payload: Any) -> Any:
    raise_for_remote_error(payload)
    return payload


@dataclass
class StatisticsResult:
    """Either a records array (``statistics`` / ``features``) or an opaque echo
    of the remote payload (``passthrough``). Consumers must not assume a schema."""

    kind: str
    value: Any

    def as_response(self) -> Dict[str, Any]:
        return {"statistics": self.value}


def normalize_statistics(payload: Any) -> StatisticsResult:
    raise_for_remote_error(payload)
    if isinstance(payload, dict):
        if payload.get("statistics"):
            return StatisticsResult("statistics", payload["statistics"])
        if payload.get("features"):
            return StatisticsResult("features", payload["features"])
    return StatisticsResult("passthrough", payload)


def normalize_export(payload: Any) -> Dict[str, Any]:
    raise_for_remote_error(payload)
    image = payload
    if isinstance(payload, dict):
        image = payload.get("href") or payload.get("url") or payload
    return {"image": image}
