# tradeoffs.py
"""
Strong-vs-weak comparison across districts.

Each result entry embeds the caller's own field names as keys, so consumers
must look values up by the same ``strong_field`` / ``weak_field`` they sent.
"""
from math import isfinite
from typing import Any, Dict, List, Optional

from .errors import RemoteServiceError

UNKNOWN_NAME = "Unknown"


def _as_number(value: Any) -> Optional[float]:
    # Missing / null / non-numeric values never satisfy a threshold.
    if value is None or isinstance(value, bool):
        return None
    number = None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    if number is None or not isfinite(number):
        return None
    return number


def passes_thresholds(attrs: Dict[str, Any], strong_field: str, weak_field: str,
                      strong_threshold: float, weak_threshold: float) -> bool:
    strong = _as_number(attrs.get(strong_field))
    weak = _as_number(attrs.get(weak_field))
    if strong is None or weak is None:
        return False
    return strong >= strong_threshold and weak <= weak_threshold


def compare_thresholds(
    features: Any,
    strong_field: str,
    weak_field: str,
    strong_threshold: float,
    weak_threshold: float,
    name_field: str = "D_NAME_EN",
) -> Dict[str, Any]:
    if not isinstance(features, list):
        raise RemoteServiceError("No features returned from layer")

    districts: List[Dict[str, Any]] = []
    for feat in features:
        attrs = feat.get("attributes") if isinstance(feat, dict) else None
        if not isinstance(attrs, dict):
            continue
        if not passes_thresholds(attrs, strong_field, weak_field, strong_threshold, weak_threshold):
            continue
        entry: Dict[str, Any] = {"district_name": attrs.get(name_field) or UNKNOWN_NAME}
        entry[strong_field] = attrs[strong_field]
        entry[weak_field] = attrs[weak_field]
        districts.append(entry)

    return {"count": len(districts), "districts": districts}
