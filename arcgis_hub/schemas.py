# schemas.py
"""Request bodies per intent.

Every field is optional at the model level so a missing value surfaces as a
``"<field> required"`` client error from the dispatcher rather than a generic
validation failure.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class _Request(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    token: Optional[str] = None


class ListLayersRequest(_Request):
    portal_url: Optional[str] = None


class QueryFeaturesRequest(_Request):
    layer_url: Optional[str] = None
    geometry: Optional[Dict[str, Any]] = None


class StatisticsRequest(_Request):
    layer_url: Optional[str] = None
    statFields: Optional[str] = None


class ExportMapRequest(_Request):
    map_service_url: Optional[str] = None
    bbox: Optional[str] = None


class TradeoffsRequest(_Request):
    layer_url: Optional[str] = None
    strong_field: Optional[str] = None
    weak_field: Optional[str] = None
    strong_threshold: Optional[float] = None
    weak_threshold: Optional[float] = None
    name_field: Optional[str] = None


class NearestFacilityRequest(_Request):
    feature_service_url: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
