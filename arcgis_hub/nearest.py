# nearest.py
"""
Nearest-feature selection around a query point.

The remote search is scoped by a square envelope built here; ranking is plain
planar distance in the query's spatial reference units (degrees for 4326), not
geodesic distance.
"""
from dataclasses import dataclass
from math import hypot, isfinite
from typing import Any, Dict, List, Optional

WGS84_WKID = 4326


@dataclass(frozen=True)
class Envelope:
    xmin: float
    ymin: float
    xmax: float
    ymax: float
    wkid: int = WGS84_WKID

    def to_arcgis(self) -> Dict[str, Any]:
        return {
            "xmin": self.xmin,
            "ymin": self.ymin,
            "xmax": self.xmax,
            "ymax": self.ymax,
            "spatialReference": {"wkid": self.wkid},
        }


def envelope_around(x: float, y: float, buffer: float) -> Envelope:
    return Envelope(x - buffer, y - buffer, x + buffer, y + buffer)


def _point(geometry: Any) -> Optional[tuple[float, float]]:
    if not isinstance(geometry, dict):
        return None
    gx, gy = geometry.get("x"), geometry.get("y")
    for v in (gx, gy):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not isfinite(v):
            return None
    return float(gx), float(gy)


def planar_distance(geometry: Any, x: float, y: float) -> Optional[float]:
    """Euclidean distance from a point geometry to (x, y); None if not a point."""
    p = _point(geometry)
    if p is None:
        return None
    return hypot(p[0] - x, p[1] - y)


def select_nearest(features: List[Dict[str, Any]], x: float, y: float) -> Optional[Dict[str, Any]]:
    """Return ``{"attributes", "geometry"}`` of the closest feature, or None.

    Features without a point geometry are skipped. On ties the earliest
    feature in input order wins.
    """
    best = None
    best_dist = None
    for feat in features:
        if not isinstance(feat, dict):
            continue
        d = planar_distance(feat.get("geometry"), x, y)
        if d is None:
            continue
        if best_dist is None or d < best_dist:
            best, best_dist = feat, d

    if best is None:
        return None
    return {"attributes": best.get("attributes"), "geometry": best.get("geometry")}
