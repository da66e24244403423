"""
Lightweight geospatial helpers (no heavy GDAL/PROJ required).

Spherical math only; good enough for offset bounds checks and map display.
"""
from __future__ import annotations

import math
from typing import Tuple

EARTH_RADIUS_M = 6371000.0


def bbox_center(min_lat: float, min_lon: float, max_lat: float, max_lon: float) -> Tuple[float, float]:
    """Return centroid (lat, lon) for bbox (lat/lon degrees)."""
    return ((min_lat + max_lat) * 0.5, (min_lon + max_lon) * 0.5)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def wrap_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180]; values already in range are returned untouched."""
    if -180.0 <= lon <= 180.0:
        return lon
    return ((lon + 180.0) % 360.0) - 180.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c
