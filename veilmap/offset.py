"""
Deterministic display offsets for coarse (non-consented) locations.

The "random" offset for an entity is derived from its own stable id run
through 32-bit FNV-1a, so it is reproducible across calls, restarts and
independent implementations, and needs no stored seed.

Two hashes (id + "-lat", id + "-lng") give two uniforms in [0, 1). They are
mapped to a point uniformly distributed *by area* inside a disk of the given
radius: angle = u1 * 2π, r = sqrt(u2) * R. Sampling r linearly would pile
points up near the center.

Meters become degrees with a flat 111,320 m/deg. The longitude value is an
equatorial basis; `apply_offset` divides it by cos(latitude), with latitude
clamped to ±85° (the Web Mercator bound) so the divisor never nears zero.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from .entities import Point
from .utils.geospatial import clamp, wrap_longitude

DEFAULT_OFFSET_RADIUS_M = 250.0
MAX_SCALING_LAT = 85.0
METERS_PER_DEGREE_LAT = 111320.0

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

_LAT_SUFFIX = b"-lat"
_LNG_SUFFIX = b"-lng"
_TWO_POW_32 = float(2 ** 32)
_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Offset:
    lat_offset_deg: float
    lng_offset_base_deg: float


def fnv1a_32(data: bytes, seed: int = FNV_OFFSET_BASIS) -> int:
    """
    32-bit FNV-1a over `data`.

    `seed` is the running hash state; passing the result of a previous call
    continues hashing as if the two byte strings were concatenated.
    """
    h = seed
    for byte in data:
        h = ((h ^ byte) * FNV_PRIME) & 0xFFFFFFFF
    return h


def calculate_offset(entity_id: str, radius_m: float = DEFAULT_OFFSET_RADIUS_M) -> Offset:
    """Deterministic offset inside a disk of `radius_m` meters, keyed on `entity_id`."""
    if not math.isfinite(radius_m) or radius_m < 0:
        raise ValueError(f"Offset radius must be a finite, non-negative number of meters: {radius_m}")

    prefix = fnv1a_32(entity_id.encode("utf-8"))
    u1 = fnv1a_32(_LAT_SUFFIX, prefix) / _TWO_POW_32
    u2 = fnv1a_32(_LNG_SUFFIX, prefix) / _TWO_POW_32

    angle = u1 * _TWO_PI
    r = math.sqrt(u2) * radius_m

    dx = r * math.cos(angle)
    dy = r * math.sin(angle)
    return Offset(dy / METERS_PER_DEGREE_LAT, dx / METERS_PER_DEGREE_LAT)


def scale_lng_offset(lng_offset_base_deg: float, lat: float, max_abs_lat: float = MAX_SCALING_LAT) -> float:
    """Stretch an equatorial-basis longitude offset for latitude `lat`."""
    clamped = clamp(lat, -max_abs_lat, max_abs_lat)
    return lng_offset_base_deg / math.cos(math.radians(clamped))


def apply_offset(
    lat: float,
    lng: float,
    entity_id: str,
    radius_m: float = DEFAULT_OFFSET_RADIUS_M,
    max_abs_lat: float = MAX_SCALING_LAT,
) -> Point:
    """
    Shift (lat, lng) by the entity's deterministic offset.

    The result is kept inside the valid domain: latitude is clamped to
    [-90, 90] and longitude wrapped across the antimeridian.
    """
    offset = calculate_offset(entity_id, radius_m)
    new_lat = clamp(lat + offset.lat_offset_deg, -90.0, 90.0)
    new_lng = wrap_longitude(lng + scale_lng_offset(offset.lng_offset_base_deg, lat, max_abs_lat))
    return Point(new_lat, new_lng)


def should_apply_offset(has_precise_consent: bool) -> bool:
    """Offsets apply only to coarse locations, i.e. when precise consent is absent."""
    return not has_precise_consent
