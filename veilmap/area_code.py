"""
Area-code codec: base-32 geohash decoding.

Area-codes are produced upstream when entities are created; this module only
reads them back. Each character carries 5 bits (MSB first) and the bits
alternate between longitude and latitude across the whole bitstream,
starting with longitude. A 1-bit keeps the upper half of the active range,
a 0-bit the lower half.

Precision rule of thumb:
- 5 chars → ~4.9 km x 4.9 km cell at the equator
- 7 chars → ~153 m x 153 m cell at the equator
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Tuple

from .entities import Point
from .errors import InvalidAreaCode, InvalidCharacter
from .utils.geospatial import bbox_center

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
DEFAULT_PRECISION = 6

_INDEX: Dict[str, int] = {ch: i for i, ch in enumerate(BASE32)}
_BITS = (16, 8, 4, 2, 1)


@lru_cache(maxsize=16384)
def decode_bounds(code: str) -> Tuple[float, float, float, float]:
    """
    Decode an area-code into its cell (min_lat, min_lng, max_lat, max_lng).

    Raises InvalidAreaCode for an empty code and InvalidCharacter for any
    symbol outside the alphabet (decoding is case-sensitive).
    """
    if not code:
        raise InvalidAreaCode("Invalid area-code: empty string")

    lat_min, lat_max = -90.0, 90.0
    lng_min, lng_max = -180.0, 180.0
    even = True  # longitude first

    for pos, ch in enumerate(code):
        idx = _INDEX.get(ch)
        if idx is None:
            raise InvalidCharacter(code, ch, pos)
        for mask in _BITS:
            if even:
                mid = (lng_min + lng_max) / 2
                if idx & mask:
                    lng_min = mid
                else:
                    lng_max = mid
            else:
                mid = (lat_min + lat_max) / 2
                if idx & mask:
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even

    return (lat_min, lng_min, lat_max, lng_max)


@lru_cache(maxsize=16384)
def decode(code: str) -> Point:
    """Decode an area-code to the center Point of its cell."""
    lat, lng = bbox_center(*decode_bounds(code))
    return Point(lat, lng)


def is_valid_area_code(code: str) -> bool:
    return bool(code) and all(ch in _INDEX for ch in code)


def round_area_code(code: str, precision: int = DEFAULT_PRECISION) -> str:
    """
    Normalize an area-code to lowercase and truncate it to `precision` chars.

    Returns "" when the code is empty, contains a symbol outside the alphabet,
    or precision <= 0. Codes already shorter than `precision` come back as-is.
    """
    if not code or precision <= 0:
        return ""
    normalized = code.lower()
    if not is_valid_area_code(normalized):
        return ""
    return normalized[:precision]
