# veilmap/__init__.py
# ======================================================================================
# veilmap — privacy-preserving coordinate resolution for map display
#
# Entities (scenes and events) choose how precisely they appear on a map:
#   1) area_code → base-32 geohash decoding to a cell center
#   2) offset    → deterministic FNV-1a keyed offset inside a disk (default 250 m)
#   3) resolver  → consent gate: exact point when authorized, else center + offset
#   4) dataset   → ordered feature records / GeoJSON FeatureCollection for rendering
#
# Design goals
# ------------
# - Pure & reproducible: same entity id → same offset, across runs and implementations.
# - Fast: thousands of entities per render cycle, single-threaded.
# - Privacy-first: no (0, 0) fallback, precise points never leak without consent.
# ======================================================================================

from __future__ import annotations

import os

from .area_code import decode, decode_bounds, is_valid_area_code, round_area_code
from .dataset import FeatureRecord, build, build_feature_collection, run_build
from .entities import Event, LocationCarrier, Point, Scene, entities_from_payload, entity_from_dict
from .errors import (
    InvalidAreaCode,
    InvalidCharacter,
    InvalidCoordinate,
    InvalidEntity,
    LocationError,
    MissingLocationData,
)
from .offset import Offset, apply_offset, calculate_offset, fnv1a_32, should_apply_offset
from .resolver import enforce_location_consent, resolve

__all__ = [
    # Codec
    "decode",
    "decode_bounds",
    "is_valid_area_code",
    "round_area_code",
    # Offsets
    "Offset",
    "fnv1a_32",
    "calculate_offset",
    "apply_offset",
    "should_apply_offset",
    # Resolution & dataset
    "resolve",
    "enforce_location_consent",
    "FeatureRecord",
    "build",
    "build_feature_collection",
    "run_build",
    # Model
    "Point",
    "LocationCarrier",
    "Scene",
    "Event",
    "entity_from_dict",
    "entities_from_payload",
    # Errors
    "LocationError",
    "InvalidAreaCode",
    "InvalidCharacter",
    "InvalidCoordinate",
    "InvalidEntity",
    "MissingLocationData",
    "get_version",
]


def get_version() -> str:
    """
    Return the package version.
    Uses environment variable VEILMAP_VERSION if present, else the static value.
    """
    return os.environ.get("VEILMAP_VERSION", "0.3.0")


__version__ = get_version()
