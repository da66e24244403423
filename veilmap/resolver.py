"""
Consent-gated coordinate resolution.

Policy, in order:
1) owner consented and a precise point exists → that point, unchanged;
2) otherwise the area-code is required → decoded cell center shifted by the
   entity's deterministic offset.

An entity with neither raises MissingLocationData. There is no (0, 0)
fallback: a made-up coordinate would place the entity somewhere real.
"""
from __future__ import annotations

from dataclasses import replace

from .area_code import decode
from .entities import Entity, LocationCarrier, Point
from .errors import MissingLocationData
from .offset import DEFAULT_OFFSET_RADIUS_M, MAX_SCALING_LAT, apply_offset, should_apply_offset


def resolve(
    entity: LocationCarrier,
    radius_m: float = DEFAULT_OFFSET_RADIUS_M,
    max_abs_lat: float = MAX_SCALING_LAT,
) -> Point:
    """
    Return the coordinate that may be shown on a map for `entity`.

    Raises
    ------
    MissingLocationData
        No authorized precise point and no area-code.
    InvalidAreaCode / InvalidCharacter
        The area-code cannot be decoded.
    """
    if not should_apply_offset(entity.has_precise_consent) and entity.precise_point is not None:
        return entity.precise_point

    if not entity.area_code:
        raise MissingLocationData(entity.id, entity.kind)

    center = decode(entity.area_code)
    return apply_offset(center.lat, center.lng, entity.id, radius_m, max_abs_lat)


def enforce_location_consent(entity: Entity) -> Entity:
    """Return a copy of `entity` with its precise point cleared unless the owner consented."""
    if entity.has_precise_consent or entity.precise_point is None:
        return entity
    return replace(entity, precise_point=None)
