"""
Entity model: points, the location-bearing capability and its two variants.

Scenes (place-like) and events (gathering-like) share the LocationCarrier
fields: a stable id, the owner's precise-location consent flag, an optional
precise point and an optional area-code. Everything else is display data
that flows through to the rendered feature untouched.

Upstream records arrive as JSON dicts; `entity_from_dict` maps them onto the
tagged variants, accepting the wire names `allow_precise` and
`coarse_geohash` as aliases.
"""
from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from .errors import InvalidCoordinate, InvalidEntity


@dataclass(frozen=True)
class Point:
    """A WGS84 coordinate in degrees."""
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise InvalidCoordinate(f"Non-finite coordinate: ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidCoordinate(f"Latitude out of range [-90, 90]: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidCoordinate(f"Longitude out of range [-180, 180]: {self.lng}")

    def to_lng_lat(self) -> List[float]:
        """GeoJSON position order: [longitude, latitude]."""
        return [self.lng, self.lat]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Point":
        try:
            return cls(float(data["lat"]), float(data["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidCoordinate(f"Malformed point: {data!r}") from e


@dataclass(frozen=True)
class Palette:
    primary: str
    secondary: str

    def to_dict(self) -> Dict[str, str]:
        return {"primary": self.primary, "secondary": self.secondary}


@dataclass(frozen=True)
class LocationCarrier:
    """
    Shared location capability of every entity kind.

    Instances are frozen but not hashable once they carry list/dict display
    fields; key lookups by `id` instead.
    """
    kind: ClassVar[str] = "entity"

    id: str
    has_precise_consent: bool = False
    precise_point: Optional[Point] = None
    area_code: Optional[str] = None

    def display_attributes(self) -> Dict[str, Any]:
        """
        Attributes handed to the renderer; never includes the precise point.

        Returns a fresh deep copy, so callers may mutate it freely. The
        area-code goes out as `coarse_geohash`, the name map layers key on.
        """
        return {"id": self.id, "type": self.kind}


@dataclass(frozen=True)
class Scene(LocationCarrier):
    """A place-like entity."""
    kind: ClassVar[str] = "scene"

    name: str = ""
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    visibility: Optional[str] = None
    palette: Optional[Palette] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def display_attributes(self) -> Dict[str, Any]:
        attrs = copy.deepcopy(self.extra)
        attrs.update(super().display_attributes())
        attrs["name"] = self.name
        if self.description is not None:
            attrs["description"] = self.description
        if self.area_code:
            attrs["coarse_geohash"] = self.area_code
        if self.tags:
            attrs["tags"] = copy.deepcopy(self.tags)
        if self.visibility is not None:
            attrs["visibility"] = self.visibility
        if self.palette is not None:
            attrs["palette"] = self.palette.to_dict()
        return attrs


@dataclass(frozen=True)
class Event(LocationCarrier):
    """A gathering-like entity, optionally hosted by a scene."""
    kind: ClassVar[str] = "event"

    scene_id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def display_attributes(self) -> Dict[str, Any]:
        attrs = copy.deepcopy(self.extra)
        attrs.update(super().display_attributes())
        attrs["name"] = self.name
        if self.description is not None:
            attrs["description"] = self.description
        if self.area_code:
            attrs["coarse_geohash"] = self.area_code
        if self.scene_id is not None:
            attrs["scene_id"] = self.scene_id
        return attrs


Entity = Union[Scene, Event]

ENTITY_KINDS: Dict[str, type] = {Scene.kind: Scene, Event.kind: Event}


# --------------------------------------------------------------------------------------
# Parsing upstream records
# --------------------------------------------------------------------------------------

_LOCATION_KEYS = {
    "id", "type", "kind",
    "has_precise_consent", "allow_precise",
    "precise_point",
    "area_code", "coarse_geohash",
}


def _common_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    entity_id = data.get("id")
    if entity_id is None or str(entity_id) == "":
        raise InvalidEntity(f"Entity record without id: {data!r}")

    consent = data.get("has_precise_consent", data.get("allow_precise"))
    if consent is None:
        consent = False
    if not isinstance(consent, bool):
        raise InvalidEntity(f"Consent flag for {entity_id!r} must be true or false, got {consent!r}")

    raw_point = data.get("precise_point")
    area_code = data.get("area_code", data.get("coarse_geohash")) or None

    return {
        "id": str(entity_id),
        "has_precise_consent": consent,
        "precise_point": Point.from_dict(raw_point) if raw_point else None,
        "area_code": str(area_code) if area_code is not None else None,
    }


def entity_from_dict(data: Mapping[str, Any], kind: Optional[str] = None) -> Entity:
    """
    Build a Scene or Event from an upstream JSON record.

    The variant comes from `kind` when given, else from the record's
    "type"/"kind" field. Keys the variant does not know go to `extra`.
    """
    tag = kind or data.get("type") or data.get("kind")
    if tag not in ENTITY_KINDS:
        raise InvalidEntity(f"Unknown entity kind {tag!r} for record {data.get('id')!r}")

    common = _common_fields(data)

    if tag == Scene.kind:
        palette = data.get("palette")
        if palette and not {"primary", "secondary"} <= set(palette):
            raise InvalidEntity(f"Malformed palette for scene {common['id']!r}: {palette!r}")
        known = _LOCATION_KEYS | {"name", "description", "tags", "visibility", "palette"}
        return Scene(
            **common,
            name=str(data.get("name", "")),
            description=data.get("description"),
            tags=list(data.get("tags") or []),
            visibility=data.get("visibility"),
            palette=Palette(str(palette["primary"]), str(palette["secondary"])) if palette else None,
            extra={k: v for k, v in data.items() if k not in known},
        )

    known = _LOCATION_KEYS | {"name", "description", "scene_id"}
    return Event(
        **common,
        scene_id=data.get("scene_id"),
        name=str(data.get("name", "")),
        description=data.get("description"),
        extra={k: v for k, v in data.items() if k not in known},
    )


def entities_from_payload(payload: Any) -> List[Entity]:
    """
    Parse a whole upstream payload.

    Accepts a list of tagged records, or {"scenes": [...], "events": [...]}
    (scenes first, then events, preserving order within each list).
    """
    if isinstance(payload, Mapping):
        out: List[Entity] = [entity_from_dict(d, kind=Scene.kind) for d in payload.get("scenes") or []]
        out.extend(entity_from_dict(d, kind=Event.kind) for d in payload.get("events") or [])
        return out
    if isinstance(payload, list):
        return [entity_from_dict(d) for d in payload]
    raise InvalidEntity(f"Unsupported entity payload type: {type(payload).__name__}")
