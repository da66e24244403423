"""
Dataset builder: entities → ordered feature records → GeoJSON FeatureCollection.

Responsibilities
----------------
- Resolve each entity's display coordinate (consent gate + offset).
- Tag the record with its kind and pass display attributes through.
- Skip entities that cannot be placed, logging a data-integrity warning.
  Nothing is ever defaulted to (0, 0) and no single entity aborts the batch.

Pure computation: no I/O, no shared mutable state. O(n) in the number of
entities; output order equals input order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .entities import Entity, Point
from .errors import InvalidAreaCode, MissingLocationData
from .offset import DEFAULT_OFFSET_RADIUS_M, MAX_SCALING_LAT
from .resolver import resolve
from .utils.config_loader import offset_settings
from .utils.logging_utils import get_logger

log = get_logger("veilmap.dataset")


@dataclass
class FeatureRecord:
    """One resolved entity, ready for a map layer."""
    id: str
    kind: str
    coordinate: Point
    attributes: Dict[str, Any] = field(default_factory=dict)

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": self.coordinate.to_lng_lat()},
            "properties": self.attributes,
        }


def _build(
    entities: Iterable[Entity],
    radius_m: float,
    max_abs_lat: float,
) -> Tuple[List[FeatureRecord], List[str]]:
    records: List[FeatureRecord] = []
    skipped: List[str] = []
    for entity in entities:
        try:
            coordinate = resolve(entity, radius_m, max_abs_lat)
        except MissingLocationData as e:
            log.warning(f"Data integrity: skipping {entity.kind} {entity.id}, {e}")
            skipped.append(entity.id)
            continue
        except InvalidAreaCode as e:
            log.warning(f"Data integrity: skipping {entity.kind} {entity.id}, unplaceable area-code: {e}")
            skipped.append(entity.id)
            continue
        records.append(FeatureRecord(entity.id, entity.kind, coordinate, entity.display_attributes()))
    return records, skipped


def build(
    entities: Iterable[Entity],
    radius_m: float = DEFAULT_OFFSET_RADIUS_M,
    max_abs_lat: float = MAX_SCALING_LAT,
) -> List[FeatureRecord]:
    """Resolve every placeable entity, in input order."""
    records, _ = _build(entities, radius_m, max_abs_lat)
    return records


def to_feature_collection(records: Iterable[FeatureRecord]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": [r.to_geojson() for r in records]}


def build_feature_collection(
    entities: Iterable[Entity],
    radius_m: float = DEFAULT_OFFSET_RADIUS_M,
    max_abs_lat: float = MAX_SCALING_LAT,
) -> Dict[str, Any]:
    """GeoJSON FeatureCollection for `entities`; geometry is [lng, lat]."""
    return to_feature_collection(build(entities, radius_m, max_abs_lat))


def run_build(cfg: Optional[Dict[str, Any]], entities: Iterable[Entity]) -> Dict[str, Any]:
    """Config-driven build. Returns a simple artifact dict."""
    radius_m, max_abs_lat = offset_settings(cfg)
    records, skipped = _build(entities, radius_m, max_abs_lat)

    log.info(f"Build produced {len(records)} features ({len(skipped)} skipped, radius={radius_m:g} m)")
    return {
        "stage": "build",
        "feature_collection": to_feature_collection(records),
        "num_features": len(records),
        "num_skipped": len(skipped),
        "skipped_ids": skipped,
        "radius_m": radius_m,
    }
