"""
Config loader & resolver

- load_yaml(path): loads YAML into dict (requires PyYAML)
- resolve_config(path, overrides_json): defaults <- YAML file <- optional JSON overrides
- offset_settings(cfg): validated (radius_m, max_abs_lat) for the resolver
- area_code_precision(cfg): validated default precision for area-code normalization
"""
from __future__ import annotations

import copy
import json
import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..offset import DEFAULT_OFFSET_RADIUS_M, MAX_SCALING_LAT
from ..area_code import DEFAULT_PRECISION

DEFAULT_CONFIG: Dict[str, Any] = {
    "offset": {"radius_m": DEFAULT_OFFSET_RADIUS_M, "max_abs_lat": MAX_SCALING_LAT},
    "area_code": {"precision": DEFAULT_PRECISION},
    "logging": {"level": "INFO", "to_file": False, "to_json": False, "dir": "logs"},
}


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    return yaml.safe_load(p.read_text(encoding="utf-8")) or {}


def deep_merge(a: Dict, b: Dict) -> Dict:
    """Recursively merge dict b into a (returns a new dict)."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def resolve_config(path: Optional[str | Path] = None, overrides_json: Optional[str] = None) -> Dict[str, Any]:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        cfg = deep_merge(cfg, load_yaml(path))
    if overrides_json:
        # Accept a JSON string (e.g. {"offset":{"radius_m":500}})
        cfg = deep_merge(cfg, json.loads(overrides_json))
    return cfg


def offset_settings(cfg: Optional[Dict[str, Any]]) -> Tuple[float, float]:
    """Return (radius_m, max_abs_lat) from cfg["offset"], falling back to defaults."""
    section = (cfg or {}).get("offset", {}) or {}
    radius_m = float(section.get("radius_m", DEFAULT_OFFSET_RADIUS_M))
    max_abs_lat = float(section.get("max_abs_lat", MAX_SCALING_LAT))

    if not math.isfinite(radius_m) or radius_m < 0:
        raise ValueError(f"offset.radius_m must be a non-negative number of meters, got {radius_m}")
    if not 0.0 < max_abs_lat < 90.0:
        raise ValueError(f"offset.max_abs_lat must lie in (0, 90), got {max_abs_lat}")
    return radius_m, max_abs_lat


def area_code_precision(cfg: Optional[Dict[str, Any]]) -> int:
    """Return cfg["area_code"]["precision"], the default truncation for round_area_code."""
    section = (cfg or {}).get("area_code", {}) or {}
    precision = int(section.get("precision", DEFAULT_PRECISION))
    if precision <= 0:
        raise ValueError(f"area_code.precision must be a positive number of characters, got {precision}")
    return precision
