"""
Shared pytest fixtures for veilmap tests.

Writes a minimal config YAML into a temp folder and provides the resolved
config dict via veilmap.utils.config_loader, plus a few canned entities.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import pytest

from veilmap.cli import synthetic_entities
from veilmap.entities import Event, Point, Scene
from veilmap.utils.config_loader import resolve_config


_MIN_CONFIG_YAML = """\
offset:
  radius_m: 250.0
  max_abs_lat: 85.0

area_code:
  precision: 6

logging:
  level: "INFO"
  to_file: false
  to_json: false
  dir: "{LOGS}"
"""

SF = Point(37.7749, -122.4194)


@pytest.fixture(scope="function")
def cfg_path(tmp_path: Path) -> Path:
    """Writes a minimal veilmap.yaml into tmp_path/configs/ and returns its path."""
    cfg_dir = tmp_path / "configs"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    text = _MIN_CONFIG_YAML.replace("{LOGS}", str((tmp_path / "logs").as_posix()))
    p = cfg_dir / "veilmap.yaml"
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture(scope="function")
def cfg(cfg_path: Path) -> Dict:
    return resolve_config(cfg_path)


@pytest.fixture
def precise_scene() -> Scene:
    return Scene(
        id="scene-precise",
        has_precise_consent=True,
        precise_point=SF,
        area_code="9q8yy",
        name="Warehouse",
        tags=["techno"],
        visibility="public",
    )


@pytest.fixture
def coarse_scene() -> Scene:
    return Scene(
        id="scene-coarse",
        has_precise_consent=False,
        precise_point=SF,
        area_code="9q8yy",
        name="Basement",
    )


@pytest.fixture
def mixed_entities(precise_scene: Scene, coarse_scene: Scene) -> List:
    return [
        precise_scene,
        Event(id="event-no-location", scene_id="scene-precise", name="Ghost"),
        coarse_scene,
        Event(id="event-coarse", scene_id="scene-coarse", name="Night 1", area_code="9q8yyk8"),
        Scene(id="scene-bad-code", name="Typo", area_code="9q8ai"),
    ]


@pytest.fixture
def make_entities():
    return synthetic_entities


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """CLI commands call init_logging; drop their handlers between tests."""
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if not type(h).__module__.startswith("_pytest"):
            root.removeHandler(h)
            h.close()
