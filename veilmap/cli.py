# FILE: veilmap/cli.py
# =================================================================================================
# veilmap — Typer CLI
#
# Developer tooling around the resolution core. The core itself does no I/O; this CLI reads
# upstream entity records from JSON, writes GeoJSON, and exposes the codec/offset math for
# quick inspection.
#
# Usage
# -----
#   veilmap decode 9q8yy
#   veilmap offset scene-1 --radius 250
#   veilmap build entities.json -o features.geojson -c configs/veilmap.yaml
#   veilmap bench --count 10000
#
# Config: --config, else $VEILMAP_CONFIG (may come from .env), else built-in defaults.
# =================================================================================================
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import get_version
from .area_code import decode_bounds, round_area_code
from .dataset import build, run_build
from .entities import Entity, Event, Point, Scene, entities_from_payload
from .errors import InvalidAreaCode, LocationError
from .offset import DEFAULT_OFFSET_RADIUS_M, calculate_offset
from .utils.config_loader import area_code_precision, offset_settings, resolve_config
from .utils.geospatial import bbox_center
from .utils.io import read_json, write_json
from .utils.logging_utils import get_logger, init_logging
from .utils.timing import best_of

app = typer.Typer(add_completion=False, help="veilmap — privacy-preserving coordinate resolution")
console = Console()

# Load environment variables from .env if present (no error if missing)
load_dotenv(override=False)


def _load_config(config: Optional[Path], log_level: Optional[str]) -> dict:
    path = config or os.environ.get("VEILMAP_CONFIG") or None
    cfg = resolve_config(path)
    if log_level:
        cfg["logging"]["level"] = log_level
    init_logging(cfg)
    return cfg


def synthetic_entities(count: int) -> List[Entity]:
    """Half scenes, half events around San Francisco; alternating consent."""
    out: List[Entity] = []
    half = count // 2
    for i in range(count):
        lat = 37.2749 + (i % 1000) / 1000.0
        lng = -122.9194 + ((i * 7) % 1000) / 1000.0
        if i < half:
            out.append(Scene(
                id=f"scene-{i}",
                has_precise_consent=i % 2 == 0,
                precise_point=Point(lat, lng),
                area_code="9q8yy",
                name=f"Scene {i}",
                tags=["test", f"tag-{i % 10}"],
                visibility="public",
            ))
        else:
            out.append(Event(
                id=f"event-{i}",
                has_precise_consent=i % 3 == 0,
                precise_point=Point(lat, lng),
                area_code="9q8yy",
                scene_id=f"scene-{i % 100}",
                name=f"Event {i}",
            ))
    return out


@app.command("version")
def version() -> None:
    """Print the veilmap version."""
    rprint({"veilmap_version": get_version()})


@app.command("decode")
def decode_cmd(
    code: str = typer.Argument(..., help="Area-code (geohash) to decode"),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", help="Truncate to N chars (default: area_code.precision)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config YAML"),
) -> None:
    """Normalize an area-code, then decode it to its cell bounds and center."""
    if precision is None:
        try:
            precision = area_code_precision(_load_config(config, None))
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(code=2)
    # Codes that fail normalization are decoded as given so the error names the bad symbol.
    code = round_area_code(code, precision) or code
    try:
        min_lat, min_lng, max_lat, max_lng = decode_bounds(code)
    except InvalidAreaCode as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)
    lat, lng = bbox_center(min_lat, min_lng, max_lat, max_lng)

    table = Table(title=f"Area-code {code}", show_lines=True)
    table.add_column("Field", justify="right", style="bold")
    table.add_column("Value")
    table.add_row("center", f"{lat:.6f}, {lng:.6f}")
    table.add_row("lat range", f"{min_lat:.6f} … {max_lat:.6f}")
    table.add_row("lng range", f"{min_lng:.6f} … {max_lng:.6f}")
    console.print(table)


@app.command("offset")
def offset_cmd(
    entity_id: str = typer.Argument(..., help="Stable entity id"),
    radius: float = typer.Option(DEFAULT_OFFSET_RADIUS_M, "--radius", "-r", help="Offset radius in meters"),
) -> None:
    """Show the deterministic display offset for an entity id."""
    try:
        off = calculate_offset(entity_id, radius)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)
    rprint({
        "id": entity_id,
        "radius_m": radius,
        "lat_offset_deg": off.lat_offset_deg,
        "lng_offset_base_deg": off.lng_offset_base_deg,
    })


@app.command("build")
def build_cmd(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Entity records (JSON)"),
    out: Path = typer.Option(Path("features.geojson"), "--out", "-o", help="GeoJSON output path"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config YAML"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override logging.level"),
) -> None:
    """Resolve entity records into a GeoJSON FeatureCollection."""
    cfg = _load_config(config, log_level)
    log = get_logger("veilmap.cli")

    try:
        entities = entities_from_payload(read_json(input_path))
    except LocationError as e:
        log.error(f"Cannot parse {input_path}: {e}")
        raise typer.Exit(code=2)

    art = run_build(cfg, entities)
    write_json(out, art["feature_collection"])

    console.print(Panel.fit(f"Wrote {art['num_features']} features → [bold]{out}[/bold]", border_style="green"))
    if art["num_skipped"]:
        console.print(f"[yellow]Skipped {art['num_skipped']} unplaceable entities:[/yellow] "
                      + ", ".join(art["skipped_ids"]))


@app.command("bench")
def bench_cmd(
    count: List[int] = typer.Option([5000, 10000], "--count", "-n", help="Entity counts to time"),
    repeat: int = typer.Option(3, "--repeat", help="Runs per count (best is reported)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config YAML"),
) -> None:
    """Time build() over synthetic entities."""
    cfg = _load_config(config, "WARNING")
    radius_m, max_abs_lat = offset_settings(cfg)

    table = Table(title="build() wall time", show_lines=True)
    table.add_column("entities", justify="right")
    table.add_column("best ms", justify="right")
    table.add_column("µs / entity", justify="right")
    for n in count:
        entities = synthetic_entities(n)
        rec = best_of(lambda: build(entities, radius_m, max_abs_lat), repeat=repeat, label=f"build-{n}")
        ms = rec.wall_seconds * 1000.0
        table.add_row(str(n), f"{ms:.1f}", f"{ms * 1000.0 / max(1, n):.2f}")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
