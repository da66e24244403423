# FILE: veilmap/utils/io.py
# =================================================================================================
# I/O helpers: JSON load/save and directory ensure.
# The resolution core never touches the filesystem; these serve the CLI only.
# =================================================================================================
from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def ensure_dir(path: str | Path) -> Path:
    """
    Ensure a directory exists (mkdir -p) and return its Path.
    If `path` is a file path, ensure its parent exists.
    """
    p = Path(path)
    if p.suffix:
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_json(path: str | Path) -> Any:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"JSON not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: str | Path, data: Any) -> Path:
    """Write a JSON file with UTF-8 encoding and pretty formatting."""
    p = ensure_dir(path)
    with Path(p).open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return Path(p)
