# FILE: veilmap/__main__.py
# =============================================================================
# Allows `python -m veilmap` to invoke the Typer CLI defined in veilmap/cli.py
# =============================================================================
from __future__ import annotations

from .cli import app

if __name__ == "__main__":
    app()
