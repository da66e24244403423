"""
Utility subpackage for veilmap:
- config_loader   → YAML loader, overrides & offset settings
- geospatial      → light helpers (haversine, clamp, bbox center, longitude wrap)
- io              → JSON read/write for the CLI
- logging_utils   → unified logger setup
- timing          → wall-time timers for benchmarks
"""
