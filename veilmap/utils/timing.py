# FILE: veilmap/utils/timing.py
# =============================================================================
# High-resolution wall-time timers for the build benchmark and perf tests.
#
#   with Timer("build-10k") as t:
#       build(entities)
#   t.elapsed_ms
# =============================================================================

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List


@dataclass
class TimeRecord:
    label: str
    wall_seconds: float


class Timer:
    """High-resolution wall-time timer with context-manager convenience."""

    def __init__(self, label: str = "") -> None:
        self.label = label or "timer"
        self._t0 = 0.0
        self._t1 = 0.0
        self.elapsed = 0.0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000.0

    def start(self) -> "Timer":
        self._t0 = time.perf_counter()
        return self

    def stop(self) -> float:
        self._t1 = time.perf_counter()
        self.elapsed = self._t1 - self._t0
        return self.elapsed

    def record(self) -> TimeRecord:
        return TimeRecord(self.label, self.elapsed)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def best_of(fn: Callable[[], object], repeat: int = 3, label: str = "") -> TimeRecord:
    """Run `fn` `repeat` times and keep the fastest wall time (filters warm-up noise)."""
    runs: List[float] = []
    for _ in range(max(1, repeat)):
        with Timer(label) as t:
            fn()
        runs.append(t.elapsed)
    return TimeRecord(label or "timer", min(runs))
