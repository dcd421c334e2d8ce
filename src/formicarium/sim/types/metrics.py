from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    food_sources: int
    food_remaining: int
    food_taken: int
    deaths: int
    tick_duration_ms: float = 0.0
