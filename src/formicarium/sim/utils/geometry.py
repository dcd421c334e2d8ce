from __future__ import annotations

from pygame.math import Vector2

ARRIVAL_THRESHOLD = 2.0


def distance(a: Vector2, b: Vector2) -> float:
    return a.distance_to(b)


def has_arrived(a: Vector2, b: Vector2, threshold: float = ARRIVAL_THRESHOLD) -> bool:
    # strict: a point exactly `threshold` away has not arrived
    return a.distance_to(b) < threshold


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def step_toward(origin: Vector2, target: Vector2) -> tuple[int, int]:
    return _sign(target.x - origin.x), _sign(target.y - origin.y)
