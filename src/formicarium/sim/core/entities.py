from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

from pygame.math import Vector2

if TYPE_CHECKING:
    from .agent import Ant, AntState, Lifecycle


def position_payload(position: Vector2) -> Dict[str, float]:
    return {"x": position.x, "y": position.y}


@dataclass(frozen=True, slots=True)
class Nest:
    position: Vector2

    def to_dict(self) -> Dict[str, Any]:
        return {"position": position_payload(self.position)}


@dataclass(slots=True)
class FoodSource:
    id: str
    position: Vector2
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "position": position_payload(self.position), "amount": self.amount}


class PheromoneType(str, Enum):
    TO_FOOD = "to_food"
    TO_HOME = "to_home"


@dataclass(slots=True)
class Pheromone:
    """Trail marker. Stored and serialized, but nothing deposits or follows it yet."""

    position: Vector2
    intensity: float
    type: PheromoneType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": position_payload(self.position),
            "intensity": self.intensity,
            "type": self.type.value,
        }


@dataclass(frozen=True, slots=True)
class AntRecord:
    """The world's public copy of an ant, refreshed once per tick."""

    id: str
    position: Vector2
    state: AntState
    lifecycle: Lifecycle

    @classmethod
    def from_ant(cls, ant: Ant) -> "AntRecord":
        return cls(id=ant.id, position=Vector2(ant.position), state=ant.state, lifecycle=ant.lifecycle)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "position": position_payload(self.position),
            "state": self.state.value,
            "lifecycle": self.lifecycle.value,
        }
