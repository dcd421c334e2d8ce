from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, ClassVar, Optional, Protocol, Union

from pygame.math import Vector2

from .entities import FoodSource
from ..utils.geometry import ARRIVAL_THRESHOLD, has_arrived, step_toward


class AntState(str, Enum):
    FORAGING = "FORAGING"
    RETURNING_TO_NEST = "RETURNING_TO_NEST"


class Lifecycle(str, Enum):
    ALIVE = "ALIVE"
    DEAD = "DEAD"


class DirectionSource(Protocol):
    def next_direction(self) -> int: ...


@dataclass(frozen=True, slots=True)
class Move:
    kind: ClassVar[str] = "MOVE"
    dx: int
    dy: int


@dataclass(frozen=True, slots=True)
class TakeFood:
    kind: ClassVar[str] = "TAKE_FOOD"
    food_id: str


@dataclass(frozen=True, slots=True)
class Idle:
    kind: ClassVar[str] = "IDLE"


Action = Union[Move, TakeFood, Idle]


@dataclass(frozen=True, slots=True)
class Perception:
    nearest_food: Optional[FoodSource]
    nest_position: Vector2


@dataclass(frozen=True, slots=True)
class Ant:
    """Private state of one ant. Only the simulation holds these."""

    id: str
    position: Vector2
    state: AntState = AntState.FORAGING
    lifecycle: Lifecycle = Lifecycle.ALIVE
    has_food: bool = False

    @property
    def alive(self) -> bool:
        return self.lifecycle is Lifecycle.ALIVE


def new_ant_id() -> str:
    return uuid.uuid4().hex


def spawn(position: Vector2, id_factory: Callable[[], str] = new_ant_id) -> Ant:
    return Ant(id=id_factory(), position=Vector2(position))


def kill(ant: Ant) -> Ant:
    if ant.lifecycle is Lifecycle.DEAD:
        return ant
    return replace(ant, lifecycle=Lifecycle.DEAD)


def move(ant: Ant, dx: int, dy: int) -> Ant:
    # no clamping: ants may wander outside the nominal world rectangle
    return replace(ant, position=ant.position + Vector2(dx, dy))


def perceive(
    ant: Ant,
    perception: Perception,
    rng: DirectionSource,
    threshold: float = ARRIVAL_THRESHOLD,
) -> tuple[Ant, Action]:
    """Advance the forage/return cycle by one step.

    Returns the ant's next record together with the action it wants applied.
    The input record is never mutated; a state change (picking up food at a
    source, dropping it at the nest) shows up only in the returned record.
    """
    if ant.state is AntState.FORAGING:
        food = perception.nearest_food
        if food is None:
            dx = rng.next_direction()
            dy = rng.next_direction()
            return ant, Move(dx, dy)
        if has_arrived(ant.position, food.position, threshold):
            carrying = replace(ant, state=AntState.RETURNING_TO_NEST, has_food=True)
            return carrying, TakeFood(food.id)
        return ant, Move(*step_toward(ant.position, food.position))

    if has_arrived(ant.position, perception.nest_position, threshold):
        return replace(ant, state=AntState.FORAGING, has_food=False), Idle()
    return ant, Move(*step_toward(ant.position, perception.nest_position))
