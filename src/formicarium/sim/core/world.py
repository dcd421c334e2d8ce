from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from pygame.math import Vector2

from .agent import Lifecycle
from .entities import AntRecord, FoodSource, Nest, Pheromone
from ..types.snapshot import WorldSnapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupResult:
    removed_food: List[str] = field(default_factory=list)
    removed_ants: List[str] = field(default_factory=list)


class World:
    """Externally visible read model of the colony.

    Holds the nest, food sources, pheromones and the public ant records.
    Ant records lag the simulation's own ant state: they are rewritten
    once per tick, after every ant has acted.
    """

    def __init__(
        self,
        width: float,
        height: float,
        nest_position: Vector2,
        food_sources: Optional[Iterable[FoodSource]] = None,
    ):
        self._width = width
        self._height = height
        self._nest = Nest(Vector2(nest_position))
        self._food_sources: List[FoodSource] = []
        for food in food_sources or []:
            if food.amount <= 0:
                logger.debug("Dropping empty food source %s", food.id)
                continue
            self._food_sources.append(food)
        self._pheromones: Dict[str, Pheromone] = {}
        self._ants: Dict[str, AntRecord] = {}

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def nest(self) -> Nest:
        return self._nest

    @property
    def food_sources(self) -> List[FoodSource]:
        return self._food_sources

    @property
    def pheromones(self) -> Dict[str, Pheromone]:
        return self._pheromones

    @property
    def ants(self) -> Dict[str, AntRecord]:
        return self._ants

    def get_nearest_food_source(self, position: Vector2) -> Optional[FoodSource]:
        nearest: Optional[FoodSource] = None
        nearest_dist_sq = 0.0
        for food in self._food_sources:
            # exhausted sources stay listed until cleanup but offer nothing
            if food.amount <= 0:
                continue
            dist_sq = position.distance_squared_to(food.position)
            # strict comparison keeps the first source on exact ties
            if nearest is None or dist_sq < nearest_dist_sq:
                nearest = food
                nearest_dist_sq = dist_sq
        return nearest

    def add_ant(self, record: AntRecord) -> None:
        self._ants[record.id] = record

    def update_ant(self, record: AntRecord) -> None:
        if record.id in self._ants:
            self._ants[record.id] = record

    def remove_ant(self, ant_id: str) -> None:
        self._ants.pop(ant_id, None)

    def deplete_food_source(self, food_id: str) -> None:
        for food in self._food_sources:
            if food.id == food_id:
                food.amount -= 1
                return

    def end_of_tick_cleanup(self) -> CleanupResult:
        result = CleanupResult()
        kept: List[FoodSource] = []
        for food in self._food_sources:
            if food.amount <= 0:
                result.removed_food.append(food.id)
            else:
                kept.append(food)
        self._food_sources = kept

        for ant_id, record in list(self._ants.items()):
            if record.lifecycle is Lifecycle.DEAD:
                del self._ants[ant_id]
                result.removed_ants.append(ant_id)

        if result.removed_food:
            logger.debug("Removed depleted food sources: %s", result.removed_food)
        if result.removed_ants:
            logger.debug("Removed dead ants: %s", result.removed_ants)
        return result

    def snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            width=self._width,
            height=self._height,
            nest=self._nest.to_dict(),
            food=[food.to_dict() for food in self._food_sources],
            ants={ant_id: record.to_dict() for ant_id, record in self._ants.items()},
            pheromones={key: pheromone.to_dict() for key, pheromone in self._pheromones.items()},
        )

    def to_snapshot(self) -> Dict[str, object]:
        return self.snapshot().to_dict()
