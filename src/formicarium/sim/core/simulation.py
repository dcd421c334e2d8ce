from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Callable, Dict, List, Optional, Union

from pygame.math import Vector2

from . import agent as ant_rules
from .agent import Action, Ant, DirectionSource, Idle, Move, Perception, TakeFood
from .entities import AntRecord, FoodSource
from .world import World
from ..types.metrics import TickMetrics
from ...config import SimulationConfig
from ...rng import DeterministicRng

logger = logging.getLogger(__name__)

TickListener = Callable[[], None]
PositionLike = Union[Vector2, tuple[float, float]]

_MAX_PLACEMENT_ATTEMPTS = 100


class Simulation:
    """Owns the ants and the world and advances them one tick at a time.

    Each tick runs perceive, apply, sync, cleanup and notify back to back
    without yielding, so snapshot readers on the same event loop only ever
    see the state between two ticks.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: DirectionSource | None = None,
        world: World | None = None,
    ):
        self._config = config or SimulationConfig()
        self._rng = rng if rng is not None else DeterministicRng(self._config.seed)
        self._world = world if world is not None else self._build_world()
        self._ants: Dict[str, Ant] = {}
        self._listeners: List[TickListener] = []
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self._in_tick = False
        self._running = False
        self._task: asyncio.Task | None = None
        if world is None:
            self._spawn_initial_ants()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def world(self) -> World:
        return self._world

    @property
    def ants(self) -> Dict[str, Ant]:
        return self._ants

    @property
    def tick_count(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def running(self) -> bool:
        return self._running

    def _build_world(self) -> World:
        config = self._config
        if config.nest_position is not None:
            nest = Vector2(config.nest_position)
        else:
            nest = Vector2(self._rng.next_range(0.0, config.width), self._rng.next_range(0.0, config.height))
        if config.food_sources:
            foods = [
                FoodSource(id=food.id, position=Vector2(food.position), amount=food.amount)
                for food in config.food_sources
            ]
        else:
            foods = self._scatter_food(nest)
        return World(config.width, config.height, nest, foods)

    def _scatter_food(self, nest: Vector2) -> List[FoodSource]:
        config = self._config
        foods: List[FoodSource] = []
        for index in range(config.food_count):
            for _ in range(_MAX_PLACEMENT_ATTEMPTS):
                position = Vector2(self._rng.next_range(0.0, config.width), self._rng.next_range(0.0, config.height))
                if position.distance_to(nest) >= config.food_min_nest_distance:
                    foods.append(FoodSource(id=f"food-{index}", position=position, amount=config.food_amount))
                    break
            else:
                logger.warning(
                    "Could not place food-%d at least %.1f from the nest", index, config.food_min_nest_distance
                )
        return foods

    def _spawn_initial_ants(self) -> None:
        for position in self._config.initial_ants:
            self.spawn_ant(position)

    def reset(self) -> None:
        reset_rng = getattr(self._rng, "reset", None)
        if reset_rng is not None:
            reset_rng()
        self._ants.clear()
        self._tick = 0
        self._metrics = None
        self._world = self._build_world()
        self._spawn_initial_ants()
        logger.info("Simulation reset (seed=%s)", self._config.seed)

    # commands

    def spawn_ant(self, position: PositionLike) -> str:
        ant = ant_rules.spawn(Vector2(position))
        self._ants[ant.id] = ant
        self._world.add_ant(AntRecord.from_ant(ant))
        logger.info("Spawned ant %s at (%.1f, %.1f)", ant.id, ant.position.x, ant.position.y)
        return ant.id

    def kill_ant(self, ant_id: str) -> bool:
        ant = self._ants.get(ant_id)
        if ant is None:
            logger.debug("kill_ant: unknown ant %s", ant_id)
            return False
        self._ants[ant_id] = ant_rules.kill(ant)
        logger.info("Killed ant %s", ant_id)
        return True

    def get_ant(self, ant_id: str) -> Optional[Ant]:
        return self._ants.get(ant_id)

    def add_tick_listener(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def remove_tick_listener(self, listener: TickListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def get_world_snapshot(self) -> Dict[str, object]:
        return self._world.to_snapshot()

    # tick pipeline

    def tick(self) -> TickMetrics | None:
        if self._in_tick:
            logger.warning("tick() re-entered while a tick is in progress; skipping")
            return None
        self._in_tick = True
        try:
            metrics = self._advance()
            self._notify()
        finally:
            self._in_tick = False
        return metrics

    def _advance(self) -> TickMetrics:
        start = perf_counter()
        world = self._world
        nest_position = world.nest.position
        threshold = self._config.arrival_threshold

        actions: List[tuple[str, Action]] = []
        for ant_id, ant in list(self._ants.items()):
            if not ant.alive:
                continue
            perception = Perception(
                nearest_food=world.get_nearest_food_source(ant.position),
                nest_position=nest_position,
            )
            next_ant, action = ant_rules.perceive(ant, perception, self._rng, threshold)
            self._ants[ant_id] = next_ant
            actions.append((ant_id, action))

        food_taken = 0
        for ant_id, action in actions:
            ant = self._ants.get(ant_id)
            if ant is None:
                continue
            if isinstance(action, Move):
                self._ants[ant_id] = ant_rules.move(ant, action.dx, action.dy)
            elif isinstance(action, TakeFood):
                world.deplete_food_source(action.food_id)
                food_taken += 1
            elif isinstance(action, Idle):
                pass

        for ant in self._ants.values():
            world.update_ant(AntRecord.from_ant(ant))

        cleanup = world.end_of_tick_cleanup()
        dead_ids = [ant_id for ant_id, ant in self._ants.items() if not ant.alive]
        for ant_id in dead_ids:
            del self._ants[ant_id]

        self._tick += 1
        self._metrics = TickMetrics(
            tick=self._tick,
            population=len(self._ants),
            food_sources=len(world.food_sources),
            food_remaining=sum(max(0, food.amount) for food in world.food_sources),
            food_taken=food_taken,
            deaths=len(dead_ids),
            tick_duration_ms=(perf_counter() - start) * 1000.0,
        )
        if cleanup.removed_food or dead_ids:
            logger.debug(
                "Tick %d cleanup: %d food source(s), %d ant(s) removed",
                self._tick,
                len(cleanup.removed_food),
                len(dead_ids),
            )
        return self._metrics

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Tick listener %r failed", listener)

    # driver

    def start(self) -> None:
        if self._running:
            return
        loop = asyncio.get_running_loop()
        self._running = True
        self._task = loop.create_task(self._loop())
        self._task.add_done_callback(self._on_driver_done)
        logger.info("Simulation started (interval=%.3fs)", self._config.tick_interval)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.info("Simulation stopped at tick %d", self._tick)

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._config.tick_interval)
            if not self._running:
                break
            self.tick()

    def _on_driver_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Simulation driver crashed at tick %d", self._tick, exc_info=(type(exc), exc, exc.__traceback__))
        if self._task is task:
            self._running = False
            self._task = None
