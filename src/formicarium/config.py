from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


@dataclass
class FoodSourceConfig:
    id: str = ""
    position: tuple[float, float] = (0.0, 0.0)
    amount: int = 10


@dataclass
class SimulationConfig:
    tick_interval: float = 0.1
    width: float = 100.0
    height: float = 100.0
    # None places the nest uniformly at random inside the world bounds
    nest_position: Optional[tuple[float, float]] = None
    arrival_threshold: float = 2.0
    seed: int = 42
    food_sources: List[FoodSourceConfig] = field(default_factory=list)
    # random food placed only when food_sources is empty
    food_count: int = 5
    food_amount: int = 100
    food_min_nest_distance: float = 20.0
    initial_ants: List[tuple[float, float]] = field(default_factory=list)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    client_queue_size: int = 8
    log_level: Optional[str] = None


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return AppConfig(
            simulation=load_config(data.get("simulation", {})),
            server=ServerConfig(**data.get("server", {})),
        )


def _pair(value: tuple[float, float] | list[float] | None) -> tuple[float, float] | None:
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    return None


def load_config(raw: dict) -> SimulationConfig:
    foods = []
    for index, food_raw in enumerate(raw.get("food_sources", [])):
        position = _pair(food_raw.get("position")) or (0.0, 0.0)
        foods.append(
            FoodSourceConfig(
                id=str(food_raw.get("id") or f"food-{index}"),
                position=position,
                amount=int(food_raw.get("amount", FoodSourceConfig.amount)),
            )
        )
    ants = [pair for pair in (_pair(item) for item in raw.get("initial_ants", [])) if pair is not None]
    sim_values = {k: v for k, v in raw.items() if k not in {"food_sources", "initial_ants", "nest_position"}}
    return SimulationConfig(
        nest_position=_pair(raw.get("nest_position")),
        food_sources=foods,
        initial_ants=ants,
        **sim_values,
    )
