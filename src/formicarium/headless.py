from __future__ import annotations

import argparse
import csv
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import SimulationConfig
from .logging_config import configure_logging
from .sim.core.simulation import Simulation

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "population",
    "food_sources",
    "food_remaining",
    "food_taken",
    "deaths",
    "tick_ms",
]


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    config: Optional[SimulationConfig] = None,
) -> Simulation:
    config = config or SimulationConfig()
    if seed is not None:
        config = replace(config, seed=seed)
    simulation = Simulation(config)
    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    try:
        for _ in range(steps):
            metrics = simulation.tick()
            if writer and metrics is not None:
                tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
                writer.writerow(
                    [
                        metrics.tick,
                        metrics.population,
                        metrics.food_sources,
                        metrics.food_remaining,
                        metrics.food_taken,
                        metrics.deaths,
                        f"{tick_ms:.3f}",
                    ]
                )
    finally:
        if csv_file:
            csv_file.close()
    logger.info("Headless run finished after %d ticks (%d ants)", simulation.tick_count, len(simulation.ants))
    return simulation


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless formicarium simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()
    configure_logging(args.log_level, include_uvicorn=False)
    config = SimulationConfig.from_yaml(args.config) if args.config else None
    run_headless(args.steps, args.seed, args.log, deterministic_log=args.deterministic_log, config=config)


if __name__ == "__main__":
    main()
