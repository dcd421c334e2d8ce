from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List


@dataclass(slots=True)
class WorldSnapshot:
    width: float
    height: float
    nest: Dict[str, Any]
    food: List[Dict[str, Any]]
    ants: Dict[str, Dict[str, Any]]
    pheromones: Dict[str, Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
