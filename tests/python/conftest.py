import os
import sys
from pathlib import Path
from typing import Iterable

import pytest

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


class ScriptedRng:
    """Direction source that replays a fixed sequence of walk components."""

    def __init__(self, directions: Iterable[int] = (), ranges: Iterable[float] = ()):
        self._directions = list(directions)
        self._ranges = list(ranges)
        self.calls = 0

    def next_direction(self) -> int:
        self.calls += 1
        return self._directions.pop(0) if self._directions else 0

    def next_range(self, low: float, high: float) -> float:
        return self._ranges.pop(0) if self._ranges else low


@pytest.fixture
def scripted_rng():
    return ScriptedRng
