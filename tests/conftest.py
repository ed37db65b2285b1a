import sys
from pathlib import Path

# Ensure the top-level packages import when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from graph import Graph
from engine import Recorder


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def cycle4() -> Graph:
    """0-1-2-3-0, unit lengths."""
    return Graph.from_edge_list(4, [(0, 1), (1, 2), (2, 3), (3, 0)])


@pytest.fixture
def two_pairs() -> Graph:
    """Two components: 0-1 and 2-3."""
    return Graph.from_edge_list(4, [(0, 1), (2, 3)])


@pytest.fixture
def triangle() -> Graph:
    """0-1 (1), 1-2 (1), 0-2 (5): the direct edge is the long way round."""
    return Graph.from_edge_list(3, [(0, 1, 1.0), (1, 2, 1.0), (0, 2, 5.0)])


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
