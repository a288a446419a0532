import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from algotrace.graph import Graph
from algotrace.graph import samples
from algotrace.engine import ManualScheduler, Player


@pytest.fixture
def weighted_graph() -> Graph:
    return samples.weighted_demo()


@pytest.fixture
def diamond() -> Graph:
    return samples.diamond_flow_network()


@pytest.fixture
def two_triangles() -> Graph:
    return samples.two_triangles()


@pytest.fixture
def directed_chain() -> Graph:
    """a→b→c plus an isolated d; nothing reaches back to a."""
    g = Graph(directed=True, weighted=True)
    for nid in "abcd":
        g.create_node(nid)
    g.create_edge("a", "b", weight=2)
    g.create_edge("b", "c", weight=3)
    return g


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def player(scheduler) -> Player:
    return Player(scheduler=scheduler, speed_ms=125)
