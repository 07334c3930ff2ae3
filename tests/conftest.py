import os

# No window or display is available under test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from skyflock.core.agents.boid import Boid
from skyflock.core.config import FlockingParams, SimulationConfig
from skyflock.core.flock import Flock
from skyflock.core.terrain import FlatTerrain


class CountingOracle:
    """Flat oracle that records how often it is queried."""

    def __init__(self, height=0.0):
        self.height = height
        self.calls = 0

    def elevation_at(self, x, z):
        self.calls += 1
        return self.height


@pytest.fixture
def config():
    return SimulationConfig(seed=1, terrainSeed=1)


@pytest.fixture
def flat():
    return FlatTerrain(0.0)


@pytest.fixture
def counting_oracle():
    return CountingOracle()


@pytest.fixture
def make_boid(config):
    def _make(position, velocity=(0, 0, 0), cfg=None):
        return Boid(position, velocity, cfg or config)
    return _make


@pytest.fixture
def scenario_boids(make_boid):
    """Three resting boids: a close pair and one far away."""
    def _make():
        return [
            make_boid((0, 50, 0)),
            make_boid((5, 50, 0)),
            make_boid((60, 50, 0)),
        ]
    return _make


@pytest.fixture
def unit_params():
    return FlockingParams(
        separationWeight=1.0, alignmentWeight=1.0, cohesionWeight=1.0,
        separationRadius=30, alignmentRadius=50, cohesionRadius=50,
    )


@pytest.fixture
def make_flock():
    def _make(*boids):
        return Flock(boids)
    return _make
