"""
Flocking simulation kernel: one tick advances every boid.
"""

import logging
import random
from typing import Iterable, Optional, Tuple

from ..core.agents.boid import Boid
from ..core.config import FlockingParams, SimulationConfig
from ..core.flock import Flock


logger = logging.getLogger(__name__)


class FlockSimulation:
    """
    Headless flocking simulation over a height oracle.

    Each call to step() runs, for every boid in flock order: the weighted
    flocking rules, velocity/position integration, and the boundary policy
    (terrain floor lift, then world-edge wrap). Headings are refreshed once
    all boids have moved.

    Rules read live state by default, so a boid sees the already-updated
    positions of boids earlier in the order. With config.doubleBuffered
    every boid reads a snapshot taken at the start of the tick instead.
    """

    def __init__(self, config: SimulationConfig, oracle,
                 params: Optional[FlockingParams] = None,
                 boids: Optional[Iterable[Boid]] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the simulation.

        Args:
            config: Simulation configuration
            oracle: HeightOracle giving terrain elevation
            params: Flocking weights and radii (defaults if None); the host
                may mutate this object between ticks
            boids: Explicit initial boids; spawned randomly if None. Every
                boid is bound to config so host edits apply to the whole flock
            rng: Random source for spawning (seeded from config.seed if None)
        """
        self.config = config.validate()
        self.oracle = oracle
        self.params = params if params is not None else FlockingParams()
        self.rng = rng if rng is not None else random.Random(config.seed)

        if boids is None:
            boids = [Boid.spawn(self.config, self.rng) for _ in range(config.boidCount)]
        self.flock = Flock(boids)
        for boid in self.flock:
            boid.config = self.config

        self.frame_count = 0
        self.last_lift_count = 0
        self.last_wrap_count = 0

        logger.debug(
            "Simulation ready: %d boids, bound %.1f, double-buffered=%s, lift-before-integrate=%s",
            len(self.flock), config.worldBound, config.doubleBuffered, config.liftBeforeIntegrate,
        )

    def agents(self) -> Tuple[Boid, ...]:
        """Read-only view of the boids, in flock order."""
        return tuple(self.flock)

    def step(self, delta_seconds: float, params: Optional[FlockingParams] = None) -> None:
        """
        Advance every boid by one tick.

        Args:
            delta_seconds: Elapsed real time for this tick
            params: Flocking params for this tick (defaults to self.params)
        """
        params = params if params is not None else self.params
        config = self.config
        bound = config.worldBound
        lift_first = config.liftBeforeIntegrate

        source = self.flock.snapshot() if config.doubleBuffered else self.flock

        lifts = 0
        wraps = 0
        for boid in self.flock:
            boid.flock(source, params)

            if lift_first and boid.avoid_floor(boid.floor_height(self.oracle)):
                lifts += 1

            boid.update(delta_seconds, config.distanceScale)

            lifted, wrapped = boid.constrain(bound, self.oracle, lift=not lift_first)
            lifts += lifted
            wraps += wrapped

        for boid in self.flock:
            boid.update_heading()

        self.last_lift_count = lifts
        self.last_wrap_count = wraps
        self.frame_count += 1
