"""
Boid agent class implementing flocking behavior over terrain.
"""

import random
from typing import Tuple

from ..config import SimulationConfig
from .base import Agent, Vector3, random_direction


class Boid(Agent):
    """
    A boid agent that exhibits flocking behavior.

    Implements Reynolds' boid rules:
    - Separation: Avoid crowding neighbors
    - Alignment: Steer toward average heading of neighbors
    - Cohesion: Steer toward average position of neighbors

    Also keeps itself above the terrain and inside the world cube.
    """

    def __init__(self, position, velocity, config: SimulationConfig):
        """
        Initialize a boid.

        Args:
            position: Initial position
            velocity: Initial velocity
            config: Simulation configuration, read live for the boundary tunables
        """
        super().__init__(position, velocity, config.maxSpeed, config.maxForce)
        self.config = config

    @classmethod
    def spawn(cls, config: SimulationConfig, rng: random.Random) -> "Boid":
        """
        Create a boid at a random point of the spawn volume with a random
        heading and speed.

        Args:
            config: Simulation configuration
            rng: Random source

        Returns:
            New Boid
        """
        half = config.spawnHalfWidth
        position = Vector3(
            rng.uniform(-half, half),
            rng.uniform(config.spawnMinY, config.spawnMaxY),
            rng.uniform(-half, half),
        )
        speed = rng.uniform(config.spawnMinSpeed, config.spawnMaxSpeed)
        return cls(position, random_direction(rng) * speed, config)

    def flock(self, flock, params) -> None:
        """
        Accumulate weighted flocking forces into acceleration.

        Args:
            flock: Flock to draw neighbors from
            params: FlockingParams with current weights and radii
        """
        sep = self.separation(flock, params.separationRadius)
        ali = self.alignment(flock, params.alignmentRadius)
        coh = self.cohesion(flock, params.cohesionRadius)

        self.apply_force(sep * params.separationWeight)
        self.apply_force(ali * params.alignmentWeight)
        self.apply_force(coh * params.cohesionWeight)

    def _steer_at_full_speed(self, desired: Vector3) -> Vector3:
        if desired.length_squared() > 0:
            desired.scale_to_length(self.max_speed)
        return self.steering(desired)

    def separation(self, flock, radius: float) -> Vector3:
        """
        Calculate separation steering to avoid crowding neighbors.

        Each neighbor pushes along the unit vector away from it, scaled by
        the inverse of its distance, so closer neighbors push harder.

        Args:
            flock: Flock to draw neighbors from
            radius: Neighbor inclusion distance

        Returns:
            Separation steering force
        """
        steering = Vector3(0, 0, 0)
        total = 0

        for other in flock.neighbors_within(self, radius):
            diff = self.position - other.position
            dist = diff.length()
            steering += diff.normalize() / dist
            total += 1

        if total > 0:
            steering /= total
        if steering.length_squared() > 0:
            steering = self._steer_at_full_speed(steering)
        return steering

    def alignment(self, flock, radius: float) -> Vector3:
        """
        Calculate alignment steering toward average neighbor heading.

        Args:
            flock: Flock to draw neighbors from
            radius: Neighbor inclusion distance

        Returns:
            Alignment steering force
        """
        steering = Vector3(0, 0, 0)
        total = 0

        for other in flock.neighbors_within(self, radius):
            steering += other.velocity
            total += 1

        if total > 0:
            steering /= total
            steering = self._steer_at_full_speed(steering)
        return steering

    def cohesion(self, flock, radius: float) -> Vector3:
        """
        Calculate cohesion steering toward average neighbor position.

        Args:
            flock: Flock to draw neighbors from
            radius: Neighbor inclusion distance

        Returns:
            Cohesion steering force
        """
        center = Vector3(0, 0, 0)
        total = 0

        for other in flock.neighbors_within(self, radius):
            center += other.position
            total += 1

        if total > 0:
            center /= total
            return self.seek(center)
        return Vector3(0, 0, 0)

    def floor_height(self, oracle) -> float:
        """
        Lowest allowed altitude at the boid's current horizontal position.
        """
        x, z = self.position.x, self.position.z
        return oracle.elevation_at(x, z) + self.config.floorClearance

    def avoid_floor(self, min_y: float) -> bool:
        """
        Push upward when flying below the terrain clearance.

        Args:
            min_y: Lowest allowed altitude here

        Returns:
            True if the lift was applied
        """
        if self.position.y < min_y:
            self.acceleration.y += self.config.floorLift
            return True
        return False

    def wrap_edges(self, bound: float, min_y: float) -> bool:
        """
        Teleport across the world edges.

        X and Z wrap to the opposite side. Y only wraps at the top, where the
        boid drops back to min_y; nothing wraps at the bottom.

        Args:
            bound: Half-width of the world cube
            min_y: Altitude to drop to after a top-edge wrap

        Returns:
            True if any coordinate was wrapped
        """
        wrapped = False

        if self.position.x > bound:
            self.position.x = -bound
            wrapped = True
        elif self.position.x < -bound:
            self.position.x = bound
            wrapped = True

        if self.position.y > bound + self.config.ceilingMargin:
            self.position.y = min_y
            wrapped = True

        if self.position.z > bound:
            self.position.z = -bound
            wrapped = True
        elif self.position.z < -bound:
            self.position.z = bound
            wrapped = True

        return wrapped

    def constrain(self, bound: float, oracle, lift: bool = True) -> Tuple[bool, bool]:
        """
        Apply the boundary policy: terrain floor first, then edge wrap.

        The oracle is queried once. With lift=False (the floor was already
        handled before integration) it is queried only if the top edge wraps.

        Args:
            bound: Half-width of the world cube
            oracle: HeightOracle for terrain elevation
            lift: Whether to apply the floor lift here

        Returns:
            Tuple of (lifted, wrapped)
        """
        lifted = False
        above_ceiling = self.position.y > bound + self.config.ceilingMargin

        if lift or above_ceiling:
            min_y = self.floor_height(oracle)
        else:
            min_y = self.position.y

        if lift:
            lifted = self.avoid_floor(min_y)

        wrapped = self.wrap_edges(bound, min_y)
        return lifted, wrapped
