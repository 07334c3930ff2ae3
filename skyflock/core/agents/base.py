"""
Base Agent class: kinematic state, integration and shared steering helpers.
"""

import math
import random
from typing import Optional

import pygame


Vector3 = pygame.math.Vector3


def random_direction(rng: random.Random) -> Vector3:
    """
    Draw a uniformly distributed unit vector.

    Args:
        rng: Random source

    Returns:
        Unit-length Vector3
    """
    theta = rng.uniform(0, 2 * math.pi)
    cos_phi = rng.uniform(-1.0, 1.0)
    sin_phi = math.sqrt(1.0 - cos_phi * cos_phi)
    return Vector3(sin_phi * math.cos(theta), cos_phi, sin_phi * math.sin(theta))


class Agent:
    """
    Base class for all agents in the simulation.

    Holds position, velocity and acceleration, integrates them each tick,
    and provides the steering helpers the flocking rules share.
    """

    def __init__(self, position, velocity, max_speed: float, max_force: float):
        """
        Initialize an agent.

        Args:
            position: Initial position (anything Vector3 accepts)
            velocity: Initial velocity (anything Vector3 accepts)
            max_speed: Maximum speed of the agent
            max_force: Maximum magnitude of a single steering contribution
        """
        self.position = Vector3(position)
        self.velocity = Vector3(velocity)
        self.acceleration = Vector3(0, 0, 0)
        self.max_speed = max_speed
        self.max_force = max_force
        self.heading: Optional[Vector3] = None
        self.update_heading()

    def apply_force(self, force: Vector3) -> None:
        """
        Apply a force to the agent's acceleration.

        Args:
            force: Force vector to apply
        """
        self.acceleration += force

    def update(self, delta_seconds: float, distance_scale: float = 10.0) -> None:
        """
        Advance velocity and position by one tick.

        The accumulated acceleration is added to velocity unscaled (each
        steering contribution is already bounded by max_force), speed is
        clamped, and the acceleration is cleared for the next tick.

        Args:
            delta_seconds: Elapsed real time for this tick
            distance_scale: Simulation units to world units per second
        """
        self.velocity += self.acceleration
        if self.velocity.length() > self.max_speed:
            self.velocity.scale_to_length(self.max_speed)

        self.position += self.velocity * (delta_seconds * distance_scale)
        self.acceleration *= 0

    def steering(self, desired: Vector3) -> Vector3:
        """
        Calculate steering force toward a desired velocity.

        Args:
            desired: The desired velocity vector

        Returns:
            Steering force vector, at most max_force long
        """
        steer = desired - self.velocity
        if steer.length() > self.max_force:
            steer.scale_to_length(self.max_force)
        return steer

    def seek(self, target: Vector3) -> Vector3:
        """
        Calculate steering force toward a target point at full speed.

        Args:
            target: World-space point to steer toward

        Returns:
            Steering force vector
        """
        desired = target - self.position
        if desired.length_squared() > 0:
            desired.scale_to_length(self.max_speed)
        return self.steering(desired)

    def update_heading(self) -> None:
        """Recompute the facing direction; kept unchanged while stationary."""
        if self.velocity.length_squared() > 0:
            self.heading = self.velocity.normalize()

    def look_target(self) -> Vector3:
        """
        Point the renderer should orient the agent toward.

        Returns:
            position + heading, or position itself if no heading exists yet
        """
        if self.heading is None:
            return Vector3(self.position)
        return self.position + self.heading
