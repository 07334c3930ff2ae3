"""
Headless simulation runner for batch runs and data collection.
"""

import time
from typing import Any, Dict, Optional

import numpy as np

from ..core.config import FlockingParams, SimulationConfig
from ..core.terrain import HeightmapTerrain
from .engine import FlockSimulation


# Default fixed time step (seconds) for headless runs
DEFAULT_DELTA_SECONDS = 1.0 / 60.0

PROGRESS_INTERVAL = 1000


class HeadlessSimulation:
    """
    Runs the flocking kernel without a window at a fixed time step.

    Collects flock statistics every frame and a time series every
    config.statsInterval frames.
    """

    def __init__(self, config: SimulationConfig, params: Optional[FlockingParams] = None,
                 oracle=None, verbose: bool = True):
        """
        Initialize headless simulation.

        Args:
            config: Simulation configuration
            params: Flocking params (defaults if None)
            oracle: HeightOracle; a heightmap is generated from config if None
            verbose: Whether to print progress
        """
        self.config = config
        self.oracle = oracle if oracle is not None else HeightmapTerrain.from_config(config)
        self.simulation = FlockSimulation(config, self.oracle, params)
        self.verbose = verbose
        self.start_time = time.time()

        self.stats = {
            "avg_speed": 0.0,
            "avg_cohesion": 0.0,
            "avg_clearance": 0.0,
            "min_clearance": 0.0,
            "total_floor_lifts": 0,
            "total_wraps": 0,
            "timeseries": [],
        }

    @property
    def frame_count(self) -> int:
        return self.simulation.frame_count

    def update(self, delta_seconds: float = DEFAULT_DELTA_SECONDS) -> None:
        """Advance one frame and refresh statistics."""
        self.simulation.step(delta_seconds)
        self.stats["total_floor_lifts"] += self.simulation.last_lift_count
        self.stats["total_wraps"] += self.simulation.last_wrap_count
        self._update_statistics()

    def _update_statistics(self) -> None:
        """Update tracking statistics."""
        boids = self.simulation.agents()
        if not boids:
            return

        positions = np.array([[b.position.x, b.position.y, b.position.z] for b in boids])
        velocities = np.array([[b.velocity.x, b.velocity.y, b.velocity.z] for b in boids])

        centroid = positions.mean(axis=0)
        cohesion = float(np.linalg.norm(positions - centroid, axis=1).mean())
        speed = float(np.linalg.norm(velocities, axis=1).mean())

        ground = np.array([self.oracle.elevation_at(x, z) for x, _, z in positions])
        clearance = positions[:, 1] - ground

        self.stats["avg_speed"] = speed
        self.stats["avg_cohesion"] = cohesion
        self.stats["avg_clearance"] = float(clearance.mean())
        self.stats["min_clearance"] = float(clearance.min())

        if self.frame_count % self.config.statsInterval == 0:
            self.stats["timeseries"].append({
                "frame": self.frame_count,
                "cohesion": cohesion,
                "avg_speed": speed,
                "avg_clearance": self.stats["avg_clearance"],
                "floor_lifts": self.simulation.last_lift_count,
            })

    def run(self, max_frames: int, delta_seconds: float = DEFAULT_DELTA_SECONDS) -> Dict[str, Any]:
        """
        Run for a fixed number of frames.

        Args:
            max_frames: Number of frames to simulate
            delta_seconds: Time step per frame

        Returns:
            Results dictionary with all statistics
        """
        if self.verbose:
            print(f"Running {len(self.simulation.flock)} boids for {max_frames} frames...")

        while self.frame_count < max_frames:
            self.update(delta_seconds)

            if self.verbose and self.frame_count % PROGRESS_INTERVAL == 0:
                elapsed = time.time() - self.start_time
                progress = (self.frame_count / max_frames) * 100
                print(f"  Progress: {progress:.1f}% ({self.frame_count}/{max_frames} frames, "
                      f"{elapsed:.1f}s elapsed, cohesion {self.stats['avg_cohesion']:.1f})")

        return self.get_results()

    def get_results(self) -> Dict[str, Any]:
        """
        Get run results.

        Returns:
            Dictionary containing final statistics and the time series
        """
        frames = self.frame_count
        lifts_per_frame = self.stats["total_floor_lifts"] / frames if frames else 0
        wraps_per_frame = self.stats["total_wraps"] / frames if frames else 0

        return {
            "frames": frames,
            "boid_count": len(self.simulation.flock),
            "elapsed_time_seconds": time.time() - self.start_time,
            "avg_speed": self.stats["avg_speed"],
            "avg_cohesion": self.stats["avg_cohesion"],
            "avg_clearance": self.stats["avg_clearance"],
            "min_clearance": self.stats["min_clearance"],
            "total_floor_lifts": self.stats["total_floor_lifts"],
            "total_wraps": self.stats["total_wraps"],
            "floor_lifts_per_frame": lifts_per_frame,
            "wraps_per_frame": wraps_per_frame,
            "timeseries": self.stats["timeseries"],
            "params": self.simulation.params.to_dict(),
        }
