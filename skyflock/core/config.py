"""
Configuration classes and defaults for the flocking simulation.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional


logger = logging.getLogger(__name__)


# Rule weights (used as FlockingParams defaults)
SEPARATION_WEIGHT = 2.0
ALIGNMENT_WEIGHT = 1.0
COHESION_WEIGHT = 1.0

# Neighbor radii
SEPARATION_RADIUS = 30.0
ALIGNMENT_RADIUS = 50.0
COHESION_RADIUS = 50.0


@dataclass
class FlockingParams:
    """
    Rule weights and neighbor radii.

    The host owns this object and may change any field between ticks;
    the simulation reads it fresh on every step.
    """

    separationWeight: float = SEPARATION_WEIGHT
    alignmentWeight: float = ALIGNMENT_WEIGHT
    cohesionWeight: float = COHESION_WEIGHT

    separationRadius: float = SEPARATION_RADIUS
    alignmentRadius: float = ALIGNMENT_RADIUS
    cohesionRadius: float = COHESION_RADIUS

    def validate(self) -> "FlockingParams":
        """
        Check that every weight and radius is non-negative.

        Returns:
            self, so calls can be chained

        Raises:
            ValueError: If any field is negative
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} must be >= 0, got {value}")
        return self

    def to_dict(self) -> dict:
        """Convert params to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FlockingParams":
        """Create params from dictionary."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class SimulationConfig:
    """Configuration for the flocking simulation."""

    # Population
    boidCount: int = 150

    # World extent (cube of half-width worldBound)
    worldBound: float = 300.0

    # Movement parameters
    maxSpeed: float = 4.0
    maxForce: float = 0.05
    distanceScale: float = 10.0

    # Terrain floor and ceiling
    floorClearance: float = 10.0
    floorLift: float = 0.8
    ceilingMargin: float = 50.0

    # Ordering choices
    liftBeforeIntegrate: bool = False
    doubleBuffered: bool = False

    # Spawn volume and initial speed
    spawnHalfWidth: float = 200.0
    spawnMinY: float = 50.0
    spawnMaxY: float = 100.0
    spawnMinSpeed: float = 2.0
    spawnMaxSpeed: float = 6.0

    # Random sources
    seed: Optional[int] = None
    terrainSeed: Optional[int] = None

    # Terrain heightmap
    terrainResolution: int = 64
    terrainAmplitudes: List[float] = field(default_factory=lambda: [40.0, 10.0, 3.0])
    terrainFrequencies: List[float] = field(default_factory=lambda: [0.005, 0.015, 0.03])

    # Visualization
    screenWidth: int = 1200
    screenHeight: int = 750
    fpsTarget: int = 60
    backgroundColor: List[int] = field(default_factory=lambda: [140, 182, 226])
    boidColor: List[int] = field(default_factory=lambda: [255, 255, 255])

    # Statistics
    statsInterval: int = 10

    # Output
    scoreOutputFile: str = "flock_run_stats.json"

    def validate(self) -> "SimulationConfig":
        """
        Check the config for values the kernel cannot run with.

        Returns:
            self, so calls can be chained

        Raises:
            ValueError: On a non-positive bound, speed or force, a negative
                count or stats interval, or an inverted spawn range
        """
        if self.boidCount < 0:
            raise ValueError(f"boidCount must be >= 0, got {self.boidCount}")
        for name in ("worldBound", "maxSpeed", "maxForce", "distanceScale"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if self.spawnMinY > self.spawnMaxY:
            raise ValueError(
                f"spawnMinY ({self.spawnMinY}) is above spawnMaxY ({self.spawnMaxY})"
            )
        if self.spawnMinSpeed > self.spawnMaxSpeed:
            raise ValueError(
                f"spawnMinSpeed ({self.spawnMinSpeed}) is above spawnMaxSpeed ({self.spawnMaxSpeed})"
            )
        if self.statsInterval < 1:
            raise ValueError(f"statsInterval must be >= 1, got {self.statsInterval}")
        if len(self.terrainAmplitudes) != len(self.terrainFrequencies):
            raise ValueError("terrainAmplitudes and terrainFrequencies differ in length")
        return self

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        """Create config from dictionary."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


def load_config(path: str):
    """
    Load a simulation config and flocking params from a JSON file.

    The file holds the SimulationConfig fields at top level and an optional
    "params" object with FlockingParams fields. Unknown keys are ignored.

    Args:
        path: Path to the JSON file

    Returns:
        Tuple of (SimulationConfig, FlockingParams)
    """
    with open(path, "r") as f:
        data = json.load(f)

    params = FlockingParams.from_dict(data.pop("params", {}))
    config = SimulationConfig.from_dict(data)
    logger.debug("Loaded config from %s: %d boids, bound %.1f",
                 path, config.boidCount, config.worldBound)
    return config.validate(), params.validate()


def save_config(config: SimulationConfig, params: FlockingParams, path: str) -> str:
    """
    Write a config and params pair to JSON in the layout load_config reads.

    Returns:
        Path to the saved file
    """
    data = config.to_dict()
    data["params"] = params.to_dict()
    with open(path, "w") as f:
        json.dump(data, f, indent=4)
    return path


# Default configuration for interactive simulation
DEFAULT_CONFIG = SimulationConfig()

