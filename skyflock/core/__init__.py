"""
Core module containing configuration, terrain oracles, the flock and agent classes.
"""

from .config import (
    FlockingParams, SimulationConfig, DEFAULT_CONFIG,
    load_config, save_config,
)
from .flock import Flock
from .terrain import HeightOracle, FlatTerrain, HeightmapTerrain, generate_heightmap

__all__ = [
    'FlockingParams', 'SimulationConfig', 'DEFAULT_CONFIG',
    'load_config', 'save_config', 'Flock',
    'HeightOracle', 'FlatTerrain', 'HeightmapTerrain', 'generate_heightmap',
]
