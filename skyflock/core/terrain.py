"""
Height oracles: terrain elevation lookups for the boundary policy.
"""

from typing import Optional, Protocol, Sequence

import numpy as np
from opensimplex import OpenSimplex


class HeightOracle(Protocol):
    """Anything that can report terrain elevation at a horizontal position."""

    def elevation_at(self, x: float, z: float) -> float:
        ...


class FlatTerrain:
    """Constant-height ground plane."""

    def __init__(self, height: float = 0.0):
        self.height = height

    def elevation_at(self, x: float, z: float) -> float:
        return self.height


def generate_heightmap(extent: float, resolution: int,
                       amplitudes: Sequence[float], frequencies: Sequence[float],
                       seed: Optional[int] = None) -> np.ndarray:
    """
    Build a rolling-hills heightmap over the square [-extent, extent]^2.

    Every octave samples the same simplex noise field at its own frequency,
    so large low-frequency hills carry smaller, finer features.

    Args:
        extent: Half-width of the sampled square
        resolution: Number of cells per side (samples = resolution + 1)
        amplitudes: Peak height of each octave
        frequencies: Spatial frequency of each octave (noise units per world unit)
        seed: Noise seed; a random one is drawn if None

    Returns:
        (resolution + 1, resolution + 1) array indexed [row=z, col=x]
    """
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2 ** 31))
    simplex = OpenSimplex(seed=seed)
    coords = np.linspace(-extent, extent, resolution + 1)

    heights = np.zeros((coords.size, coords.size))
    for amplitude, frequency in zip(amplitudes, frequencies):
        # noise2array indexes its result [y, x]; z plays the y role here
        heights += amplitude * simplex.noise2array(coords * frequency, coords * frequency)
    return heights


class HeightmapTerrain:
    """
    Terrain sampled on a regular grid with bilinear interpolation.

    Queries outside the sampled square are clamped to its edge, so the
    oracle is total over the whole plane.
    """

    def __init__(self, heights: np.ndarray, extent: float):
        heights = np.asarray(heights, dtype=float)
        if heights.ndim != 2 or heights.shape[0] < 2 or heights.shape[1] < 2:
            raise ValueError(f"heights must be a 2D grid of at least 2x2, got {heights.shape}")
        self.heights = heights
        self.extent = extent
        self.rows, self.cols = heights.shape

    @classmethod
    def from_config(cls, config) -> "HeightmapTerrain":
        """
        Generate a terrain covering the world described by a SimulationConfig.
        """
        heights = generate_heightmap(
            config.worldBound,
            config.terrainResolution,
            config.terrainAmplitudes,
            config.terrainFrequencies,
            seed=config.terrainSeed,
        )
        return cls(heights, config.worldBound)

    def _to_grid(self, value: float, cells: int) -> float:
        t = (value + self.extent) / (2.0 * self.extent) * (cells - 1)
        return min(max(t, 0.0), cells - 1)

    def elevation_at(self, x: float, z: float) -> float:
        gx = self._to_grid(x, self.cols)
        gz = self._to_grid(z, self.rows)

        c0 = min(int(gx), self.cols - 2)
        r0 = min(int(gz), self.rows - 2)
        tx = gx - c0
        tz = gz - r0

        h = self.heights
        top = h[r0, c0] * (1 - tx) + h[r0, c0 + 1] * tx
        bottom = h[r0 + 1, c0] * (1 - tx) + h[r0 + 1, c0 + 1] * tx
        return float(top * (1 - tz) + bottom * tz)

