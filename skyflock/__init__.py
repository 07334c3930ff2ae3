"""
skyflock: terrain-aware 3D flocking simulation.
"""

__version__ = "0.1.0"
