"""
Simulation module containing the flocking kernel and its interactive and headless hosts.
"""

from .engine import FlockSimulation
from .headless import HeadlessSimulation
from .interactive import Simulation

__all__ = ['FlockSimulation', 'HeadlessSimulation', 'Simulation']
