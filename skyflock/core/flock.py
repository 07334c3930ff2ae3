"""
Ordered boid collection with all-pairs neighbor lookup in 3D space.
"""

from typing import Iterable, Iterator, List, Any

from .agents.base import Agent


class Flock:
    """
    Ordered collection of agents and the neighbor queries over it.

    Iteration order is the insertion order and does not change during a
    tick. Neighbor search scans every member, so each query is O(n).
    """

    def __init__(self, agents: Iterable[Any] = ()):
        """
        Initialize the flock.

        Args:
            agents: Initial members, in iteration order
        """
        self.agents: List[Any] = list(agents)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.agents)

    def __len__(self) -> int:
        return len(self.agents)

    def __getitem__(self, index: int) -> Any:
        return self.agents[index]

    def add(self, agent: Any) -> None:
        """Append an agent to the end of the iteration order."""
        self.agents.append(agent)

    def neighbors_within(self, agent: Any, radius: float) -> List[Any]:
        """
        Get all members strictly closer than radius to an agent.

        Members at distance exactly 0 (the agent itself, or anything
        coincident with it) are never neighbors.

        Args:
            agent: Agent whose position is the query center
            radius: Exclusive search radius

        Returns:
            List of neighboring members, in flock order
        """
        neighbors = []
        position = agent.position
        for other in self.agents:
            dist = position.distance_to(other.position)
            if 0 < dist < radius:
                neighbors.append(other)
        return neighbors

    def snapshot(self) -> "Flock":
        """
        Freeze the current positions and velocities.

        Returns:
            A new Flock of detached Agent copies in the same order
        """
        return Flock(
            Agent(a.position, a.velocity, a.max_speed, a.max_force)
            for a in self.agents
        )
