"""
Read-only route lookups over the committed routing tables.
"""

from dataclasses import dataclass
from typing import List, Set

from .errors import NoRoute, UnknownNode
from .topology import Topology


@dataclass(frozen=True)
class Route:
    """Forwarding path from path[0] to path[-1] and its advertised cost."""
    path: List[str]
    cost: int

    def describe(self) -> str:
        return "-".join(self.path)


class RouteQuery:
    """
    Traverses next hops in the committed tables of a Topology.
    """

    def __init__(self, topology: Topology) -> None:
        self._topology = topology

    def lookup_cost(self, node: str, destination: str) -> int:
        """Committed cost from node to destination; INFINITY if unreachable."""
        table = self._topology.table_of(node)
        if destination not in self._topology:
            raise UnknownNode(destination)
        if node == destination:
            return 0
        return table.cost(destination)

    def trace_route(self, start: str, destination: str) -> Route:
        """
        Follow next hops from start until destination is reached.

        Mid-convergence tables can briefly point at each other; revisiting a
        node ends the walk with NoRoute instead of looping.
        """
        cost = self.lookup_cost(start, destination)
        path = [start]
        visited: Set[str] = {start}
        cursor = start
        while cursor != destination:
            step = self._topology.table_of(cursor).next_hop(destination)
            if step is None:
                raise NoRoute(start, destination)
            if step in visited:
                raise NoRoute(start, destination, reason="forwarding loop")
            path.append(step)
            visited.add(step)
            cursor = step
        return Route(path, cost)
