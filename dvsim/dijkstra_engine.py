"""
Heap-based DijkstraEngine implementation for dvsim.

Serves as an independent oracle: once the distance-vector tables reach a fixed
point on a static topology they should agree with these costs.
"""

from typing import Dict
import heapq
import logging
import math

from .algorithms import DijkstraEngine
from .graph import Graph
from .routing import INFINITY
from .topology import Topology

LOGGER = logging.getLogger(__name__)


class SimpleDijkstraEngine(DijkstraEngine):
    """
    Single-source Dijkstra using a binary heap.

    Complexity:
        O(E log V) over the nodes reachable from the source.
    """

    def shortest_path_costs(self, graph: Graph, source: str) -> Dict[str, float]:
        """
        Compute only the cost map for all reachable nodes from source.
        """
        dist: Dict[str, float] = {source: 0}
        pq = [(0, source)]  # priority queue of (distance, node)

        while pq:
            d_u, u = heapq.heappop(pq)
            # Skip outdated entries
            if d_u != dist.get(u, math.inf):
                continue

            for v, w in graph.outgoing(u).items():
                alt = d_u + w
                if alt < dist.get(v, math.inf):
                    dist[v] = alt
                    heapq.heappush(pq, (alt, v))

        return dist

    def shortest_paths(
        self, graph: Graph, source: str
    ) -> tuple[Dict[str, float], Dict[str, str]]:
        """
        Dijkstra variant that also records predecessors for path reconstruction.

        The predecessor map omits the source itself because it has no parent.
        Unreachable nodes appear in neither map.
        """
        dist: Dict[str, float] = {source: 0}
        prev: Dict[str, str] = {}
        pq = [(0, source)]

        while pq:
            d_u, u = heapq.heappop(pq)
            if d_u != dist.get(u, math.inf):
                continue

            for v, w in graph.outgoing(u).items():
                alt = d_u + w
                if alt < dist.get(v, math.inf):
                    dist[v] = alt
                    prev[v] = u
                    heapq.heappush(pq, (alt, v))

        return dist, prev


def tables_match_shortest_paths(topology: Topology, engine: DijkstraEngine | None = None) -> bool:
    """
    Check every committed route cost against the shortest-path oracle.

    A destination the oracle cannot reach (or reaches only at INFINITY or
    more) must be INFINITY in the table.
    """
    engine = engine or SimpleDijkstraEngine()
    for source in topology.node_names():
        dist = engine.shortest_path_costs(topology, source)
        table = topology.table_of(source)
        for dest in topology.node_names():
            if dest == source:
                continue
            expected = dist.get(dest, INFINITY)
            expected = INFINITY if expected >= INFINITY else expected
            if table.cost(dest) != expected:
                LOGGER.debug(
                    "%s -> %s: table cost %s, shortest path %s",
                    source, dest, table.cost(dest), expected,
                )
                return False
    return True
