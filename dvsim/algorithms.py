"""
Algorithm interfaces for routing.

Keeps graph algorithms separate from the round driver and the topology.
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Tuple

from .graph import Graph
from .routing import RoutingTable


class DijkstraEngine(ABC):
    """
    Interface for single-source shortest-path computation.
    """

    @abstractmethod
    def shortest_path_costs(self, graph: Graph, source: str) -> Dict[str, float]:
        """
        Compute shortest-path costs from source to all reachable nodes.

        Returns:
            Mapping dest_node -> path_cost(source -> dest_node).
        """
        raise NotImplementedError

    @abstractmethod
    def shortest_paths(
        self, graph: Graph, source: str
    ) -> tuple[Dict[str, float], Dict[str, str]]:
        """
        Compute shortest-path costs plus the predecessor chain for each dest.

        Returns:
            (dist, prev) where dist is the cost map and prev records parents.
        """
        raise NotImplementedError


class DistanceVectorEngine(ABC):
    """
    Interface for one node's distance-vector update within a round.
    """

    @abstractmethod
    def relax(
        self,
        self_node: str,
        neighbor_costs: Mapping[str, int],
        snapshot: Mapping[str, RoutingTable],
        split_horizon: bool = False,
    ) -> Tuple[RoutingTable, bool]:
        """
        Compute self_node's table for the next round.

        Args:
            self_node: node whose table is updated.
            neighbor_costs: cost(self_node -> v) for each live neighbour v.
            snapshot: every node's committed table at the start of the round.
                Must not be mutated.
            split_horizon: ignore a neighbour's route to D when that route
                goes back through self_node.

        Returns:
            (table, changed): the new working table and whether any entry
            differs from self_node's snapshot table.
        """
        raise NotImplementedError
