"""
Weighted graph abstraction for dvsim.

Nodes are identified by name. Edges are directed: u -> v with a weight; an
undirected link is stored as two edges of equal weight.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping


class Graph(ABC):
    """Directed, weighted graph over node names."""

    @abstractmethod
    def nodes(self) -> Iterable[str]:
        """Return all node names in the graph."""
        raise NotImplementedError

    @abstractmethod
    def outgoing(self, node: str) -> Mapping[str, float]:
        """
        Outgoing neighbors and edge weights for a given node.

        Returns: dict[str, float]
        """
        raise NotImplementedError
