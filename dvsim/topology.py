"""
Node registry and symmetric link map for dvsim.

Implements the Graph interface over node names. All cross-node references go
through the registry by name; a node's link map holds plain integer costs and
its routing table holds immutable RouteEntry records, so the two never share
a mutable object.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple
import logging

from .errors import DuplicateNode, InvalidLinkCost, UnknownNode
from .graph import Graph
from .routing import INFINITY, UNREACHABLE, RouteEntry, RoutingTable

LOGGER = logging.getLogger(__name__)


@dataclass
class NodeState:
    """Links and committed routing table of a single node."""
    name: str
    links: Dict[str, int] = field(default_factory=dict)
    table: RoutingTable = field(default_factory=RoutingTable)


def validate_cost(cost: object) -> int:
    """Return ``cost`` if it is a usable link cost, else raise InvalidLinkCost."""
    if isinstance(cost, bool) or not isinstance(cost, int):
        raise InvalidLinkCost(f"link cost must be an integer, got {cost!r}")
    if not 0 <= cost < INFINITY:
        raise InvalidLinkCost(f"link cost {cost} outside [0, {INFINITY})")
    return cost


class Topology(Graph):
    """
    Undirected, integer-weighted network of named nodes.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, NodeState] = {}

    # --- Registry -------------------------------------------------------------

    def add_node(self, name: str) -> None:
        """
        Register ``name`` with no links.

        Every node's table lists every other node, so the newcomer starts
        unreachable from everyone and vice versa.
        """
        if name in self._nodes:
            raise DuplicateNode(name)
        state = NodeState(name)
        for other in self._nodes.values():
            other.table.set(name, UNREACHABLE)
            state.table.set(other.name, UNREACHABLE)
        self._nodes[name] = state

    def node_names(self) -> List[str]:
        return sorted(self._nodes)

    def table_of(self, name: str) -> RoutingTable:
        return self._state(name).table

    def links_of(self, name: str) -> Dict[str, int]:
        return dict(self._state(name).links)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # --- Link mutation ----------------------------------------------------------

    def add_link(self, n1: str, n2: str, cost: int) -> None:
        """
        Install a symmetric link and a direct route at both endpoints.

        The direct route overwrites whatever either endpoint currently knows
        about the other, regardless of cost.
        """
        a, b = self._pair(n1, n2)
        if n1 == n2:
            raise ValueError(f"cannot link node {n1!r} to itself")
        cost = validate_cost(cost)
        a.links[n2] = cost
        b.links[n1] = cost
        a.table.set(n2, RouteEntry(cost, n2))
        b.table.set(n1, RouteEntry(cost, n1))

    def destroy_link(self, n1: str, n2: str) -> bool:
        """
        Remove the link n1-n2 from both endpoints.

        Each endpoint detects the failure locally: every route it forwards
        through the lost neighbor becomes unreachable. Returns False if there
        was no link.
        """
        a, b = self._pair(n1, n2)
        if n2 not in a.links:
            return False
        del a.links[n2]
        del b.links[n1]
        reset = a.table.reset_via(n2) + b.table.reset_via(n1)
        LOGGER.debug("link %s-%s destroyed, %d routes reset", n1, n2, reset)
        return True

    def change_link_cost(self, n1: str, n2: str, cost: int) -> bool:
        """
        Set the cost of link n1-n2 at both endpoints.

        A direct route between the endpoints follows the new cost; routes that
        reach the other endpoint some other way are left to the next exchange.
        Returns False if there was no link.
        """
        a, b = self._pair(n1, n2)
        if n2 not in a.links:
            return False
        cost = validate_cost(cost)
        a.links[n2] = cost
        b.links[n1] = cost
        for state, other in ((a, n2), (b, n1)):
            if state.table.next_hop(other) == other:
                state.table.set(other, RouteEntry(cost, other))
        return True

    # --- Link queries -----------------------------------------------------------

    def neighbors_of(self, name: str) -> Set[Tuple[str, int]]:
        return set(self._state(name).links.items())

    def link_cost(self, n1: str, n2: str) -> Optional[int]:
        a, _ = self._pair(n1, n2)
        return a.links.get(n2)

    def has_link(self, n1: str, n2: str) -> bool:
        return self.link_cost(n1, n2) is not None

    # --- Round support ----------------------------------------------------------

    def snapshot_tables(self) -> Dict[str, RoutingTable]:
        """Independent copies of every committed table."""
        return {name: state.table.copy() for name, state in self._nodes.items()}

    def commit_tables(self, tables: Mapping[str, RoutingTable]) -> None:
        """Replace every node's table at once."""
        missing = set(self._nodes) - set(tables)
        if missing:
            raise ValueError(f"commit is missing tables for {sorted(missing)}")
        for name, state in self._nodes.items():
            state.table = tables[name]

    # --- Graph interface --------------------------------------------------------

    def nodes(self) -> Iterable[str]:
        return self._nodes.keys()

    def outgoing(self, node: str) -> Mapping[str, float]:
        return dict(self._state(node).links)  # defensive copy

    # --- Internal helpers -------------------------------------------------------

    def _state(self, name: str) -> NodeState:
        try:
            return self._nodes[name]
        except KeyError:
            raise UnknownNode(name) from None

    def _pair(self, n1: str, n2: str) -> Tuple[NodeState, NodeState]:
        return self._state(n1), self._state(n2)
