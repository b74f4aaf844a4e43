"""
Routing table data structures for dvsim.

Each node holds one RoutingTable: destination name -> RouteEntry. Entries are
immutable, so a table copy never aliases records with the live table or with
the topology's link map.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple


# Cost ceiling meaning "unreachable"; also bounds count-to-infinity growth.
INFINITY = 256


@dataclass(frozen=True)
class RouteEntry:
    """
    Single forwarding entry in a node's routing table.

    ``next_hop`` is None exactly when ``cost`` is INFINITY.
    """
    cost: int
    next_hop: Optional[str]

    def __post_init__(self) -> None:
        if not 0 <= self.cost <= INFINITY:
            raise ValueError(f"route cost {self.cost} outside [0, {INFINITY}]")
        if (self.next_hop is None) != (self.cost == INFINITY):
            raise ValueError("next_hop must be None iff cost is INFINITY")

    @property
    def reachable(self) -> bool:
        return self.next_hop is not None


UNREACHABLE = RouteEntry(INFINITY, None)


class RoutingTable:
    """
    Destination -> RouteEntry map owned by a single node.

    Destinations absent from the table are reported as UNREACHABLE.
    """

    def __init__(self, entries: Optional[Mapping[str, RouteEntry]] = None) -> None:
        self._entries: Dict[str, RouteEntry] = dict(entries or {})

    def get(self, dest: str) -> RouteEntry:
        return self._entries.get(dest, UNREACHABLE)

    def set(self, dest: str, entry: RouteEntry) -> None:
        self._entries[dest] = entry

    def cost(self, dest: str) -> int:
        return self.get(dest).cost

    def next_hop(self, dest: str) -> Optional[str]:
        return self.get(dest).next_hop

    def reset_via(self, neighbor: str) -> int:
        """
        Mark every route whose next hop is ``neighbor`` unreachable.

        Returns the number of entries reset.
        """
        stale = [dest for dest, entry in self._entries.items() if entry.next_hop == neighbor]
        for dest in stale:
            self._entries[dest] = UNREACHABLE
        return len(stale)

    def copy(self) -> "RoutingTable":
        return RoutingTable(self._entries)

    def destinations(self) -> list[str]:
        return sorted(self._entries)

    def items(self) -> Iterator[Tuple[str, RouteEntry]]:
        for dest in self.destinations():
            yield dest, self._entries[dest]

    def __contains__(self, dest: object) -> bool:
        return dest in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.destinations())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoutingTable):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"RoutingTable({self._entries!r})"
