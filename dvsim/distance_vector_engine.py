"""
Bellman-Ford-style distance-vector engine.

Reads neighbour tables from the start-of-round snapshot and writes only to a
private working copy of the local table.
"""

from typing import Mapping, Tuple

from .algorithms import DistanceVectorEngine
from .routing import INFINITY, UNREACHABLE, RouteEntry, RoutingTable


class SimpleDistanceVectorEngine(DistanceVectorEngine):
    """
    One round of distance-vector relaxation with optional split horizon.
    """

    def relax(
        self,
        self_node: str,
        neighbor_costs: Mapping[str, int],
        snapshot: Mapping[str, RoutingTable],
        split_horizon: bool = False,
    ) -> Tuple[RoutingTable, bool]:
        """
        Apply every neighbour's advertisement to a copy of our table.

        For each neighbour B and destination D we take B's advertised cost
        plus the link cost. A strictly cheaper route is adopted. When our
        route to D already goes through B we also follow B's bad news: an
        unreachable advert makes D unreachable for us, and a higher cost is
        adopted even though it is worse. That second rule is what lets costs
        count up towards INFINITY after a failure when split horizon cannot
        break the loop; INFINITY caps the growth.
        """
        working = snapshot[self_node].copy()

        for neighbor, link_cost in neighbor_costs.items():
            advertised = snapshot.get(neighbor)
            if advertised is None:
                continue

            for dest in working.destinations():
                if dest == neighbor or dest == self_node:
                    continue

                advert = advertised.get(dest)
                if split_horizon and advert.next_hop == self_node:
                    continue

                new_cost = min(advert.cost + link_cost, INFINITY)
                current = working.get(dest)

                if new_cost < current.cost:
                    working.set(dest, RouteEntry(new_cost, neighbor))
                elif current.next_hop == neighbor:
                    if new_cost == INFINITY:
                        working.set(dest, UNREACHABLE)
                    elif new_cost > current.cost:
                        working.set(dest, RouteEntry(new_cost, neighbor))

        # A cost can move and then settle back within one round; compare
        # against the snapshot rather than counting writes.
        return working, working != snapshot[self_node]
