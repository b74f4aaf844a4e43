"""
Plain-text renderers for tables, links and traced routes.
"""

from typing import Mapping

from .query import Route
from .routing import RoutingTable


def render_table(name: str, table: RoutingTable) -> str:
    lines = [f"{name} routing table:", "Destination\tCost\tOutgoing Link"]
    for dest, entry in table.items():
        hop = entry.next_hop if entry.next_hop is not None else "Unknown"
        lines.append(f"{dest}\t{entry.cost}\t{hop}")
    return "\n".join(lines) + "\n"


def render_links(name: str, links: Mapping[str, int]) -> str:
    lines = [f"{name} links:", "Adjacent Node\tCost"]
    for neighbor in sorted(links):
        lines.append(f"{neighbor}\t{links[neighbor]}")
    return "\n".join(lines) + "\n"


def render_route(route: Route) -> str:
    start, destination = route.path[0], route.path[-1]
    return (
        f"The best route from {start} to {destination} is: "
        f"{route.describe()} with total cost {route.cost}"
    )


def render_no_route(start: str, destination: str) -> str:
    return f"No route from {start} to {destination} exists."
