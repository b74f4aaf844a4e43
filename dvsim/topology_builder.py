"""
Build a Topology from the simulator's text format.

    A B C            <- line 1: node names
    A B 3            <- link lines: node1 node2 cost
    B C 1
                     <- first blank line ends the links
    anything here is a comment and is ignored
"""

from pathlib import Path
from typing import Iterable, Union

from .errors import DuplicateNode, InvalidLinkCost, MalformedTopology
from .topology import Topology


def load_topology(path: Union[str, Path]) -> Topology:
    """Read and parse a topology file; FileNotFoundError if it is missing."""
    return parse_topology(Path(path).read_text(encoding="utf-8"))


def parse_topology(text: str) -> Topology:
    lines = text.splitlines()
    if not lines or not lines[0].split():
        raise MalformedTopology("empty node list", line=1)

    topology = Topology()
    for name in lines[0].split():
        try:
            topology.add_node(name)
        except DuplicateNode as exc:
            raise MalformedTopology(f"duplicate node name {name!r}", line=1) from exc

    for lineno, line in _link_lines(lines[1:], first_lineno=2):
        fields = line.split()
        if len(fields) != 3:
            raise MalformedTopology(f"expected 'node1 node2 cost', got {line.strip()!r}", line=lineno)
        n1, n2, raw_cost = fields
        for name in (n1, n2):
            if name not in topology:
                raise MalformedTopology(f"link names undeclared node {name!r}", line=lineno)
        try:
            cost = int(raw_cost)
        except ValueError:
            raise MalformedTopology(f"cost {raw_cost!r} is not an integer", line=lineno) from None
        try:
            topology.add_link(n1, n2, cost)
        except (InvalidLinkCost, ValueError) as exc:
            raise MalformedTopology(str(exc), line=lineno) from exc

    return topology


def _link_lines(lines: Iterable[str], first_lineno: int) -> Iterable[tuple[int, str]]:
    for lineno, line in enumerate(lines, start=first_lineno):
        if not line.strip():
            return
        yield lineno, line

