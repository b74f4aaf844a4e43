"""Distance-vector routing simulator: synchronous rounds, split horizon, scheduled link events."""

from .errors import (
    ConfigError,
    ConvergenceError,
    DuplicateNode,
    DVSimError,
    InvalidLinkCost,
    MalformedTopology,
    NoRoute,
    UnknownNode,
)
from .events import CostChange, Event, EventQueue, LinkFailure
from .query import Route, RouteQuery
from .routing import INFINITY, UNREACHABLE, RouteEntry, RoutingTable
from .simulation import RoutingEngine
from .topology import Topology
from .topology_builder import load_topology, parse_topology

__all__ = [
    "INFINITY",
    "UNREACHABLE",
    "RouteEntry",
    "RoutingTable",
    "Topology",
    "Event",
    "EventQueue",
    "LinkFailure",
    "CostChange",
    "RoutingEngine",
    "Route",
    "RouteQuery",
    "load_topology",
    "parse_topology",
    "DVSimError",
    "UnknownNode",
    "DuplicateNode",
    "InvalidLinkCost",
    "MalformedTopology",
    "NoRoute",
    "ConvergenceError",
    "ConfigError",
]
