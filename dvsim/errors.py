"""
Exception taxonomy for dvsim.

Removing or modifying a link that does not exist is not an error: the
topology reports it through a ``False`` return value instead.
"""

from typing import Optional


class DVSimError(Exception):
    """Base class for every error raised by the simulator."""


class UnknownNode(DVSimError, KeyError):
    """An operation referenced a node name that is not in the topology."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No node named {self.name}"


class DuplicateNode(DVSimError):
    """A node name was registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"node {name!r} already exists")
        self.name = name


class InvalidLinkCost(DVSimError, ValueError):
    """Link cost is not an integer in [0, INFINITY)."""


class MalformedTopology(DVSimError, ValueError):
    """
    Structurally invalid topology input.

    ``line`` is the 1-based line number of the offending input line, or
    ``None`` when the problem is not tied to a single line (e.g. empty input).
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class NoRoute(DVSimError):
    """No usable route exists between two nodes under the committed tables."""

    def __init__(self, start: str, destination: str, reason: str = "unreachable") -> None:
        super().__init__(f"No route from {start} to {destination} exists.")
        self.start = start
        self.destination = destination
        self.reason = reason


class ConvergenceError(DVSimError):
    """Repeated exchanges did not reach a fixed point within the round ceiling."""

    def __init__(self, rounds: int) -> None:
        super().__init__(f"no fixed point reached after {rounds} rounds")
        self.rounds = rounds


class ConfigError(DVSimError, ValueError):
    """Simulator configuration file is invalid."""
