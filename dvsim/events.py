"""
Scheduled topology-change events for dvsim.

An event is either a LinkFailure or a CostChange, each targeting a round of the
protocol. The EventQueue is a heap keyed on (round, sequence): events for the
same round fire in the order they were scheduled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union
import heapq

from .topology import validate_cost


@dataclass(frozen=True)
class LinkFailure:
    """Link node1-node2 fails at ``round``."""
    round: int
    node1: str
    node2: str

    @property
    def link(self) -> frozenset[str]:
        return frozenset((self.node1, self.node2))

    def describe(self) -> str:
        return f"Link ({self.node1},{self.node2}) failed."


@dataclass(frozen=True)
class CostChange:
    """Link node1-node2 changes cost to ``new_cost`` at ``round``."""
    round: int
    node1: str
    node2: str
    new_cost: int

    @property
    def link(self) -> frozenset[str]:
        return frozenset((self.node1, self.node2))

    def describe(self) -> str:
        return f"Link ({self.node1},{self.node2}) changed cost to {self.new_cost}."


Event = Union[LinkFailure, CostChange]


@dataclass(order=True)
class _QueuedEvent:
    round: int
    sequence: int
    event: Event = field(compare=False)


class EventQueue:
    """
    Min-priority queue of events ordered by (round, scheduling order).

    Node names are not checked here; the topology validates them when the
    event is applied. A scheduled cost is checked up front.
    """

    def __init__(self) -> None:
        self._heap: List[_QueuedEvent] = []
        self._sequence = 0

    def schedule_failure(self, n1: str, n2: str, round: int) -> LinkFailure:
        event = LinkFailure(_check_round(round), n1, n2)
        self.push(event)
        return event

    def schedule_cost_change(self, n1: str, n2: str, round: int, new_cost: int) -> CostChange:
        event = CostChange(_check_round(round), n1, n2, validate_cost(new_cost))
        self.push(event)
        return event

    def push(self, event: Event) -> None:
        self._sequence += 1
        heapq.heappush(self._heap, _QueuedEvent(event.round, self._sequence, event))

    def peek(self) -> Optional[Event]:
        return self._heap[0].event if self._heap else None

    def pop(self) -> Event:
        if not self._heap:
            raise IndexError("pop from an empty EventQueue")
        return heapq.heappop(self._heap).event

    def __iter__(self) -> Iterator[Event]:
        """Pending events in firing order; the queue is left untouched."""
        return (queued.event for queued in sorted(self._heap))

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


def _check_round(round: object) -> int:
    if isinstance(round, bool) or not isinstance(round, int):
        raise TypeError(f"event round must be an integer, got {round!r}")
    return round
