"""
Round driver for the distance-vector simulation.

One exchange() is one synchronous round: every node relaxes against the same
start-of-round snapshot, all tables are committed together, then any events
due this round are applied to the topology.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple
import logging

from .algorithms import DistanceVectorEngine
from .distance_vector_engine import SimpleDistanceVectorEngine
from .errors import ConvergenceError, DVSimError
from .events import CostChange, Event, EventQueue, LinkFailure
from .query import Route, RouteQuery
from .rendering import render_links, render_table
from .routing import INFINITY, RoutingTable
from .topology import Topology

LOGGER = logging.getLogger(__name__)


class RoutingEngine:
    """
    Drives distance-vector rounds over a Topology and owns the event schedule.
    """

    def __init__(
        self,
        topology: Topology,
        split_horizon: bool = False,
        dv_engine: Optional[DistanceVectorEngine] = None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._topology = topology
        self._split_horizon = split_horizon
        self._dv_engine = dv_engine or SimpleDistanceVectorEngine()
        self._workers = workers
        self._events = EventQueue()
        self._applied: List[Event] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        self._round = 0
        self._query = RouteQuery(topology)

    # --- Accessors ------------------------------------------------------------

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def current_round(self) -> int:
        return self._round

    @property
    def is_split_horizon(self) -> bool:
        return self._split_horizon

    @property
    def route_query(self) -> RouteQuery:
        return self._query

    def pending_events(self) -> List[Event]:
        return list(self._events)

    def table_of(self, name: str) -> RoutingTable:
        return self._topology.table_of(name)

    def take_applied_events(self) -> List[Event]:
        """Events applied to the topology since the last call, in firing order."""
        applied, self._applied = self._applied, []
        return applied

    # --- Rounds -----------------------------------------------------------------

    def exchange(self) -> bool:
        """
        Run one synchronous round. Returns True if any table changed.
        """
        self._round += 1
        snapshot = self._topology.snapshot_tables()
        results = self._relax_all(snapshot)

        # Barrier: every node has finished before anything is committed.
        self._topology.commit_tables({name: table for name, (table, _) in results.items()})
        changed = any(node_changed for _, node_changed in results.values())
        LOGGER.debug("round %d complete, changed=%s", self._round, changed)

        self._apply_due_events()
        return changed

    def run_until_stable(self, max_rounds: Optional[int] = None) -> int:
        """
        Exchange until a round makes no change; returns the current round.

        Without an explicit ceiling the limit is nodes x INFINITY rounds past
        the last scheduled event, which count-to-infinity cannot outlast.
        """
        if max_rounds is None:
            max_rounds = self._default_round_ceiling()
        for _ in range(max_rounds):
            if not self.exchange():
                return self._round
        raise ConvergenceError(max_rounds)

    def _relax_all(self, snapshot: Dict[str, RoutingTable]) -> Dict[str, Tuple[RoutingTable, bool]]:
        names = list(snapshot)
        if self._workers == 1 or len(names) < 2:
            return {name: self._relax_one(name, snapshot) for name in names}
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="dvsim-relax")
        futures = {name: self._executor.submit(self._relax_one, name, snapshot) for name in names}
        return {name: future.result() for name, future in futures.items()}

    def close(self) -> None:
        """Shut down the relaxation thread pool, if one was started."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "RoutingEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _relax_one(self, name: str, snapshot: Dict[str, RoutingTable]) -> Tuple[RoutingTable, bool]:
        return self._dv_engine.relax(
            self_node=name,
            neighbor_costs=self._topology.links_of(name),
            snapshot=snapshot,
            split_horizon=self._split_horizon,
        )

    def _default_round_ceiling(self) -> int:
        last_event = max((event.round for event in self._events), default=self._round)
        return max(0, last_event - self._round) + max(1, len(self._topology)) * INFINITY

    # --- Events -----------------------------------------------------------------

    def schedule_failure(self, n1: str, n2: str, round: int) -> LinkFailure:
        return self._events.schedule_failure(n1, n2, round)

    def schedule_cost_change(self, n1: str, n2: str, round: int, new_cost: int) -> CostChange:
        return self._events.schedule_cost_change(n1, n2, round, new_cost)

    def _apply_due_events(self) -> None:
        while self._events:
            event = self._events.peek()
            if event.round > self._round:
                break
            self._events.pop()
            if event.round < self._round:
                LOGGER.debug("dropping stale event for round %d: %s", event.round, event)
                continue
            self._apply(event)

    def _apply(self, event: Event) -> None:
        try:
            if isinstance(event, LinkFailure):
                applied = self._topology.destroy_link(event.node1, event.node2)
            else:
                applied = self._topology.change_link_cost(event.node1, event.node2, event.new_cost)
        except DVSimError as exc:
            LOGGER.warning("round %d: dropping event %s: %s", self._round, event, exc)
            return
        if applied:
            self._applied.append(event)
            LOGGER.info("round %d: %s", self._round, event.describe())
        else:
            LOGGER.info("round %d: no link %s-%s for event", self._round, event.node1, event.node2)

    # --- Immediate topology changes ---------------------------------------------

    def destroy_link(self, n1: str, n2: str) -> bool:
        return self._topology.destroy_link(n1, n2)

    def change_link_cost(self, n1: str, n2: str, cost: int) -> bool:
        return self._topology.change_link_cost(n1, n2, cost)

    # --- Queries and rendering --------------------------------------------------

    def lookup_cost(self, node: str, destination: str) -> int:
        return self._query.lookup_cost(node, destination)

    def trace_route(self, start: str, destination: str) -> Route:
        return self._query.trace_route(start, destination)

    def render_table(self, name: str) -> str:
        return render_table(name, self._topology.table_of(name))

    def render_tables(self) -> str:
        return "\n".join(self.render_table(name) for name in self._topology.node_names())

    def render_links(self) -> str:
        return "\n".join(
            render_links(name, self._topology.links_of(name)) for name in self._topology.node_names()
        )
