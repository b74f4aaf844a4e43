"""
Tests for RoutingEngine rounds, commit semantics and scheduled events.
"""

import itertools

import pytest

from dvsim.dijkstra_engine import SimpleDijkstraEngine, tables_match_shortest_paths
from dvsim.errors import ConvergenceError, UnknownNode
from dvsim.routing import INFINITY, UNREACHABLE, RouteEntry
from dvsim.simulation import RoutingEngine
from dvsim.topology import Topology


def _topology(names, links) -> Topology:
    topo = Topology()
    for name in names:
        topo.add_node(name)
    for n1, n2, cost in links:
        topo.add_link(n1, n2, cost)
    return topo


def _line(split_horizon=False) -> RoutingEngine:
    # A - B - C, each link cost 1
    return RoutingEngine(_topology("ABC", [("A", "B", 1), ("B", "C", 1)]), split_horizon=split_horizon)


# Seven nodes, a cycle with chords and an expensive direct link that is never shortest.
MESH_NODES = "ABCDEFG"
MESH_LINKS = [
    ("A", "B", 4), ("B", "C", 3), ("C", "D", 7), ("D", "E", 1), ("E", "F", 2),
    ("F", "G", 6), ("G", "A", 5), ("A", "D", 20), ("B", "F", 8), ("C", "E", 2),
]


def _links_snapshot(topo: Topology):
    return {name: topo.links_of(name) for name in topo.node_names()}


def test_two_node_network_is_already_stable():
    engine = RoutingEngine(_topology("AB", [("A", "B", 5)]))

    assert engine.lookup_cost("A", "B") == 5
    assert engine.table_of("A").next_hop("B") == "B"
    assert engine.exchange() is False
    assert engine.current_round == 1

    route = engine.trace_route("A", "B")
    assert route.path == ["A", "B"]
    assert route.cost == 5


def test_one_exchange_learns_two_hop_route():
    engine = _line()

    assert engine.exchange() is True

    assert engine.table_of("A").get("C") == RouteEntry(2, "B")
    assert engine.table_of("C").get("A") == RouteEntry(2, "B")
    assert engine.trace_route("A", "C").path == ["A", "B", "C"]
    assert engine.exchange() is False


def test_exchange_uses_start_of_round_snapshot():
    """News travels one hop per round, whatever order nodes are visited in."""
    engine = RoutingEngine(_topology("ABCD", [("A", "B", 1), ("B", "C", 1), ("C", "D", 1)]))

    engine.exchange()
    # After one round A knows C (two hops) but not D (three hops).
    assert engine.table_of("A").get("C") == RouteEntry(2, "B")
    assert engine.table_of("A").get("D") == UNREACHABLE

    engine.exchange()
    assert engine.table_of("A").get("D") == RouteEntry(3, "B")


def test_converged_engine_is_idempotent():
    engine = _line(split_horizon=True)
    engine.run_until_stable()
    tables = engine.topology.snapshot_tables()

    for _ in range(5):
        assert engine.exchange() is False
    assert engine.topology.snapshot_tables() == tables


@pytest.mark.parametrize("split_horizon", [True, False])
def test_static_mesh_converges_to_shortest_paths(split_horizon):
    engine = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=split_horizon)

    engine.run_until_stable()

    assert tables_match_shortest_paths(engine.topology)
    dijkstra = SimpleDijkstraEngine()
    for source in MESH_NODES:
        dist = dijkstra.shortest_path_costs(engine.topology, source)
        for dest in MESH_NODES:
            assert engine.lookup_cost(source, dest) == dist[dest]


def test_threaded_rounds_match_sequential_rounds():
    sequential = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=True)
    threaded = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=True, workers=4)

    for _ in range(6):
        assert sequential.exchange() == threaded.exchange()
        assert sequential.topology.snapshot_tables() == threaded.topology.snapshot_tables()


def test_workers_must_be_positive():
    with pytest.raises(ValueError):
        RoutingEngine(Topology(), workers=0)


def test_split_horizon_flag_is_reported():
    assert _line(split_horizon=True).is_split_horizon
    assert not _line().is_split_horizon


def test_failure_with_split_horizon_reports_unreachable_quickly():
    engine = _line(split_horizon=True)
    engine.run_until_stable()

    assert engine.destroy_link("B", "C") is True
    engine.exchange()

    assert engine.table_of("A").get("C") == UNREACHABLE
    assert engine.table_of("B").get("C") == UNREACHABLE
    assert engine.exchange() is False


def test_failure_without_split_horizon_counts_to_infinity():
    engine = _line(split_horizon=False)
    engine.run_until_stable()
    engine.destroy_link("B", "C")

    engine.exchange()
    # B believes A's stale advert and routes back through A.
    assert engine.table_of("B").get("C") == RouteEntry(3, "A")

    seen = set()
    while engine.exchange():
        for name in "AB":
            cost = engine.table_of(name).cost("C")
            assert cost <= INFINITY
            seen.add(cost)
        assert engine.current_round <= 3 * INFINITY

    assert max(c for c in seen if c < INFINITY) > 100
    assert engine.table_of("A").get("C") == UNREACHABLE
    assert engine.table_of("B").get("C") == UNREACHABLE


@pytest.mark.parametrize("split_horizon", [True, False])
def test_partitioned_mesh_terminates_with_bounded_costs(split_horizon):
    engine = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=split_horizon)
    engine.run_until_stable()
    # Cut G off from everyone.
    engine.destroy_link("F", "G")
    engine.destroy_link("G", "A")

    engine.run_until_stable(max_rounds=len(MESH_NODES) * INFINITY)

    for a, d in itertools.permutations(MESH_NODES, 2):
        assert engine.lookup_cost(a, d) <= INFINITY
        if "G" in (a, d):
            assert engine.table_of(a).get(d) == UNREACHABLE
    assert tables_match_shortest_paths(engine.topology)


def test_run_until_stable_raises_when_ceiling_is_hit():
    engine = _line(split_horizon=False)
    engine.run_until_stable()
    engine.destroy_link("B", "C")

    with pytest.raises(ConvergenceError):
        engine.run_until_stable(max_rounds=3)


def test_link_symmetry_holds_across_rounds():
    engine = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=True)
    engine.schedule_cost_change("C", "E", 2, 9)
    engine.schedule_failure("A", "B", 3)

    for _ in range(8):
        engine.exchange()
        for a, b in itertools.permutations(MESH_NODES, 2):
            assert engine.topology.link_cost(a, b) == engine.topology.link_cost(b, a)


def test_scheduled_failure_fires_exactly_at_its_round():
    engine = _line(split_horizon=True)
    engine.schedule_failure("C", "B", 3)

    engine.exchange()
    engine.exchange()
    before = _links_snapshot(engine.topology)
    assert engine.topology.has_link("B", "C")
    assert engine.table_of("A").get("C") == RouteEntry(2, "B")

    engine.exchange()
    assert engine.current_round == 3
    assert not engine.topology.has_link("B", "C")
    assert _links_snapshot(engine.topology) != before
    # Sole path gone: unreachable at the endpoints straight away.
    assert engine.table_of("B").get("C") == UNREACHABLE
    assert engine.table_of("C").get("B") == UNREACHABLE
    assert engine.table_of("C").get("A") == UNREACHABLE
    assert engine.pending_events() == []

    after = _links_snapshot(engine.topology)
    engine.exchange()
    assert _links_snapshot(engine.topology) == after


def test_scheduled_cost_change_applies_after_commit():
    engine = _line(split_horizon=True)
    engine.schedule_cost_change("A", "B", 1, 4)

    changed = engine.exchange()

    assert changed is True
    assert engine.topology.link_cost("A", "B") == 4
    assert engine.table_of("A").get("B") == RouteEntry(4, "B")
    # C's route was computed before the change and is corrected next round.
    assert engine.table_of("C").get("A") == RouteEntry(2, "B")
    engine.exchange()
    assert engine.table_of("C").get("A") == RouteEntry(5, "B")


def test_same_round_events_apply_in_scheduling_order():
    engine = _line(split_horizon=True)
    engine.schedule_cost_change("A", "B", 1, 7)
    engine.schedule_cost_change("B", "A", 1, 3)

    engine.exchange()

    assert engine.topology.link_cost("A", "B") == 3


def test_stale_events_are_dropped():
    engine = _line(split_horizon=True)
    engine.exchange()
    engine.exchange()
    engine.schedule_failure("A", "B", 1)

    engine.exchange()

    assert engine.topology.has_link("A", "B")
    assert engine.pending_events() == []


def test_future_events_stay_queued():
    engine = _line()
    event = engine.schedule_failure("A", "B", 10)

    engine.exchange()

    assert engine.pending_events() == [event]
    assert engine.topology.has_link("A", "B")


def test_event_for_unknown_node_is_dropped_without_aborting_round():
    engine = _line(split_horizon=True)
    engine.schedule_failure("A", "Z", 1)
    engine.schedule_failure("A", "B", 1)

    engine.exchange()

    assert not engine.topology.has_link("A", "B")
    assert engine.pending_events() == []


def test_failure_event_on_missing_link_is_harmless():
    engine = _line(split_horizon=True)
    engine.schedule_failure("A", "C", 1)
    engine.exchange()
    assert engine.topology.has_link("A", "B")
    assert engine.topology.has_link("B", "C")


def test_immediate_operations_reject_unknown_nodes():
    engine = _line()
    with pytest.raises(UnknownNode):
        engine.destroy_link("A", "Z")
    with pytest.raises(UnknownNode):
        engine.change_link_cost("Z", "A", 3)
    with pytest.raises(UnknownNode):
        engine.render_table("Z")


def test_run_until_stable_leaves_future_events_pending():
    engine = _line(split_horizon=True)
    engine.schedule_failure("B", "C", 600)

    # Stable long before round 600; the failure is still pending.
    assert engine.run_until_stable() == 2
    assert len(engine.pending_events()) == 1


def test_take_applied_events_reports_each_event_once():
    engine = _line(split_horizon=True)
    change = engine.schedule_cost_change("A", "B", 1, 3)
    failure = engine.schedule_failure("B", "C", 1)
    engine.schedule_failure("A", "Z", 1)  # unknown node: dropped, not reported
    engine.schedule_failure("A", "C", 1)  # no such link: not reported

    engine.exchange()

    assert engine.take_applied_events() == [change, failure]
    assert engine.take_applied_events() == []


def test_thread_pool_is_reused_across_rounds():
    engine = RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=True, workers=3)

    engine.exchange()
    pool = engine._executor  # type: ignore[attr-defined]
    engine.exchange()

    assert pool is not None
    assert engine._executor is pool  # type: ignore[attr-defined]
    engine.close()
    assert engine._executor is None  # type: ignore[attr-defined]


def test_engine_closes_pool_as_context_manager():
    with RoutingEngine(_topology(MESH_NODES, MESH_LINKS), split_horizon=True, workers=2) as engine:
        engine.run_until_stable()
        assert tables_match_shortest_paths(engine.topology)
    assert engine._executor is None  # type: ignore[attr-defined]
