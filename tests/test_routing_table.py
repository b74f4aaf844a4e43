"""
Unit tests for RouteEntry and RoutingTable.
"""

import pytest

from dvsim.routing import INFINITY, UNREACHABLE, RouteEntry, RoutingTable


def test_unreachable_entry_has_no_next_hop():
    assert UNREACHABLE.cost == INFINITY
    assert UNREACHABLE.next_hop is None
    assert not UNREACHABLE.reachable


def test_entry_rejects_next_hop_with_infinite_cost():
    with pytest.raises(ValueError):
        RouteEntry(INFINITY, "B")


def test_entry_rejects_missing_next_hop_with_finite_cost():
    with pytest.raises(ValueError):
        RouteEntry(3, None)


def test_entry_rejects_cost_above_infinity():
    with pytest.raises(ValueError):
        RouteEntry(INFINITY + 1, None)


def test_missing_destination_reads_as_unreachable():
    table = RoutingTable()
    assert table.get("Z") == UNREACHABLE
    assert table.cost("Z") == INFINITY
    assert table.next_hop("Z") is None


def test_copy_is_independent():
    table = RoutingTable({"B": RouteEntry(1, "B")})
    clone = table.copy()
    clone.set("B", RouteEntry(7, "C"))

    assert table.get("B") == RouteEntry(1, "B")
    assert clone != table


def test_reset_via_only_touches_routes_through_neighbour():
    table = RoutingTable({
        "B": RouteEntry(1, "B"),
        "C": RouteEntry(2, "B"),
        "D": RouteEntry(4, "D"),
    })

    assert table.reset_via("B") == 2
    assert table.get("B") == UNREACHABLE
    assert table.get("C") == UNREACHABLE
    assert table.get("D") == RouteEntry(4, "D")


def test_items_are_sorted_by_destination():
    table = RoutingTable({"C": UNREACHABLE, "A": RouteEntry(1, "A"), "B": UNREACHABLE})
    assert [dest for dest, _ in table.items()] == ["A", "B", "C"]
    assert list(table) == ["A", "B", "C"]
    assert len(table) == 3
    assert "A" in table
