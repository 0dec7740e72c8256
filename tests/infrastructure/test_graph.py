"""Tests for the bind graph and cycle detection."""

from __future__ import annotations

from compositectl.domain.metadata import BindMapping
from compositectl.infrastructure.graph import build_bind_graph, find_bind_cycles


class TestBindGraph:
    def test_edges_carry_bind_name(self) -> None:
        g = build_bind_graph({"core/api": [BindMapping("router", "core/router")]})
        assert g.has_edge("core/api", "core/router")
        assert g.edges["core/api", "core/router"]["bind_name"] == "router"

    def test_acyclic(self) -> None:
        g = build_bind_graph(
            {
                "core/a": [BindMapping("x", "core/b")],
                "core/b": [BindMapping("y", "core/c")],
            }
        )
        assert find_bind_cycles(g) == []

    def test_cycle_is_rotated_to_smallest_node(self) -> None:
        g = build_bind_graph(
            {
                "core/b": [BindMapping("x", "core/c")],
                "core/c": [BindMapping("y", "core/a")],
                "core/a": [BindMapping("z", "core/b")],
            }
        )
        assert find_bind_cycles(g) == [["core/a", "core/b", "core/c"]]
