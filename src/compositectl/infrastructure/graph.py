"""Bind graph: NetworkX view of which service binds to which.

Edges run from the declaring service to its satisfier and carry the bind
name. Built per validation from the plan's bind map; never cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import networkx as nx

from compositectl.domain.metadata import BindMapping

type _Graph = nx.DiGraph


def build_bind_graph(bind_map: Mapping[str, Iterable[BindMapping]]) -> _Graph:
    """Build a DiGraph with an edge ``service -> satisfier`` per mapping."""
    g: _Graph = nx.DiGraph()
    for service, mappings in bind_map.items():
        g.add_node(service)
        for mapping in mappings:
            g.add_edge(service, mapping.satisfier, bind_name=mapping.bind_name)
    return g


def find_bind_cycles(graph: _Graph) -> list[list[str]]:
    """Return every elementary cycle, each rotated to start at its smallest node.

    The result is sorted so repeated runs report cycles in the same order.
    """
    cycles: list[list[str]] = []
    for cycle in nx.simple_cycles(graph):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)
