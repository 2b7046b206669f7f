"""
fn_chain/tests/test_model.py — Tests for fn_chain.graph.model.

Tests verify:
- Only "function"-category dependencies become edges.
- Missing / null dependsOn is treated as empty.
- Node and successor order follow the map's key and dependsOn order.
- Undeclared dependency targets are flagged declared=False.
- IndexedGraph mirrors the DiGraph.
"""

import networkx as nx

from conftest import function_item
from fn_chain.graph.model import (
    IndexedGraph,
    build_function_graph,
    function_dependencies,
    is_dependency_free,
)


# ── function_dependencies ─────────────────────────────────────────────────────

def test_function_dependencies_filters_category():
    item = {
        "dependsOn": [
            {"category": "storage", "resourceName": "bucket", "attributes": ["BucketName"]},
            {"category": "function", "resourceName": "B", "attributes": ["Name"]},
            {"category": "api", "resourceName": "rest", "attributes": ["ApiId"]},
            {"category": "function", "resourceName": "A", "attributes": ["Arn"]},
        ]
    }
    assert function_dependencies(item) == ["B", "A"]


def test_missing_depends_on_is_empty():
    assert function_dependencies({"build": True}) == []
    assert is_dependency_free({"build": True})


def test_null_depends_on_is_empty():
    assert function_dependencies({"dependsOn": None}) == []


def test_other_categories_do_not_count():
    item = function_item("uploads", category="storage")
    assert is_dependency_free(item)


def test_custom_category():
    item = function_item("layer", category="layer")
    assert function_dependencies(item, category="layer") == ["layer"]
    assert function_dependencies(item) == []


# ── build_function_graph ──────────────────────────────────────────────────────

def test_graph_nodes_and_edges(make_functions):
    G = build_function_graph(make_functions({"A": ["B", "C"], "B": ["C"], "C": []}))
    assert isinstance(G, nx.DiGraph)
    assert list(G.nodes) == ["A", "B", "C"]
    assert list(G.successors("A")) == ["B", "C"]
    assert set(G.edges) == {("A", "B"), ("A", "C"), ("B", "C")}
    assert all(d["edge_type"] == "function" for _, _, d in G.edges(data=True))


def test_graph_keeps_isolated_functions(make_functions):
    G = build_function_graph(make_functions({"A": [], "B": []}))
    assert G.number_of_nodes() == 2
    assert G.number_of_edges() == 0


def test_undeclared_target_is_flagged(make_functions):
    G = build_function_graph(make_functions({"A": ["ghost"]}))
    assert G.nodes["A"]["declared"] is True
    assert G.nodes["ghost"]["declared"] is False
    assert list(G.nodes) == ["A", "ghost"]


def test_duplicate_dependencies_collapse(make_functions):
    G = build_function_graph(make_functions({"A": ["B", "B"], "B": []}))
    assert G.number_of_edges() == 1


# ── IndexedGraph ──────────────────────────────────────────────────────────────

def test_indexed_graph_mirrors_digraph(make_functions):
    G = build_function_graph(make_functions({"A": ["C"], "B": ["A", "C"], "C": []}))
    arena = IndexedGraph.from_graph(G)
    assert len(arena) == 3
    assert arena.names == ["A", "B", "C"]
    assert arena.index == {"A": 0, "B": 1, "C": 2}
    assert arena.adjacency == [[2], [0, 2], []]
