"""
fn_chain/graph/model.py — Graph model over the backend "function" map.

The backend config keeps functions as a plain JSON object:

    {"fetchUser": {"build": true, "service": "Lambda",
                   "dependsOn": [{"category": "function",
                                  "resourceName": "authLayer",
                                  "attributes": ["Name"]}]}}

The map itself stays the source of truth (every pass-through field survives
load → mutate → store verbatim). This module only derives read-only views:
the "function"-category targets of one item, a NetworkX DiGraph of all items,
and an integer-indexed arena used by the traversals in cycles.py and
endpoints.py.

Author: Jay Gutierrez, PhD
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)

FUNCTION_CATEGORY = "function"

Functions = dict[str, dict[str, Any]]


def function_dependencies(
    item: dict[str, Any],
    category: str = FUNCTION_CATEGORY,
) -> list[str]:
    """
    Return the resourceName of every dependency of `item` in `category`.

    Order follows the item's dependsOn list. A missing or null dependsOn is
    treated as an empty list.
    """
    return [
        dep.get("resourceName")
        for dep in item.get("dependsOn") or []
        if dep.get("category") == category
    ]


def is_dependency_free(
    item: dict[str, Any],
    category: str = FUNCTION_CATEGORY,
) -> bool:
    """True if `item` has no dependency in `category` (other categories are ignored)."""
    return not function_dependencies(item, category)


def build_function_graph(
    functions: Functions,
    category: str = FUNCTION_CATEGORY,
) -> nx.DiGraph:
    """
    Build a DiGraph with one node per function and one edge per dependency.

    Args:
        functions: The backend "function" map (name → config item).
        category:  Dependency category that becomes an edge.

    Returns:
        G: nx.DiGraph. Node order is the map's key order; successor order is
           each item's dependsOn order.

    Notes:
        - Targets absent from the map are added as nodes with declared=False.
          They have no outgoing edges, so they can never close a cycle; the
          map is not validated for dangling references.
        - Duplicate dependencies on the same target collapse into one edge.
    """
    G = nx.DiGraph()
    for name in functions:
        G.add_node(name, declared=True)

    dangling = 0
    for name, item in functions.items():
        for target in function_dependencies(item, category):
            if target not in G:
                G.add_node(target, declared=False)
                dangling += 1
            G.add_edge(name, target, edge_type=category)

    if dangling:
        logger.debug(
            "%d dependency target(s) are not declared functions.", dangling
        )

    return G


@dataclass
class IndexedGraph:
    """
    Arena representation of a DiGraph: nodes are integers 0..n-1.

    Fields:
        names:     Node names, position = node index.
        index:     Reverse lookup name → index.
        adjacency: adjacency[i] lists the successor indices of node i in
                   insertion order.
    """
    names: list[str] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)
    adjacency: list[list[int]] = field(default_factory=list)

    @classmethod
    def from_graph(cls, G: nx.DiGraph) -> "IndexedGraph":
        names = list(G.nodes)
        index = {name: i for i, name in enumerate(names)}
        adjacency = [[index[v] for v in G.successors(name)] for name in names]
        return cls(names=names, index=index, adjacency=adjacency)

    def __len__(self) -> int:
        return len(self.names)
