"""
fn_chain/graph/cycles.py — Cycle detection over "function" dependencies.

Classic three-color depth-first search (unvisited / in-progress / done),
returning the first cycle found as an ordered path of function names:

    A depends on B, B depends on C, C depends on B
    → ['A', 'B', 'C', 'B']

The path starts at the DFS root, not at the first node of the cycle, and ends
with the repeated node. Roots are taken in the map's key order and neighbors in
dependsOn order, so the result is fully deterministic.

The traversal is iterative (explicit frame stack over an integer arena with two
numpy boolean masks) so that long synthetic chains of thousands of functions
never hit Python's recursion limit.

Author: Jay Gutierrez, PhD
"""

import logging
from typing import Optional

import networkx as nx
import numpy as np

from fn_chain.graph.model import (
    FUNCTION_CATEGORY,
    Functions,
    IndexedGraph,
    build_function_graph,
)

logger = logging.getLogger(__name__)


def find_cycle_in_graph(G: nx.DiGraph) -> Optional[list[str]]:
    """
    Return the first directed cycle in G as a path, or None if G is acyclic.

    Algorithm (O(V + E)):
        For every node in insertion order that is not yet visited, run a DFS.
        `visited` marks nodes ever entered; `on_stack` marks nodes on the
        current root → node path (the in-progress color). Reaching a neighbor
        that is on the stack closes a cycle; reaching a visited neighbor that
        is off the stack (done) is skipped.

    Args:
        G: Directed graph from build_function_graph().

    Returns:
        path: [root, ..., node, neighbor] where neighbor is the in-progress
              node that was revisited, or None.
    """
    arena = IndexedGraph.from_graph(G)
    n = len(arena)
    visited = np.zeros(n, dtype=bool)
    on_stack = np.zeros(n, dtype=bool)

    for root in range(n):
        if visited[root]:
            continue

        path: list[int] = [root]
        cursors: list[int] = [0]
        visited[root] = True
        on_stack[root] = True

        while path:
            node = path[-1]
            successors = arena.adjacency[node]

            if cursors[-1] < len(successors):
                neighbor = successors[cursors[-1]]
                cursors[-1] += 1

                if on_stack[neighbor]:
                    cycle = [arena.names[i] for i in path]
                    cycle.append(arena.names[neighbor])
                    return cycle
                if visited[neighbor]:
                    continue

                visited[neighbor] = True
                on_stack[neighbor] = True
                path.append(neighbor)
                cursors.append(0)
            else:
                # All neighbors explored: node is done.
                on_stack[node] = False
                path.pop()
                cursors.pop()

    return None


def find_cycle(
    functions: Functions,
    category: str = FUNCTION_CATEGORY,
) -> Optional[list[str]]:
    """
    Check a backend "function" map for circular dependencies.

    Never raises on a cyclic map; the caller decides whether a cycle is fatal.

    Returns:
        The cycle path (see find_cycle_in_graph) or None when acyclic.
    """
    G = build_function_graph(functions, category)
    cycle = find_cycle_in_graph(G)
    if cycle is None:
        logger.debug(
            "No circular dependencies among %d functions (%d edges).",
            len(functions),
            G.number_of_edges(),
        )
    return cycle


def format_cycle(path: list[str]) -> str:
    """Render a cycle path as 'A -> B -> A'."""
    return " -> ".join(path)
