"""
fn_chain/graph/endpoints.py — First and last function of the induced chain.

Reporting helper only. After synthesis the dependency-free functions form a
chain such as

    A → B → C        (A depends on B, B depends on C)

where C runs first (it depends on nothing) and A runs last (nothing depends
on it).

"Last" is an iteration-order artifact, not a longest-path computation: the
traversal walks dependents from the first function and reports where the
deepest walk ends, ties going to the walk found first in key order. On a
simple chain that is the chain's tail; on a branching graph it is merely one
of the deepest nodes. If the walk meets a node that is still in progress (a
cycle), that node is reported instead.

Author: Jay Gutierrez, PhD
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from fn_chain.graph.model import (
    FUNCTION_CATEGORY,
    Functions,
    IndexedGraph,
    build_function_graph,
)

logger = logging.getLogger(__name__)


@dataclass
class ChainEndpoints:
    """
    Endpoints of the function chain.

    Fields:
        first: First function in key order with no dependencies of any
               category, or None if every function depends on something.
        last:  End of the deepest dependent walk from `first`, or None when
               `first` is None.
    """
    first: Optional[str]
    last: Optional[str]


def _deepest_dependent(arena: IndexedGraph, start: int) -> str:
    """Iterative three-color DFS from `start`; return the deepest node reached."""
    n = len(arena)
    visited = np.zeros(n, dtype=bool)
    on_stack = np.zeros(n, dtype=bool)

    path: list[int] = [start]
    cursors: list[int] = [0]
    visited[start] = True
    on_stack[start] = True
    deepest, deepest_depth = start, 1

    while path:
        node = path[-1]
        successors = arena.adjacency[node]

        if cursors[-1] < len(successors):
            neighbor = successors[cursors[-1]]
            cursors[-1] += 1

            if on_stack[neighbor]:
                return arena.names[neighbor]
            if visited[neighbor]:
                continue

            visited[neighbor] = True
            on_stack[neighbor] = True
            path.append(neighbor)
            cursors.append(0)
            if len(path) > deepest_depth:
                deepest, deepest_depth = neighbor, len(path)
        else:
            on_stack[node] = False
            path.pop()
            cursors.pop()

    return arena.names[deepest]


def find_chain_endpoints(
    functions: Functions,
    category: str = FUNCTION_CATEGORY,
) -> ChainEndpoints:
    """
    Identify the first and last function of the dependency chain.

    Args:
        functions: Backend "function" map, usually the synthesized one.
        category:  Dependency category that forms chain edges.

    Returns:
        ChainEndpoints. Both fields are None when no function is free of
        dependencies.
    """
    first = next(
        (name for name, item in functions.items() if not item.get("dependsOn")),
        None,
    )
    if first is None:
        logger.warning("No dependency-free function found; chain has no endpoints.")
        return ChainEndpoints(first=None, last=None)

    # Edges point from a function to its dependency; walk the other way.
    dependents = build_function_graph(functions, category).reverse(copy=True)
    arena = IndexedGraph.from_graph(dependents)
    last = _deepest_dependent(arena, arena.index[first])

    return ChainEndpoints(first=first, last=last)
