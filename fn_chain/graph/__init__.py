"""
fn_chain.graph — NetworkX view of the backend "function" map.

Modules:
    model      — Build the DiGraph and its integer-indexed arena.
    cycles     — Iterative three-color DFS returning the first cycle path.
    endpoints  — First / last function of the induced dependency chain.

Graph objects are NetworkX DiGraphs:
    Node attribute : declared (False for dependency targets missing from the map)
    Edge attribute : edge_type='function'
An edge u → v means "function u depends on function v".
"""
