"""
fn_chain/serialization/metrics.py — Serialization metrics.

A function is "serialized" once it carries at least one "function"-category
dependency. The serialization percentage is the share of serialized functions:

    current_percentage = (total_functions - dependency_free) / total_functions × 100

and the number of extra functions synthesis must serialize to reach a target
percentage p is

    total_to_serialize = ceil(total_functions × p / 100) - (total_functions - dependency_free)

which is zero or negative when the map is already at or above the target.

Author: Jay Gutierrez, PhD
"""

import logging
import math
from dataclasses import dataclass

import pandas as pd

from fn_chain.graph.model import (
    FUNCTION_CATEGORY,
    Functions,
    build_function_graph,
    function_dependencies,
    is_dependency_free,
)

logger = logging.getLogger(__name__)


@dataclass
class SerializationMetrics:
    """
    Serialization counts for one function map.

    Fields:
        total_functions:     Number of functions in the map.
        dependency_free:     Functions without a "function" dependency.
        current_percentage:  Share of functions already serialized (0–100).
        target_percentage:   Requested share (0–100).
        total_to_serialize:  Additional functions needed to reach the target.
                             May be <= 0.
    """
    total_functions: int
    dependency_free: int
    current_percentage: float
    target_percentage: int
    total_to_serialize: int

    @property
    def serialized(self) -> int:
        return self.total_functions - self.dependency_free


def compute_serialization_metrics(
    functions: Functions,
    target_percentage: int,
    category: str = FUNCTION_CATEGORY,
) -> SerializationMetrics:
    """
    Count dependency-free functions and derive current / target figures.

    Read-only: the map is not modified and the result has no effect on
    synthesis beyond total_to_serialize.

    Args:
        functions:         Backend "function" map.
        target_percentage: Requested serialization percentage (0–100).
        category:          Dependency category that counts as serialization.

    Returns:
        SerializationMetrics. current_percentage is 0.0 for an empty map.
    """
    total = len(functions)
    free = sum(1 for item in functions.values() if is_dependency_free(item, category))
    serialized = total - free

    current = (serialized / total) * 100 if total else 0.0
    total_to_serialize = math.ceil(total * (target_percentage / 100)) - serialized

    metrics = SerializationMetrics(
        total_functions=total,
        dependency_free=free,
        current_percentage=current,
        target_percentage=target_percentage,
        total_to_serialize=total_to_serialize,
    )

    logger.info("Total functions: %d", total)
    logger.info("Dependency-free functions: %d", free)
    logger.info("Current serialization percentage: %.2f", current)
    logger.info("Target serialization percentage: %d", target_percentage)
    logger.info("Number of functions to serialize for target: %d", total_to_serialize)

    return metrics


def serialization_summary(
    functions: Functions,
    category: str = FUNCTION_CATEGORY,
) -> pd.DataFrame:
    """
    One row per function describing its place in the dependency graph.

    Columns:
        function               Function name (map key order).
        function_dependencies  Number of "function" dependencies.
        other_dependencies     Number of dependencies in any other category.
        dependents             Number of declared functions depending on it.
        dependency_free        True if function_dependencies == 0.
    """
    G = build_function_graph(functions, category)

    rows = []
    for name, item in functions.items():
        fn_deps = len(function_dependencies(item, category))
        all_deps = len(item.get("dependsOn") or [])
        rows.append({
            "function": name,
            "function_dependencies": fn_deps,
            "other_dependencies": all_deps - fn_deps,
            "dependents": G.in_degree(name),
            "dependency_free": fn_deps == 0,
        })

    return pd.DataFrame(
        rows,
        columns=[
            "function",
            "function_dependencies",
            "other_dependencies",
            "dependents",
            "dependency_free",
        ],
    )
