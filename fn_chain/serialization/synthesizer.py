"""
fn_chain/serialization/synthesizer.py — Chain synthesis ("fake serialization").

Serverless deployments build dependent functions after the functions they
depend on. Chaining otherwise independent functions with synthetic "function"
dependencies forces the deploy tool to build them one after another instead
of all at once. This module adds such edges until a target share of functions
carries a "function" dependency.

Algorithm (O(n) passes over the map):
    1. Classify dependency-free functions (no "function" dependency).
    2. total_to_serialize = ceil(n × p / 100) - (n - free_count).
    3. In key order, every originally dependency-free function depends on the
       first dependency-free function that is neither itself nor already used.
    4. Validate the result with the cycle detector.

For {A, B, C} at 100% this yields A → B, B → C: a single chain.

Author: Jay Gutierrez, PhD
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional

from fn_chain.config import DEFAULT_CONFIG, ChainConfig
from fn_chain.graph.cycles import find_cycle, format_cycle
from fn_chain.graph.model import Functions, is_dependency_free
from fn_chain.serialization.metrics import (
    SerializationMetrics,
    compute_serialization_metrics,
)

logger = logging.getLogger(__name__)


class CircularDependencyError(ValueError):
    """The "function" dependency graph contains a cycle."""

    def __init__(self, path: list[str]) -> None:
        self.path = path
        super().__init__(f"Circular dependency detected: {format_cycle(path)}")


@dataclass
class SynthesisResult:
    """
    Output of one synthesis pass.

    Fields:
        functions:   New function map with synthetic dependencies appended.
                     The caller's map is left untouched.
        added_edges: (source, target) pairs in the order they were added.
        used:        Functions recorded as used, in insertion order.
        metrics:     Serialization metrics of the *input* map.
    """
    functions: Functions
    added_edges: list[tuple[str, str]] = field(default_factory=list)
    used: list[str] = field(default_factory=list)
    metrics: Optional[SerializationMetrics] = None


def synthesize_chain(
    functions: Functions,
    config: ChainConfig = DEFAULT_CONFIG,
) -> SynthesisResult:
    """
    Add synthetic "function" dependencies until the target percentage is met.

    Bookkeeping:
        The source of the very first edge is recorded as used; after that only
        targets are recorded. The pass stops as soon as the used count reaches
        total_to_serialize, which is checked after an edge is added and before
        its target is recorded. With config.mark_every_source=True every
        source is recorded, not just the first.

    Args:
        functions: Backend "function" map (name → config item).
        config:    ChainConfig. Uses serialization_percentage, attribute,
                   function_category and mark_every_source.

    Returns:
        SynthesisResult carrying the new map.

    Raises:
        CircularDependencyError: the resulting graph is cyclic. Cycles can
            only come from the input's existing dependencies; synthetic edges
            always extend a single chain.

    Notes:
        - total_to_serialize <= 0 adds no edges.
        - Running out of dependency-free targets is not an error: the pass
          stops with as many edges as it could add.
    """
    category = config.function_category
    metrics = compute_serialization_metrics(
        functions, config.serialization_percentage, category
    )
    updated: Functions = copy.deepcopy(functions)
    result = SynthesisResult(functions=updated, metrics=metrics)

    total_to_serialize = metrics.total_to_serialize
    if total_to_serialize <= 0:
        logger.info(
            "Target %d%% already met (%.2f%% serialized); no dependencies added.",
            config.serialization_percentage,
            metrics.current_percentage,
        )
    else:
        _add_synthetic_edges(updated, total_to_serialize, config, result)

    cycle = find_cycle(updated, category)
    if cycle:
        logger.error(
            "Circular dependency detected among the following functions: %s",
            format_cycle(cycle),
        )
        raise CircularDependencyError(cycle)

    logger.info(
        "Added %d synthetic dependencies (%d functions used).",
        len(result.added_edges),
        len(result.used),
    )
    return result


def _add_synthetic_edges(
    updated: Functions,
    total_to_serialize: int,
    config: ChainConfig,
    result: SynthesisResult,
) -> None:
    """Mutate `updated` in place, recording edges and used names on `result`."""
    category = config.function_category
    pool = [name for name, item in updated.items() if is_dependency_free(item, category)]
    sources = set(pool)
    used: dict[str, None] = {}  # ordered set

    for name in updated:
        if name not in sources:
            continue

        candidates = [k for k in pool if k != name and k not in used]
        if not candidates:
            continue
        target = candidates[0]

        item = updated[name]
        if item.get("dependsOn") is None:
            item["dependsOn"] = []
        item["dependsOn"].append({
            "attributes": [config.attribute],
            "category": category,
            "resourceName": target,
        })
        result.added_edges.append((name, target))
        logger.debug("Synthetic dependency: %s -> %s", name, target)

        if not used or config.mark_every_source:
            used[name] = None

        if len(used) == total_to_serialize:
            break

        used[target] = None
        pool.remove(target)

    if len(used) < total_to_serialize:
        logger.info(
            "Only %d of %d functions could be serialized; "
            "not enough dependency-free functions remain.",
            len(used),
            total_to_serialize,
        )

    result.used = list(used)
