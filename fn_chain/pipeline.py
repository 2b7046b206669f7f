"""
fn_chain/pipeline.py — Single-call orchestration.

Provides run_serialization(), which executes the whole transformation in the
correct order, and check_backend_config(), its read-only counterpart.

Usage:
    from fn_chain.pipeline import run_serialization
    result = run_serialization("backend-config.json")
    print(result.endpoints.first, "→ … →", result.endpoints.last)

Author: Jay Gutierrez, PhD
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from fn_chain.config import DEFAULT_CONFIG, ChainConfig
from fn_chain.graph.cycles import find_cycle, format_cycle
from fn_chain.graph.endpoints import ChainEndpoints, find_chain_endpoints
from fn_chain.graph.model import Functions
from fn_chain.io.backend_config import (
    get_functions,
    load_backend_config,
    with_functions,
    write_backend_config,
)
from fn_chain.io.templates import TemplateUpdateResult, update_templates
from fn_chain.serialization.metrics import (
    SerializationMetrics,
    compute_serialization_metrics,
    serialization_summary,
)
from fn_chain.serialization.synthesizer import synthesize_chain

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """
    Complete output of one fn_chain run.

    Contains the final function map plus every derived value for inspection
    and reporting.
    """

    config_path: str
    functions: Functions
    metrics: SerializationMetrics
    endpoints: ChainEndpoints
    summary: pd.DataFrame

    # serialize only
    added_edges: list[tuple[str, str]] = field(default_factory=list)
    written: bool = False
    template_result: Optional[TemplateUpdateResult] = None

    # check only
    cycle: Optional[list[str]] = None


def run_serialization(
    config_path: str,
    config: ChainConfig = DEFAULT_CONFIG,
    function_root: Optional[str] = None,
    dry_run: bool = False,
    update_template_files: bool = True,
    summary_csv: Optional[str] = None,
) -> PipelineResult:
    """
    Synthesize, validate, persist, and patch templates in one call.

    Order:
        1. Load backend config (BackendConfigError on bad input).
        2. Chain synthesis on a copy of the function map.
        3. Cycle validation (CircularDependencyError; nothing is written).
        4. Chain endpoints + summary table.
        5. Write the backend config (skipped on dry_run).
        6. Template parameter update (skipped on dry_run or when disabled).
        7. Summary CSV export (optional).

    Args:
        config_path:           Path to backend-config.json.
        config:                ChainConfig with percentage, attribute and paths.
        function_root:         Function directory; defaults to
                               <config dir>/<config.function_dir>.
        dry_run:               Compute everything, write nothing.
        update_template_files: Run the template phase after writing.
        summary_csv:           If provided, export the summary table here.

    Returns:
        PipelineResult.
    """
    document = load_backend_config(config_path)
    synthesis = synthesize_chain(get_functions(document), config)
    functions = synthesis.functions

    endpoints = find_chain_endpoints(functions, config.function_category)
    summary = serialization_summary(functions, config.function_category)

    result = PipelineResult(
        config_path=config_path,
        functions=functions,
        metrics=synthesis.metrics,
        endpoints=endpoints,
        summary=summary,
        added_edges=synthesis.added_edges,
    )

    if dry_run:
        logger.info("Dry run: %s left unchanged.", config_path)
    else:
        write_backend_config(config_path, with_functions(document, functions))
        result.written = True

        if update_template_files:
            root = function_root or _default_function_root(config_path, config)
            result.template_result = update_templates(functions, root, config)

    _export_summary(summary, summary_csv)
    return result


def check_backend_config(
    config_path: str,
    config: ChainConfig = DEFAULT_CONFIG,
    summary_csv: Optional[str] = None,
) -> PipelineResult:
    """
    Validate an existing backend config without modifying anything.

    A cycle is reported on result.cycle rather than raised.
    """
    document = load_backend_config(config_path)
    functions = get_functions(document)

    metrics = compute_serialization_metrics(
        functions, config.serialization_percentage, config.function_category
    )
    cycle = find_cycle(functions, config.function_category)
    if cycle:
        logger.error("Circular dependency detected: %s", format_cycle(cycle))

    summary = serialization_summary(functions, config.function_category)
    _export_summary(summary, summary_csv)

    return PipelineResult(
        config_path=config_path,
        functions=functions,
        metrics=metrics,
        endpoints=find_chain_endpoints(functions, config.function_category),
        summary=summary,
        cycle=cycle,
    )


def _default_function_root(config_path: str, config: ChainConfig) -> str:
    return os.path.join(os.path.dirname(os.path.abspath(config_path)), config.function_dir)


def _export_summary(summary: pd.DataFrame, path: Optional[str]) -> None:
    if not path:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    summary.to_csv(path, index=False)
    logger.info("Summary table written to: %s", path)
