"""
fn_chain/io/backend_config.py — Backend configuration document I/O.

The document is the JSON file written by the serverless CLI. Only its
"function" property is interpreted; every other property (api, auth,
storage, ...) and every field inside each function item is written back
exactly as it was read.

Writes go through a ``.tmp`` intermediate and os.replace so an interrupted
run never leaves a truncated config behind.

Author: Jay Gutierrez, PhD
"""

import json
import logging
import os
from typing import Any

from fn_chain.graph.model import FUNCTION_CATEGORY, Functions

logger = logging.getLogger(__name__)

FUNCTION_KEY = "function"


class BackendConfigError(ValueError):
    """The backend config file is missing or has an unusable shape."""


def load_backend_config(path: str) -> dict[str, Any]:
    """
    Read and validate a backend config document.

    Args:
        path: Path to backend-config.json.

    Returns:
        The full parsed document. document["function"] is a non-empty dict.

    Raises:
        BackendConfigError: file not found, invalid JSON, "function" property
            missing / empty / not an object, a dependsOn that is not a list,
            a dependsOn entry that is not an object, or a "function" entry
            without a string resourceName.
    """
    if not os.path.isfile(path):
        raise BackendConfigError(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as fh:
            document = json.load(fh)
    except json.JSONDecodeError as exc:
        raise BackendConfigError(f"Error parsing JSON in file {path}: {exc}") from exc

    if not isinstance(document, dict) or FUNCTION_KEY not in document:
        raise BackendConfigError(
            f'The "{FUNCTION_KEY}" property is missing in the JSON file.'
        )

    functions = document[FUNCTION_KEY]
    if not isinstance(functions, dict) or not functions:
        raise BackendConfigError(
            f'The "{FUNCTION_KEY}" property must be a non-empty object.'
        )

    for name, item in functions.items():
        if not isinstance(item, dict):
            raise BackendConfigError(f"Function '{name}' is not an object.")
        deps = item.get("dependsOn")
        if deps is not None and not isinstance(deps, list):
            raise BackendConfigError(f"Function '{name}' has a non-list dependsOn.")
        for dep in deps or []:
            _check_dependency(name, dep)

    logger.info("Found: %s (%d functions)", path, len(functions))
    return document


def _check_dependency(name: str, dep: Any) -> None:
    """Reject a dependsOn entry the graph and template phases cannot read."""
    if not isinstance(dep, dict):
        raise BackendConfigError(
            f"Function '{name}' has a dependsOn entry that is not an object: {dep!r}"
        )
    if dep.get("category") != FUNCTION_CATEGORY:
        return
    target = dep.get("resourceName")
    if not isinstance(target, str) or not target:
        raise BackendConfigError(
            f"Function '{name}' has a function dependency without a resourceName."
        )
    attributes = dep.get("attributes")
    if attributes is not None and not isinstance(attributes, list):
        raise BackendConfigError(
            f"Function '{name}' has a non-list attributes for dependency '{target}'."
        )


def get_functions(document: dict[str, Any]) -> Functions:
    """Return the "function" map of a loaded document."""
    return document[FUNCTION_KEY]


def with_functions(document: dict[str, Any], functions: Functions) -> dict[str, Any]:
    """Return a shallow copy of `document` whose "function" map is replaced."""
    updated = dict(document)
    updated[FUNCTION_KEY] = functions
    return updated


def write_backend_config(path: str, document: dict[str, Any]) -> None:
    """Write `document` to `path` atomically (write .tmp, rename), 2-space indent."""
    tmp = path + ".tmp"
    logger.info("Writing updated functions to: %s", path)
    with open(tmp, "w", encoding="utf-8") as fh:
        json.dump(document, fh, indent=2, ensure_ascii=False)
    os.replace(tmp, path)
    logger.info("Updated functions written to: %s", path)
