"""
fn_chain/io/templates.py — CloudFormation template parameter updater.

Every "function" dependency attribute must be passed into the dependent
function's stack as a template parameter named

    function<resourceName><attribute>      e.g. functionauthLayerName

This module makes sure each such parameter exists in the function's
``<function_dir>/<name>/*cloudformation-template.json``.

All-or-nothing: templates are located for every function first. If any are
missing, the names are reported once and no template is touched. Every
template is parsed and patched before the first one is written, so a
malformed template also leaves the whole set unchanged.

Author: Jay Gutierrez, PhD
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from fn_chain.config import DEFAULT_CONFIG, ChainConfig
from fn_chain.graph.model import FUNCTION_CATEGORY, Functions

logger = logging.getLogger(__name__)


@dataclass
class TemplateUpdateResult:
    """
    Outcome of the template update phase.

    Fields:
        missing:          Functions whose template could not be found.
        skipped:          True if the phase did not touch any template.
        updated:          Functions whose template file was rewritten.
        parameters_added: Function name → parameter names added to its template.
    """
    missing: list[str] = field(default_factory=list)
    skipped: bool = False
    updated: list[str] = field(default_factory=list)
    parameters_added: dict[str, list[str]] = field(default_factory=dict)


def parameter_names(
    item: dict[str, Any],
    category: str = FUNCTION_CATEGORY,
) -> list[str]:
    """
    Parameter name for every attribute of every `category` dependency of `item`.

    Raises:
        ValueError: a matching dependency has no string resourceName.
    """
    names: list[str] = []
    for dep in item.get("dependsOn") or []:
        if not isinstance(dep, dict) or dep.get("category") != category:
            continue
        target = dep.get("resourceName")
        if not isinstance(target, str) or not target:
            raise ValueError(f"Dependency without a resourceName: {dep!r}")
        for attribute in dep.get("attributes") or []:
            names.append(f"function{target}{attribute}")
    return names


def find_template(
    function_root: str,
    name: str,
    suffix: str = DEFAULT_CONFIG.template_suffix,
) -> Optional[str]:
    """
    Locate the template file of function `name`.

    Returns:
        Path of the first file (sorted by name) in <function_root>/<name>/
        ending with `suffix`, or None if the directory or file does not exist.
    """
    function_path = os.path.join(function_root, name)
    if not os.path.isdir(function_path):
        return None
    for file_name in sorted(os.listdir(function_path)):
        candidate = os.path.join(function_path, file_name)
        if file_name.endswith(suffix) and os.path.isfile(candidate):
            return candidate
    return None


def ensure_parameters(
    template: dict[str, Any],
    names: list[str],
    function_name: str,
    config: ChainConfig = DEFAULT_CONFIG,
) -> list[str]:
    """
    Add each missing parameter to template["Parameters"] in place.

    Existing parameters are never overwritten. "Parameters" is created if the
    template has none.

    Returns:
        Names that were added.
    """
    parameters = template.setdefault("Parameters", {})
    added: list[str] = []
    for name in names:
        if name in parameters:
            continue
        parameters[name] = {
            "Type": config.parameter_type,
            "Description": config.parameter_description.format(name=function_name),
            "Default": name,
        }
        added.append(name)
    return added


def update_templates(
    functions: Functions,
    function_root: str,
    config: ChainConfig = DEFAULT_CONFIG,
) -> TemplateUpdateResult:
    """
    Ensure dependency parameters exist in every function's template.

    Args:
        functions:     Synthesized (and already validated) function map.
        function_root: Directory containing one sub-directory per function.
        config:        ChainConfig. Uses template_suffix, function_category,
                       parameter_type and parameter_description.

    Returns:
        TemplateUpdateResult. If any template is missing, skipped=True and
        missing lists every function without one.

    Raises:
        json.JSONDecodeError: a located template is not valid JSON.
        OSError: a template cannot be read or written.
    """
    result = TemplateUpdateResult()

    templates: dict[str, str] = {}
    for name in functions:
        path = find_template(function_root, name, config.template_suffix)
        if path is None:
            result.missing.append(name)
        else:
            templates[name] = path

    if result.missing:
        logger.error(
            "Missing templates for functions: %s", ", ".join(result.missing)
        )
        result.skipped = True
        return result

    logger.info("All function templates found.")

    # Parse and patch every template before any is written back.
    pending: list[tuple[str, str, dict[str, Any], list[str]]] = []
    for name, item in functions.items():
        names = parameter_names(item, config.function_category)
        if not names:
            continue

        path = templates[name]
        with open(path, "r", encoding="utf-8") as fh:
            template = json.load(fh)

        added = ensure_parameters(template, names, name, config)
        if added:
            pending.append((name, path, template, added))

    for name, path, template, added in pending:
        tmp = path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(template, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, path)

        result.updated.append(name)
        result.parameters_added[name] = added
        logger.debug("Added %d parameter(s) to %s: %s", len(added), path, added)

    logger.info("Updated %d of %d templates.", len(result.updated), len(functions))
    return result
