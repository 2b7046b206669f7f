"""
fn_chain/config.py — All tunable parameters for fn_chain.

Every default the serializer, template updater, and CLI rely on lives here so
that changing a file name or a parameter shape is a single-file diff. Nothing
reads ambient module state: a ChainConfig is passed explicitly to every
function that needs one.

Author: Jay Gutierrez, PhD
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainConfig:
    """
    Immutable configuration for one serialization run.

    Override by constructing a new ChainConfig (or dataclasses.replace on
    DEFAULT_CONFIG) with the desired values.

    Raises:
        ValueError: serialization_percentage outside [0, 100], or an empty
                    attribute label.
    """

    # ── Chain synthesis ───────────────────────────────────────────────────────
    serialization_percentage: int = 100
    # Target share of functions that carry at least one "function" dependency
    # after synthesis. 100 chains every dependency-free function it can.

    attribute: str = "Name"
    # Attribute label attached to every synthetic dependency edge.
    # Also drives the template parameter name: function<Target><attribute>.

    function_category: str = "function"
    # Dependency category that forms graph edges. Every other category
    # (storage, api, auth, ...) is carried along untouched.

    mark_every_source: bool = False
    # False: only the first source of the pass is recorded as used.
    # True:  every source is recorded as used.
    # See DESIGN.md (open question) for why both modes produce the same edges.

    # ── Files and directories ─────────────────────────────────────────────────
    config_file_name: str = "backend-config.json"
    # Backend configuration document, resolved against the working directory.

    function_dir: str = "function"
    # Directory holding one sub-directory per function.

    template_suffix: str = "cloudformation-template.json"
    # The first file in a function directory with this suffix is its template.

    # ── Template parameters ───────────────────────────────────────────────────
    parameter_type: str = "String"
    parameter_description: str = "Parameter for function {name}"
    # {name} is replaced with the owning function's key.

    def __post_init__(self) -> None:
        if not 0 <= self.serialization_percentage <= 100:
            raise ValueError(
                "Serialization must be a number between 0 and 100, "
                f"got {self.serialization_percentage!r}."
            )
        if not self.attribute:
            raise ValueError("Attribute label must be a non-empty string.")


# Singleton default — import this everywhere instead of constructing anew.
DEFAULT_CONFIG = ChainConfig()
