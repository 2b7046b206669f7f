"""
fn_chain — Synthetic function-dependency chains for serverless backend configs.

Reads the "function" map of a backend configuration document, injects
"function"-category dependencies between dependency-free functions until a
target share of functions is serialized, proves the result acyclic, and
patches each function's CloudFormation template with matching parameters.

Subpackages:
- fn_chain.graph          — Graph model, cycle detection, chain endpoints.
- fn_chain.serialization  — Chain synthesis and serialization metrics.
- fn_chain.io             — Backend config and template file collaborators.

Author: Jay Gutierrez, PhD
"""

__version__ = "0.1.0"
__author__ = "Jay Gutierrez"
