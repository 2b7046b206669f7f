"""
fn_chain.io — File collaborators around the in-memory function map.

Modules:
    backend_config  — Load / atomically write backend-config.json.
    templates       — Ensure per-dependency parameters in CloudFormation templates.
"""
