"""
fn_chain.serialization — Fake serialization of serverless functions.

Modules:
    synthesizer  — Inject synthetic "function" dependencies up to a target share.
    metrics      — Current vs. target serialization percentage, summary table.

All tunables live in fn_chain.config.ChainConfig.
"""
