"""
Shared seriesmeta library code.

This package holds the metadata provider integrations and the resilient HTTP
layer they call through. Operator entrypoints (CLI scripts) live in `scripts/`
and import from `seriesmeta` rather than the other way around.
"""
