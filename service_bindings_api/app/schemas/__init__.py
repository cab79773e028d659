"""
Pydantic schema definitions.

Schemas describe discovered bindings and the per-request view that
the listing endpoint renders.
"""
