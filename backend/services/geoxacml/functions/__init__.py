"""
Functions exposed to the policy engine.

- topological: equals, disjoint, touches, crosses, within, contains,
  overlaps, intersects (False on CRS mismatch)
- geometry: from-string, is-simple/valid/empty/closed/rectangle/null,
  dimension, type, srs, srid, as-text
- bags: bag/set functions using exact equality
- registry: lookup and evaluation by function URN
"""

from .registry import FUNCTIONS, FunctionSpec, call_function, find_function

__all__ = [
    "FUNCTIONS",
    "FunctionSpec",
    "call_function",
    "find_function",
]
