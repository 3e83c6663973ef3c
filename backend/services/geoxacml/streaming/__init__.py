"""
GML Streaming Parser Module

Event-driven GML 2 / GML 3 geometry parser built on an explicit stack of
element frames.

Key Components:
- strategies.py: Per-element construction rules (read-only table)
- handler.py: Frame stack driven by open/text/close events
- reader.py: Event sources (pull parser for strings, tree walk for elements)
"""

from .handler import GMLHandler
from .reader import GMLReader, iter_element_events, iter_string_events
from .strategies import STRATEGIES, element_srid, find_strategy

__all__ = [
    "GMLHandler",
    "GMLReader",
    "iter_element_events",
    "iter_string_events",
    "STRATEGIES",
    "element_srid",
    "find_strategy",
]
