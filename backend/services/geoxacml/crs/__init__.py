from .resolver import resolve_srid, srs_name_for_srid
from .axis import normalize_axis_order, swap_axes, needs_axis_swap

__all__ = [
    "resolve_srid",
    "srs_name_for_srid",
    "normalize_axis_order",
    "swap_axes",
    "needs_axis_swap",
]
