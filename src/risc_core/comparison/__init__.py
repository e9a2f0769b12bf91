"""Structural comparison of risk scorecard documents."""

from .comparator import compare
from .tracking import EmitPolicy, track_keyed_list, track_value, track_value_list

__all__ = [
    "compare",
    "EmitPolicy",
    "track_keyed_list",
    "track_value",
    "track_value_list",
]
