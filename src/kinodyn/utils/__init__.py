"""Utility functions for kinodyn solvers.

``kinodyn.utils.io`` depends on the solver modules and is imported
explicitly rather than from here.
"""

from .timegrid import tspan
from .validation import (
    validate_grid,
    validate_node_count,
    validate_positive,
    validate_span,
    validate_timestep,
)

__all__ = [
    "tspan",
    "validate_positive",
    "validate_span",
    "validate_grid",
    "validate_node_count",
    "validate_timestep",
]
