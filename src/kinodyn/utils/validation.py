"""
Validation utilities for solver inputs.

Provides functions to validate integration spans, step sizes and node
counts before any expensive assembly or stepping takes place.
"""
from __future__ import annotations
import numpy as np
from numpy.typing import ArrayLike, NDArray
import warnings


def validate_positive(value: float, name: str, strict: bool = True) -> None:
    """
    Validate that a scalar value is positive.

    Parameters
    ----------
    value : float
        Value to validate
    name : str
        Parameter name for error messages
    strict : bool
        If True, raise ValueError. If False, issue warning.

    Raises
    ------
    ValueError
        If strict=True and value <= 0
    """
    if value <= 0:
        msg = f"{name} must be positive, got {value}"
        if strict:
            raise ValueError(msg)
        else:
            warnings.warn(msg, RuntimeWarning, stacklevel=2)


def validate_span(span: ArrayLike) -> NDArray[np.float64]:
    """
    Validate a two-element integration interval ``[ta, tb]``.

    Returns the span as float array. Decreasing spans are allowed
    (backward integration).

    Raises
    ------
    ValueError
        If the span does not hold exactly two finite, distinct values
    """
    ab = np.asarray(span, dtype=np.float64).ravel()
    if ab.size != 2:
        raise ValueError(f"Time span must have exactly 2 elements, got {ab.size}")
    if not np.all(np.isfinite(ab)):
        raise ValueError(f"Time span must be finite, got {ab}")
    if ab[0] == ab[1]:
        raise ValueError(f"Time span must not be empty, got {ab}")
    return ab


def validate_grid(grid: ArrayLike) -> NDArray[np.float64]:
    """
    Validate an explicit time grid.

    Raises
    ------
    ValueError
        If the grid has fewer than 2 points, contains non-finite values,
        or is not strictly monotonic
    """
    t = np.asarray(grid, dtype=np.float64).ravel()
    if t.size < 2:
        raise ValueError(f"Time grid needs at least 2 points, got {t.size}")
    if not np.all(np.isfinite(t)):
        raise ValueError("Time grid must be finite")
    dt = np.diff(t)
    if not (np.all(dt > 0) or np.all(dt < 0)):
        raise ValueError("Time grid must be strictly increasing or strictly decreasing")
    return t


def validate_node_count(nodes: int) -> int:
    """Validate the number of collocation nodes (integer >= 2)."""
    if isinstance(nodes, bool) or int(nodes) != nodes:
        raise ValueError(f"Number of nodes must be an integer, got {nodes!r}")
    if nodes < 2:
        raise ValueError(f"Number of nodes must be at least 2, got {nodes}")
    return int(nodes)


def validate_timestep(dt: float) -> None:
    """
    Validate timestep is non-zero and finite.

    Parameters
    ----------
    dt : float
        Time step [s]. The sign is ignored by the grid builder.

    Raises
    ------
    ValueError
        If timestep is zero or not finite
    """
    if not np.isfinite(dt) or dt == 0:
        raise ValueError(f"Timestep must be finite and non-zero, got {dt}")
