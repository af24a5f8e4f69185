"""
Uniform time grids.

Grid points are computed from their index, never by repeated addition of
the step, so two grids built from the same ``(t0, tf, h)`` are identical
bit for bit.
"""
from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Relative slack (in units of |h|) for accepting tf as a grid point
GRID_TOLERANCE = 1e-9


def tspan(t0: float, tf: float, h: float) -> NDArray[np.float64]:
    """
    Uniformly spaced time grid from ``t0`` to ``tf`` with step ``h``.

    Parameters
    ----------
    t0 : float
        Initial time.
    tf : float
        Final time. May be smaller than ``t0`` for backward grids.
    h : float
        Step size. Only its magnitude is used; the sign follows ``tf - t0``.

    Returns
    -------
    NDArray[np.float64]
        Grid ``[t0, t0 + h, ..., tf]`` of ``round((tf - t0) / h) + 1`` points.

    Raises
    ------
    ValueError
        If ``h`` is zero or not finite, if ``t0 == tf``, or if ``tf - t0`` is
        not an integer multiple of ``h``.

    Examples
    --------
    >>> tspan(0.0, 1.0, 0.25)
    array([0.  , 0.25, 0.5 , 0.75, 1.  ])
    """
    t0 = float(t0)
    tf = float(tf)
    h = abs(float(h))

    if not np.isfinite(h) or h == 0.0:
        raise ValueError(f"Step size must be finite and non-zero, got {h}")
    if not (np.isfinite(t0) and np.isfinite(tf)):
        raise ValueError(f"Time span must be finite, got [{t0}, {tf}]")
    if t0 == tf:
        raise ValueError(f"Time span must not be empty, got [{t0}, {tf}]")

    ratio = abs(tf - t0) / h
    n = int(round(ratio))
    if n < 1 or abs(ratio - n) > GRID_TOLERANCE * max(1.0, ratio):
        raise ValueError(
            f"Time span [{t0}, {tf}] is not an integer multiple of step {h}"
        )

    return np.linspace(t0, tf, n + 1)
