"""
Chebyshev-Lobatto points and spectral differentiation matrices.

The reference points ``x_j = cos(pi j / n)`` run from +1 down to -1 and are
mapped onto ``[a, b]`` with ``x = +1 -> b`` and ``x = -1 -> a``. For an
increasing interval the mapped nodes are therefore decreasing, and the node
belonging to ``a`` is always the last one.

References
----------
.. [1] Trefethen, L. N. (2000). Spectral Methods in MATLAB. SIAM, ch. 6.
"""
from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

Array = NDArray[np.float64]


def _reference_points(n: int) -> Array:
    if n < 0:
        raise ValueError(f"Polynomial degree must be non-negative, got {n}")
    if n == 0:
        return np.ones(1, dtype=np.float64)
    # sin form keeps the points exactly symmetric about 0
    return np.sin(np.pi * np.arange(n, -n - 1, -2, dtype=np.float64) / (2.0 * n))


def chebpts2(n: int, interval: Sequence[float] = (-1.0, 1.0)) -> Array:
    """
    Chebyshev-Lobatto points of degree ``n`` on ``interval``.

    Parameters
    ----------
    n : int
        Polynomial degree; ``n + 1`` points are returned.
    interval : (a, b)
        Target interval. ``a > b`` is allowed.

    Returns
    -------
    NDArray[np.float64]
        Points (n + 1,), ordered from ``b`` to ``a``.
    """
    a, b = float(interval[0]), float(interval[1])
    x = _reference_points(n)
    t = 0.5 * (b - a) * x + 0.5 * (a + b)
    if n > 0:
        # pin the end points against rounding
        t[0] = b
        t[-1] = a
    return t


def chebdiffmtx(n: int, interval: Sequence[float] = (-1.0, 1.0)) -> Array:
    """
    Chebyshev spectral differentiation matrix on ``interval``.

    ``D @ f(t)`` approximates ``f'(t)`` at the nodes of :func:`chebpts2`
    for the same ``n`` and ``interval``.

    Parameters
    ----------
    n : int
        Polynomial degree.
    interval : (a, b)
        Interval of differentiation.

    Returns
    -------
    NDArray[np.float64]
        Differentiation matrix (n + 1, n + 1).
    """
    if n == 0:
        return np.zeros((1, 1), dtype=np.float64)

    a, b = float(interval[0]), float(interval[1])
    x = _reference_points(n)

    c = np.ones(n + 1, dtype=np.float64)
    c[0] = c[-1] = 2.0
    c *= (-1.0) ** np.arange(n + 1)

    X = np.tile(x.reshape(-1, 1), (1, n + 1))
    dX = X - X.T

    D = np.outer(c, 1.0 / c) / (dX + np.eye(n + 1))
    # Negative sum trick: rows of an exact differentiation matrix sum to zero
    D -= np.diag(D.sum(axis=1))

    return D * (2.0 / (b - a))
