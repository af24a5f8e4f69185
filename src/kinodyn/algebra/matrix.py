"""
Small dense matrix helpers used by the kinematics routines.

Division by a zero norm is left to IEEE floating-point rules: a zero column
(or row) comes back as NaN instead of raising.
"""
from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

Array = NDArray[np.float64]


def mnormrow(M: ArrayLike) -> Array:
    """
    Normalize a matrix per row.

    Parameters
    ----------
    M : array-like
        Matrix (R, C) or vector (C,).

    Returns
    -------
    NDArray[np.float64]
        Matrix of the same shape with each row divided by its Euclidean norm.
    """
    M = np.asarray(M, dtype=np.float64)
    norms = np.linalg.norm(M, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        return M / norms


def mnormcol(M: ArrayLike) -> Array:
    """
    Normalize a matrix per column.

    Parameters
    ----------
    M : array-like
        Matrix (R, C).

    Returns
    -------
    NDArray[np.float64]
        Matrix with each column's norm being one. A zero column yields NaN
        entries; no exception is raised.
    """
    M = np.asarray(M, dtype=np.float64)
    if M.ndim != 2:
        raise ValueError(f"mnormcol expects a 2-D matrix, got shape {M.shape}")
    return mnormrow(M.T).T


def skew(v: ArrayLike) -> Array:
    """
    Skew-symmetric matrix S(v) s.t. S(v) @ w = v × w.

    v: (3,) -> (3, 3)
    v: (3, N) -> (3, 3, N)
    """
    v = np.asarray(v, dtype=np.float64)
    if v.shape[0] != 3 or v.ndim > 2:
        raise ValueError(f"skew expects (3,) or (3, N), got shape {v.shape}")
    vx, vy, vz = v
    zero = np.zeros_like(vx)
    return np.array([
        [zero, -vz,  vy],
        [vz,  zero, -vx],
        [-vy, vx,  zero],
    ], dtype=np.float64)


def vanish_singular(A: ArrayLike, tol: float | None = None) -> Array:
    """
    Return a copy of ``A`` with singular entries set to exactly zero.

    An entry is singular if it is not finite or its magnitude is below
    ``tol`` (machine epsilon by default).
    """
    out = np.array(A, dtype=np.float64, copy=True)
    if tol is None:
        tol = np.finfo(np.float64).eps
    mask = ~np.isfinite(out)
    mask |= np.abs(np.where(mask, 0.0, out)) < tol
    out[mask] = 0.0
    return out
