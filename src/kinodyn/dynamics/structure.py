"""
Structure matrix of a 3R3T cable-driven parallel robot.

Column ``i`` of the structure matrix maps the tension of cable ``i`` onto the
platform wrench::

    A^T[:, i] = [u_i; (R b_i) × u_i]

with ``u_i`` the unit cable direction, ``b_i`` the platform attachment point
in the platform frame, and ``R`` the platform rotation.
"""
from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import null_space

Array = NDArray[np.float64]

logger = logging.getLogger(__name__)


class StructureMatrix(NamedTuple):
    """Structure matrix (6, M) and its null space (M, M - rank) or None."""

    matrix: Array
    nullspace: Array | None


def algo_structure_matrix(
    attachments: ArrayLike,
    vectors: ArrayLike,
    rotation: ArrayLike | None = None,
    with_nullspace: bool = True,
) -> StructureMatrix:
    """
    Calculate the structure matrix for given cable attachments and vectors.

    Parameters
    ----------
    attachments : array-like
        Cable attachment points w.r.t. the platform frame, one per column (3, M).
    vectors : array-like
        Cable direction vectors from attachment to winch (3, M). Need not be
        normalized.
    rotation : array-like | None
        Platform rotation matrix (3, 3). Defaults to identity. Orthonormality
        is assumed, not checked.
    with_nullspace : bool
        If False, skip the SVD and return ``nullspace=None``.

    Returns
    -------
    StructureMatrix
        ``(matrix, nullspace)`` named tuple.

    Raises
    ------
    ValueError
        If the shapes of the inputs do not match.

    Notes
    -----
    A zero-length cable vector is divided by its zero norm and yields NaN
    in its column.

    Examples
    --------
    >>> A, N = algo_structure_matrix(b, l, R)
    >>> tensions = N @ lam  # homogeneous tension distribution
    """
    b = np.asarray(attachments, dtype=np.float64)
    u = np.array(vectors, dtype=np.float64, copy=True)
    R = np.eye(3) if rotation is None else np.asarray(rotation, dtype=np.float64)

    if b.ndim != 2 or b.shape[0] != 3:
        raise ValueError(f"Cable attachments must be (3, M), got shape {b.shape}")
    if u.ndim != 2 or u.shape[0] != 3:
        raise ValueError(f"Cable vectors must be (3, M), got shape {u.shape}")
    if b.shape[1] != u.shape[1]:
        raise ValueError(
            f"Number of attachments ({b.shape[1]}) and cable vectors "
            f"({u.shape[1]}) must match"
        )
    if R.shape != (3, 3):
        raise ValueError(f"Rotation must be 3x3, got shape {R.shape}")

    m = b.shape[1]
    At = np.zeros((6, m), dtype=np.float64)

    for i in range(m):
        n = np.linalg.norm(u[:, i])
        if n != 1.0:
            with np.errstate(divide="ignore", invalid="ignore"):
                u[:, i] = u[:, i] / n

        At[0:3, i] = u[:, i]
        At[3:6, i] = np.cross(R @ b[:, i], u[:, i])

    nullspace = None
    if with_nullspace:
        nullspace = null_space(At)
        logger.debug("Structure matrix with %d cables has null space dimension %d",
                     m, nullspace.shape[1])

    return StructureMatrix(At, nullspace)
