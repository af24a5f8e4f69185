"""
Quaternion algebra in scalar-first convention.

Quaternions are stored as ``[q0, q1, q2, q3]`` where ``q0`` is the real part.
Batches are passed as (4, N) arrays with the batch along the last axis, and
every derived quantity keeps the batch last as well:

============================  ==============  ==================
Function                      single (4,)     batch (4, N)
============================  ==============  ==================
:func:`quatmat`               (4, 4)          (4, 4, N)
:func:`quat2rotm`             (3, 3)          (3, 3, N)
:func:`quat2rotmjac`          (3, 3, 4)       (3, 3, 4, N)
============================  ==============  ==================

Unit norm is assumed, not enforced. :func:`quatvalid` warns about
non-unit input but never rescales it, so the homogeneous rotation
matrix of a non-unit quaternion is scaled by ``|q|**2``.

References
----------
.. [1] Kuipers, J. B. (1999). Quaternions and Rotation Sequences.
       Princeton University Press.
"""
from __future__ import annotations

import warnings

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .matrix import skew, vanish_singular

Array = NDArray[np.float64]

QUATERNION_NORM_TOLERANCE = 1e-6

IDENTITY: Array = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)
"""Identity quaternion [1, 0, 0, 0] representing no rotation."""


def quatvalid(q: ArrayLike, caller: str = "quatvalid") -> tuple[Array, int]:
    """
    Validate quaternion input and bring it into (4, N) shape.

    Parameters
    ----------
    q : array-like
        Quaternion (4,) or quaternions (4, N).
    caller : str
        Name used in error and warning messages.

    Returns
    -------
    qv : NDArray[np.float64]
        Quaternions as (4, N) array.
    n : int
        Number of quaternions N.

    Raises
    ------
    ValueError
        If the first dimension is not 4 or the array has more than 2 dims.
    """
    qv = np.asarray(q, dtype=np.float64)
    if qv.ndim == 1:
        qv = qv.reshape(-1, 1)
    if qv.ndim != 2 or qv.shape[0] != 4:
        raise ValueError(
            f"{caller}: quaternions must have shape (4,) or (4, N), got {np.shape(q)}"
        )

    norms = np.linalg.norm(qv, axis=0)
    if np.any(np.abs(norms - 1.0) > QUATERNION_NORM_TOLERANCE):
        warnings.warn(
            f"{caller}: quaternion not normalized (|q| in [{norms.min():.6f}, "
            f"{norms.max():.6f}]). Consider normalizing before use.",
            RuntimeWarning,
            stacklevel=3,
        )

    return qv, qv.shape[1]


def _unbatch(out: Array, q: ArrayLike) -> Array:
    """Drop the trailing batch axis if a single (4,) quaternion came in."""
    if np.ndim(q) == 1:
        return out[..., 0]
    return out


def quatmat(q: ArrayLike) -> tuple[Array, Array]:
    """
    Quaternion matrix and conjugate quaternion matrix.

    ``Q`` expresses left multiplication and ``Qc`` right multiplication as a
    matrix-vector product::

        p ⊗ r = Q(p) @ r = Qc(r) @ p

    Both share the first row and column ``[q0, -v^T; v, ...]``; the 3x3
    block is ``q0*I + skew(v)`` for ``Q`` and ``q0*I - skew(v)`` for ``Qc``.

    Parameters
    ----------
    q : array-like
        Quaternion (4,) or quaternions (4, N).

    Returns
    -------
    Q : NDArray[np.float64]
        Quaternion matrix (4, 4) or (4, 4, N).
    Qc : NDArray[np.float64]
        Conjugate quaternion matrix (4, 4) or (4, 4, N).
    """
    qv, nq = quatvalid(q, "quatmat")

    qsca = qv[0]
    qvec = qv[1:4]
    qskm = skew(qvec)
    qscaeye = np.eye(3)[:, :, None] * qsca[None, None, :]

    Q = np.empty((4, 4, nq), dtype=np.float64)
    Q[0, 0] = qsca
    Q[0, 1:] = -qvec
    Q[1:, 0] = qvec
    Qc = Q.copy()

    Q[1:, 1:] = qscaeye + qskm
    Qc[1:, 1:] = qscaeye - qskm

    return _unbatch(Q, q), _unbatch(Qc, q)


def quatmultiply(p: ArrayLike, r: ArrayLike) -> Array:
    """Hamilton product ``p ⊗ r`` for single or batched quaternions."""
    Qp, _ = quatmat(p)
    rv = np.asarray(r, dtype=np.float64)
    if Qp.ndim == 2:
        return Qp @ rv
    return np.einsum("ijn,jn->in", Qp, rv)


def quat2rotm(q: ArrayLike) -> Array:
    """
    Rotation matrix of a quaternion in homogeneous (quadratic) form.

    Each entry is a quadratic form in ``q`` so that :func:`quat2rotmjac`
    is its exact derivative.
    """
    qv, _ = quatvalid(q, "quat2rotm")
    w, x, y, z = qv

    R = np.array([
        [w*w + x*x - y*y - z*z, 2.0*(x*y - w*z),       2.0*(x*z + w*y)],
        [2.0*(x*y + w*z),       w*w - x*x + y*y - z*z, 2.0*(y*z - w*x)],
        [2.0*(x*z - w*y),       2.0*(y*z + w*x),       w*w - x*x - y*y + z*z],
    ], dtype=np.float64)

    return _unbatch(R, q)


def quat2rotmjac(q: ArrayLike) -> Array:
    """
    Jacobian of the rotation matrix with respect to the quaternion.

    Parameters
    ----------
    q : array-like
        Quaternion (4,) or quaternions (4, N).

    Returns
    -------
    NDArray[np.float64]
        (3, 3, 4) or (3, 3, 4, N) array where ``J[:, :, k]`` is the
        derivative of :func:`quat2rotm` with respect to ``q[k]``.

    Notes
    -----
    Singular entries (non-finite or below machine epsilon) are set to zero
    instead of being propagated.
    """
    qv, _ = quatvalid(q, "quat2rotmjac")
    q1, q2, q3, q4 = qv

    dq1 = 2.0 * np.array([
        [+q1, -q4, +q3],
        [+q4, +q1, -q2],
        [-q3, +q2, +q1],
    ])
    dq2 = 2.0 * np.array([
        [+q2, +q3, +q4],
        [+q3, -q2, -q1],
        [+q4, +q1, -q2],
    ])
    dq3 = 2.0 * np.array([
        [-q3, +q2, +q1],
        [+q2, +q3, +q4],
        [-q1, +q4, -q3],
    ])
    dq4 = 2.0 * np.array([
        [-q4, -q1, +q2],
        [+q1, -q4, +q3],
        [+q2, +q3, +q4],
    ])

    jR = np.stack([dq1, dq2, dq3, dq4], axis=2)

    return _unbatch(vanish_singular(jR), q)
