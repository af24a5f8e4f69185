"""
Spectral integration of first-order linear ODEs.

Solves

    y'(t) = A(t) y(t) + b(t),    t in [ta, tb],    y(ta) = y0

by Chebyshev collocation: the solution is sampled at ``nodes``
Chebyshev-Lobatto points, the derivative is replaced by the spectral
differentiation matrix, and the resulting dense linear system is solved in
one go.

The right-hand side is a callable ``ode(t) -> (A, b)``. It may be written
in vectorized form, taking a (K,) vector of times and returning ``A`` of
shape (ny, ny, K) and ``b`` of shape (ny, K). Callables that only handle a
single time are detected up front and wrapped in a per-node loop. For a
single time, ``b`` may be flat (ny,), a column (ny, 1) or a row (1, ny), and a
scalar ODE may return plain numbers.

Examples
--------
>>> from kinodyn.core.spectral import odespec
>>> res = odespec(lambda t: (np.array([[-2.0]]), np.zeros(1)), [0.0, 1.0], [1.0])
>>> np.allclose(res.y[:, 0], np.exp(-2.0 * res.t))
True
"""
from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import solve

from kinodyn.core.chebyshev import chebdiffmtx, chebpts2
from kinodyn.core.options import SpectralOptions, parse_options
from kinodyn.exceptions import (
    InvalidNArginError,
    InvalidNArgoutError,
    InvalidSizeAError,
    InvalidSizeBError,
    ODEEvaluationError,
    ODENotFoundError,
)
from kinodyn.utils.validation import validate_span

Array = NDArray[np.float64]
LinearODE = Callable[[Any], tuple[ArrayLike, ArrayLike]]

logger = logging.getLogger(__name__)


class OdespecResult(NamedTuple):
    """Node times (nodes,) in increasing order and solution (nodes, ny)."""

    t: Array
    y: Array


def odespec(
    ode: LinearODE | str,
    tspan: ArrayLike,
    y0: ArrayLike,
    options: SpectralOptions | Mapping[str, Any] | None = None,
) -> OdespecResult:
    """
    Spectral integration of a first-order linear ODE.

    Parameters
    ----------
    ode : Callable | str
        Right-hand side ``ode(t) -> (A, b)``, or the name of one as
        ``"package.module:function"`` or ``"package.module.function"``.
    tspan : array-like
        Interval ``[ta, tb]``. Increasing for forward, decreasing for
        backward integration.
    y0 : array-like
        Initial state at ``ta`` (ny,).
    options : SpectralOptions | Mapping | None
        Solver options, e.g. ``{"Nodes": 29}``.

    Returns
    -------
    OdespecResult
        ``t`` (nodes,) node times, always increasing, and ``y`` (nodes, ny)
        where ``y[i]`` is the solution at ``t[i]``.

    Raises
    ------
    ODENotFoundError
        If ``ode`` is a name that cannot be resolved.
    InvalidNArginError
        If ``ode`` does not take exactly one argument.
    ODEEvaluationError
        If ``ode`` raises at the initial node.
    InvalidNArgoutError
        If ``ode`` does not return a pair ``(A, b)``.
    InvalidSizeAError, InvalidSizeBError
        If ``A`` or ``b`` do not match the state dimension.
    ValueError
        If ``tspan``, ``y0`` or ``options`` are invalid.
    """
    opts = parse_options(SpectralOptions, options)
    ab = validate_span(tspan)

    y0 = np.asarray(y0, dtype=np.float64).ravel()
    ny = y0.size
    if ny == 0:
        raise ValueError("Initial state y0 must not be empty")
    if not np.all(np.isfinite(y0)):
        raise ValueError(f"Initial state y0 must be finite, got {y0}")

    nn = opts.nodes
    tdir = np.sign(ab[1] - ab[0])

    # Nodes run from tb to ta; the initial condition sits at the last node
    nspan = chebpts2(nn - 1, ab)
    Dn = chebdiffmtx(nn - 1, ab)

    f = parse_ode(ode, nspan, ny)

    A_, b_ = f(nspan)

    ns = ny * nn
    logger.debug("odespec: %d states x %d nodes -> %d unknowns", ny, nn, ns - ny)

    # Global system, state-major: entry i*nn + k is state i at node k
    D = np.kron(np.eye(ny), Dn)
    A = np.zeros((ns, ns), dtype=np.float64)
    idxYN = np.arange(ny) * nn
    for k in range(nn):
        A[np.ix_(idxYN + k, idxYN + k)] = A_[:, :, k]
    b = b_.reshape(ns)

    # Permutation moving the initial-condition entries to the front
    idxX0 = idxYN + (nn - 1)
    idxY = np.setdiff1d(np.arange(ns), idxX0, assume_unique=True)
    perm = np.concatenate([idxX0, idxY])

    M = (D - A)[np.ix_(perm, perm)]
    bp = b[perm]

    b0 = M[ny:, :ny] @ y0
    yn = solve(M[ny:, ny:], bp[ny:] - b0)

    yp = np.concatenate([y0, yn])
    yfull = np.empty(ns, dtype=np.float64)
    yfull[perm] = yp

    y = yfull.reshape(ny, nn).T
    t = nspan.copy()

    # Chebyshev nodes come out decreasing for an increasing interval
    if tdir > 0:
        t = np.flip(t, axis=0)
        y = np.flip(y, axis=0)

    return OdespecResult(np.ascontiguousarray(t), np.ascontiguousarray(y))


def resolve_ode(ode: LinearODE | str) -> LinearODE:
    """
    Resolve an ODE reference to a callable.

    Strings are looked up as ``"module:attr"`` or ``"module.attr"``.

    Raises
    ------
    ODENotFoundError
        If the name cannot be imported or does not refer to a callable.
    """
    if callable(ode):
        return ode
    if not isinstance(ode, str):
        raise ODENotFoundError(f"ODE must be callable or a function name, got {type(ode).__name__}.")

    if ":" in ode:
        modname, _, attr = ode.partition(":")
    else:
        modname, _, attr = ode.rpartition(".")

    if not modname or not attr:
        raise ODENotFoundError(f"ODE function with name {ode} not found.")

    try:
        module = importlib.import_module(modname)
    except ImportError as e:
        raise ODENotFoundError(f"ODE function with name {ode} not found.") from e

    func = module
    for part in attr.split("."):
        func = getattr(func, part, None)
        if func is None:
            raise ODENotFoundError(f"ODE function with name {ode} not found.")

    if not callable(func):
        raise ODENotFoundError(f"ODE function with name {ode} is not callable.")
    return func


def _count_positional(func: Callable) -> int | None:
    """Number of positional parameters; None if *args or unknown."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    n = 0
    for p in sig.parameters.values():
        if p.kind == p.VAR_POSITIONAL:
            return None
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            if p.default is p.empty:
                n += 1
        elif p.kind == p.KEYWORD_ONLY and p.default is p.empty:
            # required keyword-only parameters can never be satisfied
            return -1
    return n


def _unpack_pair(result: Any) -> tuple[Array, Array]:
    if not isinstance(result, (tuple, list)) or len(result) != 2:
        n = len(result) if isinstance(result, (tuple, list)) else 1
        raise InvalidNArgoutError(
            f"Invalid number of output arguments to ODE function. "
            f"Must return 2 (A, B), but returns {n}."
        )
    return np.asarray(result[0], dtype=np.float64), np.asarray(result[1], dtype=np.float64)


def _single_time_shapes(A: Array, b: Array, ny: int) -> tuple[Array, Array]:
    """
    Check ``(A, b)`` returned for a single time and bring them to (ny, ny), (ny,).

    ``b`` may be a flat (ny,) vector, a column (ny, 1) or a row (1, ny). For a
    scalar ODE, plain numbers are accepted for both.
    """
    if ny == 1 and A.ndim == 0:
        A = A.reshape(1, 1)
    if A.shape != (ny, ny):
        raise InvalidSizeAError(
            f"Invalid shape of matrix A. Expected ({ny}, {ny}) but got {A.shape}."
        )
    if b.shape not in ((ny,), (ny, 1), (1, ny)) and not (ny == 1 and b.ndim == 0):
        raise InvalidSizeBError(
            f"Invalid shape of vector B. Expected ({ny},), ({ny}, 1) or (1, {ny}) "
            f"but got {b.shape}."
        )
    return A, b.reshape(ny)


def parse_ode(ode: LinearODE | str, tout: Array, ny: int) -> Callable[[Array], tuple[Array, Array]]:
    """
    Check the ODE and return it in vectorized form.

    The returned function maps a (K,) vector of times onto ``A`` (ny, ny, K)
    and ``b`` (ny, K). Whether the user's callable can be called with a
    vector of times is decided here, once; otherwise it is wrapped in a
    per-node loop.

    Parameters
    ----------
    ode : Callable | str
        ODE right-hand side or its name.
    tout : NDArray
        Node times; the first one is used to probe the callable.
    ny : int
        Number of states.
    """
    func = resolve_ode(ode)

    nargin = _count_positional(func)
    if nargin is not None and nargin != 1:
        raise InvalidNArginError(
            f"Invalid number of input arguments to ODE function. "
            f"Must take 1 (t), but takes {nargin}."
        )

    t = float(tout[0])
    try:
        result = func(t)
    except Exception as e:
        raise ODEEvaluationError("Error evaluating ODE function at initial step.") from e

    _single_time_shapes(*_unpack_pair(result), ny)

    if _accepts_vector(func, t, ny):
        logger.debug("odespec: ODE function is vectorized")
        return lambda tv: _evaluate_vectorized(func, tv, ny)

    logger.debug("odespec: ODE function is not vectorized, evaluating node by node")
    return lambda tv: ode_vectorized(func, ny, tv)


def _accepts_vector(func: LinearODE, t: float, ny: int) -> bool:
    """Probe ``func`` with two times and check it answers in vectorized shape."""
    try:
        A, b = _unpack_pair(func(np.array([t, t])))
    except Exception:
        return False
    return A.shape == (ny, ny, 2) and b.shape == (ny, 2)


def _evaluate_vectorized(func: LinearODE, t: Array, ny: int) -> tuple[Array, Array]:
    nt = t.size
    A, b = _unpack_pair(func(t))
    if A.shape != (ny, ny, nt):
        raise InvalidSizeAError(
            f"Invalid shape of matrix A. Expected ({ny}, {ny}, {nt}) but got {A.shape}."
        )
    if b.shape != (ny, nt):
        raise InvalidSizeBError(
            f"Invalid shape of vector B. Expected ({ny}, {nt}) but got {b.shape}."
        )
    return A, b


def ode_vectorized(func: LinearODE, ny: int, t: Array) -> tuple[Array, Array]:
    """
    Evaluate a single-time ODE function at every node.

    Parameters
    ----------
    func : Callable
        ODE callback returning ``(A, b)`` at one node ``t``.
    ny : int
        Number of states, for allocating ``A`` and ``b``.
    t : NDArray
        Node times (K,).

    Returns
    -------
    A : NDArray
        (ny, ny, K) system matrices.
    b : NDArray
        (ny, K) forcing terms.
    """
    nt = t.size
    A = np.zeros((ny, ny, nt), dtype=np.float64)
    b = np.zeros((ny, nt), dtype=np.float64)

    for it in range(nt):
        Ai, bi = _single_time_shapes(*_unpack_pair(func(float(t[it]))), ny)
        A[:, :, it] = Ai
        b[:, it] = bi

    return A, b
