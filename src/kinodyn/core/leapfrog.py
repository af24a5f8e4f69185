"""
Leapfrog (velocity Verlet) integration of second-order systems.

Integrates

    M(t, x, v) x'' = f(t, x, v)

on a fixed time grid. Each step of size ``h`` is

    v_half  = v_k + h/2 * a_k
    x_{k+1} = x_k + h * v_half
    a_{k+1} = M^-1 f(t_{k+1}, x_{k+1}, v_half)
    v_{k+1} = v_half + h/2 * a_{k+1}

so the right-hand side is evaluated once per step. For velocity-independent
forces the scheme is symplectic and the energy of conservative systems stays
bounded.

Mass Handling
-------------
The mass option is resolved once, before stepping, into a single
acceleration closure:

- None: ``f`` already returns accelerations
- scalar or (n, n) matrix: constant mass
- ``M(t)``: time-dependent mass
- ``M(t, x, v)``: state-dependent mass
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from kinodyn.core.options import LeapfrogOptions, parse_options
from kinodyn.utils.timegrid import tspan as make_tspan
from kinodyn.utils.validation import validate_grid, validate_positive, validate_span

Array = NDArray[np.float64]
SecondOrderRHS = Callable[[float, Array, Array], ArrayLike]

logger = logging.getLogger(__name__)


class Trajectory(NamedTuple):
    """Times (nt,), positions (nt, ndof) and velocities (nt, ndof)."""

    t: Array
    x: Array
    v: Array


def leapfrog(
    rhs: SecondOrderRHS,
    tspan: ArrayLike,
    x0: ArrayLike,
    v0: ArrayLike,
    options: LeapfrogOptions | Mapping[str, Any] | None = None,
) -> Trajectory:
    """
    Integrate a second-order ODE with the leapfrog scheme.

    Parameters
    ----------
    rhs : Callable
        ``rhs(t, x, v)`` returning the generalized force (ndof,), or the
        acceleration if no mass is given.
    tspan : array-like
        Time grid ``[t0, t1, ..., tf]``, or ``[t0, tf]`` together with
        ``options.step``.
    x0 : array-like
        Initial position, scalar or (ndof,).
    v0 : array-like
        Initial velocity, same size as ``x0``.
    options : LeapfrogOptions | Mapping | None
        Integrator options, e.g. ``{"Mass": 2.0}``.

    Returns
    -------
    Trajectory
        ``t`` equal to the time grid, ``x`` and ``v`` of shape (nt, ndof).

    Raises
    ------
    ValueError
        If the time grid, initial state or mass option is invalid, or
        if ``rhs`` returns a force of the wrong size.

    Examples
    --------
    >>> from kinodyn.utils.timegrid import tspan
    >>> traj = leapfrog(lambda t, x, v: -x, tspan(0.0, 10.0, 1e-2), 1.0, 0.0)
    >>> traj.x.shape
    (1001, 1)
    """
    opts = parse_options(LeapfrogOptions, options)
    t = _build_grid(tspan, opts.step)

    x0 = np.asarray(x0, dtype=np.float64).ravel()
    v0 = np.asarray(v0, dtype=np.float64).ravel()
    if x0.size == 0:
        raise ValueError("Initial position x0 must not be empty")
    if v0.shape != x0.shape:
        raise ValueError(
            f"Initial velocity must match initial position, got {v0.shape} and {x0.shape}"
        )
    ndof = x0.size

    accel = acceleration_function(rhs, ndof, opts.mass, opts.mass_state_dependence)

    nt = t.size
    x = np.empty((nt, ndof), dtype=np.float64)
    v = np.empty((nt, ndof), dtype=np.float64)
    x[0] = x0
    v[0] = v0

    logger.debug("leapfrog: %d steps, %d DOF", nt - 1, ndof)

    output_fcn = opts.output_fcn
    if output_fcn is not None:
        output_fcn(t[0], x[0].copy(), v[0].copy())

    a = accel(t[0], x[0], v[0])
    for k in range(nt - 1):
        h = t[k + 1] - t[k]
        v_half = v[k] + 0.5 * h * a
        x[k + 1] = x[k] + h * v_half
        a = accel(t[k + 1], x[k + 1], v_half)
        v[k + 1] = v_half + 0.5 * h * a

        if output_fcn is not None:
            output_fcn(t[k + 1], x[k + 1].copy(), v[k + 1].copy())

    return Trajectory(t, x, v)


def _build_grid(span: ArrayLike, step: float | None) -> Array:
    """Time grid from an explicit grid or from ``[t0, tf]`` and a step."""
    if step is not None:
        ab = validate_span(span)
        return make_tspan(ab[0], ab[1], step)
    return validate_grid(span)


def _force_function(rhs: SecondOrderRHS, ndof: int) -> Callable[[float, Array, Array], Array]:
    def force(t: float, x: Array, v: Array) -> Array:
        f = np.asarray(rhs(t, x.copy(), v.copy()), dtype=np.float64)
        if f.size == 1:
            return np.full(ndof, float(f.ravel()[0]))
        if f.size != ndof:
            raise ValueError(
                f"Right-hand side must return {ndof} values, got shape {f.shape}"
            )
        return f.reshape(ndof)
    return force


def _mass_divider(M: Array, ndof: int) -> Callable[[Array], Array]:
    """Return ``f -> M^-1 f`` for a scalar or (ndof, ndof) mass."""
    M = np.asarray(M, dtype=np.float64)
    if M.size == 1:
        m = float(M.ravel()[0])
        validate_positive(m, "Mass")
        return lambda f: f / m
    if M.shape != (ndof, ndof):
        raise ValueError(
            f"Mass matrix must be scalar or ({ndof}, {ndof}), got shape {M.shape}"
        )
    return lambda f: np.linalg.solve(M, f)


def _positional_arity(func: Callable) -> int | None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    n = 0
    for p in sig.parameters.values():
        if p.kind == p.VAR_POSITIONAL:
            return None
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            n += 1
    return n


def acceleration_function(
    rhs: SecondOrderRHS,
    ndof: int,
    mass: Any = None,
    mass_state_dependence: str | None = None,
) -> Callable[[float, Array, Array], Array]:
    """
    Resolve the mass option into one ``a(t, x, v)`` closure.

    Parameters
    ----------
    rhs : Callable
        Force function ``rhs(t, x, v)``.
    ndof : int
        Number of degrees of freedom.
    mass : None | float | array-like | Callable
        Mass option, see module docstring.
    mass_state_dependence : str | None
        ``"none"``, ``"weak"``, ``"strong"`` or None to infer from the
        callable's arity.

    Returns
    -------
    Callable
        Acceleration function ``a(t, x, v)`` returning (ndof,).
    """
    force = _force_function(rhs, ndof)

    if mass is None:
        logger.debug("leapfrog: no mass, right-hand side returns accelerations")
        return force

    if not callable(mass):
        divide = _mass_divider(mass, ndof)
        logger.debug("leapfrog: constant mass")
        return lambda t, x, v: divide(force(t, x, v))

    dep = mass_state_dependence
    if dep is None:
        dep = "none" if _positional_arity(mass) == 1 else "weak"

    if dep == "none":
        logger.debug("leapfrog: time-dependent mass M(t)")

        def accel_time(t: float, x: Array, v: Array) -> Array:
            return _mass_divider(mass(t), ndof)(force(t, x, v))
        return accel_time

    logger.debug("leapfrog: state-dependent mass M(t, x, v)")

    def accel_state(t: float, x: Array, v: Array) -> Array:
        return _mass_divider(mass(t, x.copy(), v.copy()), ndof)(force(t, x, v))
    return accel_state
