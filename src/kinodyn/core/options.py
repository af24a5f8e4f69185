"""
Solver option sets.

Options are plain dataclasses. :func:`parse_options` builds a fresh default
instance on every call and merges user overrides onto it, so no state is
shared between solver calls.

Overrides may be given as an options instance, a mapping, or None. Mapping
keys are matched case-insensitively against the field names and a few
odeset-style aliases (``Nodes``, ``Mass``, ``MStateDependence``).
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

import numpy as np

from kinodyn.utils.validation import validate_node_count, validate_timestep

MASS_STATE_DEPENDENCE = ("none", "weak", "strong")


@dataclass
class SpectralOptions:
    """
    Options of the spectral (Chebyshev collocation) ODE solver.

    Attributes
    ----------
    nodes : int
        Number of Chebyshev-Lobatto collocation nodes. Default 25.
    """

    nodes: int = 25

    def __post_init__(self):
        self.nodes = validate_node_count(self.nodes)


@dataclass
class LeapfrogOptions:
    """
    Options of the leapfrog integrator.

    Attributes
    ----------
    mass : float | array-like | Callable | None
        Mass of the system. None means the right-hand side already returns
        accelerations. A scalar or (n, n) matrix is constant. A callable
        is ``M(t)`` or ``M(t, x, v)``, see ``mass_state_dependence``.
    mass_state_dependence : str | None
        ``"none"`` for ``M(t)``, ``"weak"``/``"strong"`` for ``M(t, x, v)``.
        None infers it from the callable's number of positional parameters.
    step : float | None
        Step size used when ``tspan`` is a two-element ``[t0, tf]`` span.
    output_fcn : Callable | None
        Called as ``output_fcn(t, x, v)`` after every step.
    """

    mass: Any = None
    mass_state_dependence: str | None = None
    step: float | None = None
    output_fcn: Callable[[float, np.ndarray, np.ndarray], None] | None = None

    def __post_init__(self):
        if self.mass_state_dependence is not None:
            dep = str(self.mass_state_dependence).lower()
            if dep not in MASS_STATE_DEPENDENCE:
                raise ValueError(
                    f"mass_state_dependence must be one of {MASS_STATE_DEPENDENCE}, "
                    f"got '{self.mass_state_dependence}'"
                )
            self.mass_state_dependence = dep
        if self.step is not None:
            validate_timestep(self.step)
            self.step = float(self.step)
        if self.output_fcn is not None and not callable(self.output_fcn):
            raise ValueError("output_fcn must be callable")


# odeset-style names
_ALIASES = {
    "mstatedependence": "mass_state_dependence",
    "outputfcn": "output_fcn",
}

OptionsT = TypeVar("OptionsT", SpectralOptions, LeapfrogOptions)


def _normalize_key(key: str, fields: set[str]) -> str:
    k = str(key).lower()
    if k in fields:
        return k
    k = _ALIASES.get(k.replace("_", ""), k)
    if k not in fields:
        raise ValueError(f"Unknown option '{key}'. Valid options: {sorted(fields)}")
    return k


def parse_options(cls: type[OptionsT], options: OptionsT | Mapping[str, Any] | None = None) -> OptionsT:
    """
    Merge user-defined options with defaults.

    Parameters
    ----------
    cls : type
        Options class, ``SpectralOptions`` or ``LeapfrogOptions``.
    options : instance | Mapping | None
        User overrides.

    Returns
    -------
    instance of cls
        New options object; the input is never modified.

    Raises
    ------
    ValueError
        If an option name is unknown or a value is invalid.
    """
    if options is None:
        return cls()
    if isinstance(options, cls):
        return dataclasses.replace(options)
    if not isinstance(options, Mapping):
        raise ValueError(
            f"Options must be {cls.__name__}, a mapping or None, got {type(options).__name__}"
        )

    fields = {f.name for f in dataclasses.fields(cls)}
    overrides = {_normalize_key(k, fields): v for k, v in options.items()}
    return cls(**overrides)
