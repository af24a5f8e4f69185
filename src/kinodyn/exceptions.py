"""
Error types raised by the spectral ODE solver.

Every error is a ``ValueError`` so callers that only care about bad input can
catch the base class. The ``identifier`` attribute gives a stable, greppable
name for each failure kind.
"""
from __future__ import annotations


class OdespecError(ValueError):
    """Base class for pre-flight failures of :func:`kinodyn.core.spectral.odespec`."""

    identifier = "ODESPEC:Error"

    def __init__(self, message: str) -> None:
        super().__init__(f"[{self.identifier}] {message}")
        self.message = message


class ODENotFoundError(OdespecError):
    """A named ODE reference could not be resolved to a callable."""

    identifier = "ODESPEC:ODENotFound"


class InvalidNArginError(OdespecError):
    """The ODE callable does not take exactly one argument (time)."""

    identifier = "ODESPEC:InvalidNArgin"


class InvalidNArgoutError(OdespecError):
    """The ODE callable does not return the pair ``(A, b)``."""

    identifier = "ODESPEC:InvalidNArgout"


class ODEEvaluationError(OdespecError):
    """The ODE callable raised while being probed at the initial node."""

    identifier = "ODESPEC:ErrorEvaluatingODE"


class InvalidSizeAError(OdespecError):
    """The system matrix ``A`` does not have shape ``(ny, ny)``."""

    identifier = "ODESPEC:InvalidSizeA"


class InvalidSizeBError(OdespecError):
    """The forcing vector ``b`` does not hold ``ny`` entries."""

    identifier = "ODESPEC:InvalidSizeB"


__all__ = [
    "OdespecError",
    "ODENotFoundError",
    "InvalidNArginError",
    "InvalidNArgoutError",
    "ODEEvaluationError",
    "InvalidSizeAError",
    "InvalidSizeBError",
]
