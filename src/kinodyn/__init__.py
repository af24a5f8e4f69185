"""
kinodyn - ODE integrators and kinematics algebra for mechanical systems.

Core Components
---------------
odespec : Spectral (Chebyshev collocation) solver for linear first-order ODEs
leapfrog : Fixed-step leapfrog integrator for second-order systems
algo_structure_matrix : Structure matrix of a 3R3T cable robot

Kinematics Algebra
------------------
quatmat : Quaternion matrix and conjugate quaternion matrix
quat2rotm : Rotation matrix of a quaternion
quat2rotmjac : Jacobian of the rotation matrix w.r.t. the quaternion
mnormcol : Column normalization

Examples
--------
>>> from kinodyn import odespec, leapfrog, tspan
>>> from kinodyn import quatmat, algo_structure_matrix
"""

__version__ = "0.1.0"

# Kinematics algebra
from kinodyn.algebra import (
    mnormcol,
    mnormrow,
    quat2rotm,
    quat2rotmjac,
    quatmat,
    quatmultiply,
    skew,
)

# Solvers
from kinodyn.core.leapfrog import Trajectory, leapfrog
from kinodyn.core.options import LeapfrogOptions, SpectralOptions
from kinodyn.core.spectral import OdespecResult, odespec
from kinodyn.dynamics.structure import StructureMatrix, algo_structure_matrix

# Errors
from kinodyn.exceptions import (
    InvalidNArginError,
    InvalidNArgoutError,
    InvalidSizeAError,
    InvalidSizeBError,
    ODEEvaluationError,
    ODENotFoundError,
    OdespecError,
)

# Logging
from kinodyn.logger import TrajectoryLogger, setup_logging
from kinodyn.utils.timegrid import tspan

__all__ = [
    # Version
    "__version__",
    # Solvers
    "odespec",
    "OdespecResult",
    "SpectralOptions",
    "leapfrog",
    "Trajectory",
    "LeapfrogOptions",
    "tspan",
    # Kinematics
    "algo_structure_matrix",
    "StructureMatrix",
    "quatmat",
    "quatmultiply",
    "quat2rotm",
    "quat2rotmjac",
    "mnormcol",
    "mnormrow",
    "skew",
    # Errors
    "OdespecError",
    "ODENotFoundError",
    "InvalidNArginError",
    "InvalidNArgoutError",
    "ODEEvaluationError",
    "InvalidSizeAError",
    "InvalidSizeBError",
    # Logging
    "TrajectoryLogger",
    "setup_logging",
]
