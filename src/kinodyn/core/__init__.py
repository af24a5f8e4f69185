from .chebyshev import chebdiffmtx, chebpts2
from .leapfrog import Trajectory, leapfrog
from .options import LeapfrogOptions, SpectralOptions, parse_options
from .spectral import OdespecResult, odespec
