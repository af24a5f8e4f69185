"""
Verification Test Suite for kinodyn.

These tests compare solver results against analytical solutions
to validate the integrators and the cable statics.

Test Categories:
- Kinematic: Free fall, constant velocity, harmonic motion
- Energy: Long-run energy behaviour of the leapfrog scheme
- Spectral: Convergence of Chebyshev collocation
- Statics: Cable tension distribution through the structure matrix
"""

import numpy as np
import pytest


# -----------------------------------------------------------------------------
# Common Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def gravity():
    """Standard Earth gravity vector."""
    return np.array([0.0, 0.0, -9.81])


@pytest.fixture
def oscillator():
    """Undamped spring-mass: m=2kg, k=8N/m, so omega=2rad/s."""
    m = 2.0
    k = 8.0

    def energy(x, v):
        # x, v of shape (nt, ndof)
        return 0.5 * m * np.sum(v ** 2, axis=1) + 0.5 * k * np.sum(x ** 2, axis=1)

    return {
        "mass": m,
        "stiffness": k,
        "omega": np.sqrt(k / m),
        "force": lambda t, x, v: -k * x,
        "energy": energy,
    }
