"""
Spectral Solver Verification Tests.

Chebyshev collocation converges exponentially for smooth problems:
- Exponential decay
- Harmonic oscillator as a first-order system
- Time-varying coefficients
"""

import numpy as np
import pytest

from kinodyn.core.spectral import odespec

SPECTRAL_TOLERANCE = 1e-10


def decay(rate):
    def ode(t):
        return np.array([[-rate]]), np.zeros(1)
    return ode


class TestExponentialDecay:
    """y' = -a y, y(0) = 1  ->  y(t) = exp(-a t)"""

    def test_convergence_with_nodes(self):
        a = 3.0
        errors = []
        for nodes in (4, 6, 8, 10):
            res = odespec(decay(a), [0.0, 1.0], [1.0], {"Nodes": nodes})
            errors.append(np.abs(res.y[:, 0] - np.exp(-a * res.t)).max())

        assert all(e1 > e2 for e1, e2 in zip(errors, errors[1:]))
        # Faster than any fixed algebraic order
        assert errors[-1] < 1e-3 * errors[0]

    def test_default_nodes_accuracy(self):
        a = 3.0
        res = odespec(decay(a), [0.0, 1.0], [1.0])
        assert np.abs(res.y[:, 0] - np.exp(-a * res.t)).max() < SPECTRAL_TOLERANCE

    @pytest.mark.parametrize("ta, tb", [(0.0, 1.0), (2.0, 3.5), (1.0, -1.0)])
    def test_shifted_intervals(self, ta, tb):
        a = 1.5
        res = odespec(decay(a), [ta, tb], [2.0])
        np.testing.assert_allclose(
            res.y[:, 0], 2.0 * np.exp(-a * (res.t - ta)), rtol=SPECTRAL_TOLERANCE
        )


class TestHarmonicOscillator:
    """
    x'' = -w^2 x as y = [x, x'].

    Analytical solution:
        x(t) = x0 cos(w t) + v0 / w sin(w t)
    """

    def test_two_state_system(self):
        w = 3.0
        x0, v0 = 1.0, 0.5
        A = np.array([[0.0, 1.0], [-w ** 2, 0.0]])

        res = odespec(lambda t: (A, np.zeros(2)), [0.0, 2.0], [x0, v0])

        x = x0 * np.cos(w * res.t) + v0 / w * np.sin(w * res.t)
        v = -x0 * w * np.sin(w * res.t) + v0 * np.cos(w * res.t)
        np.testing.assert_allclose(res.y[:, 0], x, atol=1e-8)
        np.testing.assert_allclose(res.y[:, 1], v, atol=1e-8)

    def test_forced_oscillator(self):
        """x'' + x = 1 from rest gives x = 1 - cos t."""
        A = np.array([[0.0, 1.0], [-1.0, 0.0]])
        b = np.array([0.0, 1.0])

        res = odespec(lambda t: (A, b), [0.0, 4.0], [0.0, 0.0])
        np.testing.assert_allclose(res.y[:, 0], 1.0 - np.cos(res.t), atol=SPECTRAL_TOLERANCE)


class TestTimeVarying:

    @staticmethod
    def gaussian(t):
        """y' = -2 t y, vectorized over t."""
        t = np.asarray(t, dtype=float)
        return (-2.0 * t).reshape((1, 1) + t.shape), np.zeros((1,) + t.shape)

    def test_gaussian(self):
        res = odespec(self.gaussian, [0.0, 2.0], [1.0], {"Nodes": 29})
        np.testing.assert_allclose(res.y[:, 0], np.exp(-res.t ** 2), atol=SPECTRAL_TOLERANCE)

    def test_vectorized_and_scalar_agree(self):
        vec = odespec(self.gaussian, [0.0, 2.0], [1.0])
        scalar = odespec(lambda t: self.gaussian(float(t)), [0.0, 2.0], [1.0])
        np.testing.assert_allclose(vec.y, scalar.y, atol=1e-14)
