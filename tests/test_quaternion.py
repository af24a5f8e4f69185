import warnings

import numpy as np
import pytest
from scipy.linalg import block_diag
from scipy.spatial.transform import Rotation as ScR

from kinodyn.algebra.quaternion import (
    IDENTITY,
    quat2rotm,
    quat2rotmjac,
    quatmat,
    quatmultiply,
    quatvalid,
)


def _to_scalar_last(q):
    return np.roll(q, -1, axis=0)


class TestQuatValid:

    def test_single_quaternion_becomes_column(self):
        qv, n = quatvalid([1.0, 0.0, 0.0, 0.0])
        assert qv.shape == (4, 1)
        assert n == 1

    def test_batch(self, unit_quaternions):
        qv, n = quatvalid(unit_quaternions)
        assert qv.shape == (4, 5)
        assert n == 5

    @pytest.mark.parametrize("shape", [(3,), (3, 2), (4, 2, 2)])
    def test_wrong_shape_raises(self, shape):
        with pytest.raises(ValueError):
            quatvalid(np.ones(shape))

    def test_non_unit_warns(self):
        with pytest.warns(RuntimeWarning, match="not normalized"):
            qv, _ = quatvalid([2.0, 0.0, 0.0, 0.0])
        # Not rescaled
        assert qv[0, 0] == 2.0


class TestQuatMat:

    def test_identity_quaternion(self):
        Q, Qc = quatmat(IDENTITY)
        np.testing.assert_array_equal(Q, np.eye(4))
        np.testing.assert_array_equal(Qc, np.eye(4))

    def test_structure(self):
        q = np.array([0.5, 0.5, -0.5, 0.5])
        Q, Qc = quatmat(q)

        assert Q[0, 0] == q[0]
        np.testing.assert_array_equal(Q[0, 1:], -q[1:])
        np.testing.assert_array_equal(Q[1:, 0], q[1:])
        np.testing.assert_array_equal(Q[0], Qc[0])
        np.testing.assert_array_equal(Q[:, 0], Qc[:, 0])
        # Blocks differ only by the sign of the skew part
        np.testing.assert_allclose(Q[1:, 1:] + Qc[1:, 1:], 2.0 * q[0] * np.eye(3))

    def test_batched_shapes(self, unit_quaternions):
        Q, Qc = quatmat(unit_quaternions)
        assert Q.shape == (4, 4, 5)
        assert Qc.shape == (4, 4, 5)

        for k in range(5):
            Qk, Qck = quatmat(unit_quaternions[:, k])
            np.testing.assert_allclose(Q[:, :, k], Qk)
            np.testing.assert_allclose(Qc[:, :, k], Qck)

    def test_orthogonal_scaled_by_norm(self, rng):
        q = rng.normal(size=4)
        n2 = q @ q
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            Q, Qc = quatmat(q)

        np.testing.assert_allclose(Q @ Q.T, n2 * np.eye(4), atol=1e-12)
        np.testing.assert_allclose(Qc @ Qc.T, n2 * np.eye(4), atol=1e-12)

    def test_sandwich_product_embeds_rotation(self, unit_quaternions):
        """Q(q) Qc(q)^T maps p onto q p q*, i.e. diag(1, R(q))."""
        for q in unit_quaternions.T:
            Q, Qc = quatmat(q)
            expected = block_diag(1.0, quat2rotm(q))
            np.testing.assert_allclose(Q @ Qc.T, expected, atol=1e-12)

    def test_left_and_right_products_agree(self, unit_quaternions):
        p = unit_quaternions[:, 0]
        r = unit_quaternions[:, 1]
        _, Qc_r = quatmat(r)

        np.testing.assert_allclose(quatmultiply(p, r), Qc_r @ p, atol=1e-14)

    def test_hamilton_product_matches_scipy(self, unit_quaternions):
        p = unit_quaternions[:, 2]
        r = unit_quaternions[:, 3]
        pr = quatmultiply(p, r)

        expected = (ScR.from_quat(_to_scalar_last(p)) * ScR.from_quat(_to_scalar_last(r))).as_matrix()
        np.testing.assert_allclose(quat2rotm(pr), expected, atol=1e-12)

    def test_quatmultiply_batched(self, unit_quaternions):
        pr = quatmultiply(unit_quaternions, unit_quaternions[:, ::-1])
        assert pr.shape == (4, 5)
        np.testing.assert_allclose(
            pr[:, 1], quatmultiply(unit_quaternions[:, 1], unit_quaternions[:, 3])
        )


class TestQuat2Rotm:

    def test_matches_scipy(self, unit_quaternions):
        R = quat2rotm(unit_quaternions)
        assert R.shape == (3, 3, 5)

        for k in range(5):
            expected = ScR.from_quat(_to_scalar_last(unit_quaternions[:, k])).as_matrix()
            np.testing.assert_allclose(R[:, :, k], expected, atol=1e-12)

    def test_single(self):
        np.testing.assert_allclose(quat2rotm(IDENTITY), np.eye(3))


class TestQuat2RotmJac:

    @staticmethod
    def _finite_difference(q, eps=1e-6):
        J = np.zeros((3, 3, 4))
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            for k in range(4):
                dq = np.zeros(4)
                dq[k] = eps
                J[:, :, k] = (quat2rotm(q + dq) - quat2rotm(q - dq)) / (2.0 * eps)
        return J

    def test_shape(self, unit_quaternions):
        assert quat2rotmjac(unit_quaternions[:, 0]).shape == (3, 3, 4)
        assert quat2rotmjac(unit_quaternions).shape == (3, 3, 4, 5)

    def test_matches_finite_differences(self, unit_quaternions):
        for q in unit_quaternions.T:
            np.testing.assert_allclose(
                quat2rotmjac(q), self._finite_difference(q), atol=1e-8
            )

    def test_batch_matches_single(self, unit_quaternions):
        J = quat2rotmjac(unit_quaternions)
        for k in range(5):
            np.testing.assert_allclose(J[..., k], quat2rotmjac(unit_quaternions[:, k]))

    def test_identity(self):
        J = quat2rotmjac(IDENTITY)
        np.testing.assert_array_equal(J[:, :, 0], 2.0 * np.eye(3))

    def test_zero_quaternion_gives_zero_jacobian(self):
        with pytest.warns(RuntimeWarning):
            J = quat2rotmjac(np.zeros(4))
        assert np.all(J == 0.0)

    def test_nan_entries_vanish(self):
        J = quat2rotmjac(np.array([np.nan, 0.0, 0.0, 0.0]))
        assert not np.any(np.isnan(J))
        assert np.all(J == 0.0)

    def test_tiny_entries_vanish(self):
        J = quat2rotmjac(np.array([1.0, 1e-17, 0.0, 0.0]))
        # 2 * 1e-17 is below machine epsilon
        assert J[2, 1, 0] == 0.0
        assert J[1, 2, 0] == 0.0
        assert J[0, 0, 0] == 2.0
