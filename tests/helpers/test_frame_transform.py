"""Unit tests for the world/body frame transforms."""

import numpy as np

from legged_preview.helpers.frame_transform import rotation_matrix_from_rpy, to_body, to_world


class TestRotationMatrix:
    """Tests for the roll-pitch-yaw rotation matrix."""

    def test_identity(self):
        """Zero orientation gives the identity."""
        assert np.allclose(rotation_matrix_from_rpy(np.zeros(3)), np.eye(3))

    def test_pure_yaw(self):
        """A yaw of 90 deg maps the body x axis onto the world y axis."""
        rotation = rotation_matrix_from_rpy(np.array([0.0, 0.0, np.pi / 2]))
        assert np.allclose(rotation @ np.array([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])

    def test_orthonormal(self):
        """Rotation matrices are orthonormal with unit determinant."""
        rotation = rotation_matrix_from_rpy(np.array([0.3, -0.2, 1.1]))
        assert np.allclose(rotation.T @ rotation, np.eye(3))
        assert np.isclose(np.linalg.det(rotation), 1.0)

    def test_zyx_order(self):
        """The rotation composes yaw after pitch after roll."""
        roll, pitch, yaw = 0.4, 0.2, -0.7
        rx = rotation_matrix_from_rpy(np.array([roll, 0.0, 0.0]))
        ry = rotation_matrix_from_rpy(np.array([0.0, pitch, 0.0]))
        rz = rotation_matrix_from_rpy(np.array([0.0, 0.0, yaw]))
        assert np.allclose(rotation_matrix_from_rpy(np.array([roll, pitch, yaw])), rz @ ry @ rx)


class TestFrameConversion:
    """Tests for to_world / to_body."""

    def test_inverse_pair(self):
        """to_body undoes to_world."""
        rpy = np.array([0.1, 0.2, 0.3])
        vector = np.array([0.5, -0.4, 1.2])
        assert np.allclose(to_body(to_world(vector, rpy), rpy), vector)

    def test_heading_rotation(self):
        """A forward body vector points sideways after a quarter turn."""
        rpy = np.array([0.0, 0.0, np.pi / 2])
        assert np.allclose(to_world(np.array([0.3, 0.0, -0.5]), rpy), [0.0, 0.3, -0.5])
        assert np.allclose(to_body(np.array([0.0, 0.3, -0.5]), rpy), [0.3, 0.0, -0.5])
