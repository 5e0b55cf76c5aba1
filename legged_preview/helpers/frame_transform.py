"""Frame conversions between the world frame and the body (CoM) frame."""

import numpy as np


def rotation_matrix_from_rpy(rpy: np.ndarray) -> np.ndarray:
    """Compute the body-to-world rotation matrix of a roll-pitch-yaw orientation.

    The rotation follows the ZYX convention, i.e. R = Rz(yaw) * Ry(pitch) * Rx(roll).

    Args:
        rpy: (3,) orientation [roll, pitch, yaw] in radians.

    Returns:
        rotation: (3, 3) rotation matrix mapping body vectors to the world frame.
    """
    roll, pitch, yaw = np.asarray(rpy, dtype=float)[:3]
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)

    return np.array([
        [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
        [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
        [-sp, cp * sr, cp * cr],
    ])


def to_world(vector: np.ndarray, rpy: np.ndarray) -> np.ndarray:
    """Express a body-frame vector in the world frame.

    Args:
        vector: (3,) vector in the body frame.
        rpy: (3,) body orientation [roll, pitch, yaw] w.r.t. the world.

    Returns:
        (3,) vector in the world frame.
    """
    return rotation_matrix_from_rpy(rpy) @ np.asarray(vector, dtype=float)


def to_body(vector: np.ndarray, rpy: np.ndarray) -> np.ndarray:
    """Express a world-frame vector in the body frame.

    Args:
        vector: (3,) vector in the world frame.
        rpy: (3,) body orientation [roll, pitch, yaw] w.r.t. the world.

    Returns:
        (3,) vector in the body frame.
    """
    return rotation_matrix_from_rpy(rpy).T @ np.asarray(vector, dtype=float)
