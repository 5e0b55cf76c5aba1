"""Shared fixtures and mock collaborators for the preview tests."""

import numpy as np
import pytest

from legged_preview.helpers.frame_transform import to_world
from legged_preview.models import RobotModel

FEET = ['FL', 'FR', 'RL', 'RR']


class MockTerrain:
    """Mock terrain map for testing."""

    def __init__(self, height_func=None):
        """Initialize mock terrain.

        Args:
            height_func: Optional function(x, y) -> z; no elevation data when None
        """
        self.height_func = height_func
        self.queries = []

    def has_elevation_data(self):
        return self.height_func is not None

    def elevation_at(self, position_xy):
        self.queries.append(np.array(position_xy, dtype=float))
        return self.height_func(position_xy[0], position_xy[1])


class MockKinematics:
    """Mock kinematics: one 3-DoF leg per foot whose joints are the foot coordinates."""

    def __init__(self, feet, default_com=None):
        self.feet = list(feet)
        self.default_com = np.zeros(3) if default_com is None else np.asarray(default_com, dtype=float)

    def _stack(self, values, foot_names=None):
        names = self.feet if foot_names is None else foot_names
        return np.concatenate([np.asarray(values.get(name, np.zeros(3)), dtype=float) for name in names])

    def forward_kinematics(self, base_pos, base_rpy, joint_pos, foot_names):
        joint_pos = np.asarray(joint_pos, dtype=float)
        return {name: joint_pos[3 * self.feet.index(name):3 * self.feet.index(name) + 3] for name in foot_names}

    def inverse_kinematics(self, feet_pos):
        return self._stack(feet_pos)

    def joint_velocity(self, joint_pos, contact_vel, foot_names):
        return self._stack(contact_vel)

    def joint_acceleration(self, joint_pos, joint_vel, contact_acc, foot_names):
        return self._stack(contact_acc)

    def system_com(self, base_pos, base_rpy, joint_pos):
        return np.asarray(base_pos, dtype=float) + to_world(self.default_com, base_rpy)

    def system_com_rate(self, base_pos, base_rpy, joint_pos, base_vel, joint_vel):
        return np.asarray(base_vel, dtype=float).copy()


@pytest.fixture
def stance_posture():
    """Nominal feet offsets from the CoM."""
    return {
        'FL': np.array([0.3, 0.2, -0.5]),
        'FR': np.array([0.3, -0.2, -0.5]),
        'RL': np.array([-0.3, 0.2, -0.5]),
        'RR': np.array([-0.3, -0.2, -0.5]),
    }


@pytest.fixture
def robot_model(stance_posture):
    """Quadruped of 10 kg with a zero default CoM offset."""
    return RobotModel(
        mass=10.0,
        gravity=9.81,
        feet=list(FEET),
        stance_posture=stance_posture,
        default_posture=np.zeros(12),
    )


@pytest.fixture
def mock_kinematics():
    return MockKinematics(FEET)


@pytest.fixture
def terrain_factory():
    """Build mock terrains from a height function."""
    return MockTerrain
