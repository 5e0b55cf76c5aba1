"""Unit tests for the robot model."""

import numpy as np
import pytest

from legged_preview import config as cfg
from legged_preview.models import FunctionTerrain, RobotModel


class TestRobotModel:
    """Tests for construction and accessors."""

    def test_foot_ids_follow_order(self, robot_model):
        """Foot indices follow the declared feet order."""
        assert [robot_model.foot_id(name) for name in robot_model.feet] == [0, 1, 2, 3]
        assert robot_model.num_feet == 4
        assert robot_model.joint_dof == 12

    def test_get_stance_is_a_copy(self, robot_model):
        """Mutating a returned stance offset does not alter the model."""
        stance = robot_model.get_stance('FL')
        stance[0] = 10.0
        assert np.allclose(robot_model.get_stance('FL'), [0.3, 0.2, -0.5])

    def test_unknown_foot(self, robot_model):
        """Unknown foot names are rejected."""
        with pytest.raises(ValueError):
            robot_model.foot_id('XX')
        with pytest.raises(ValueError, match="XX"):
            robot_model.get_stance('XX')

    def test_missing_stance_entry(self, stance_posture):
        """Every foot must have a stance offset."""
        del stance_posture['RR']
        with pytest.raises(ValueError, match="missing"):
            RobotModel(mass=10.0, gravity=9.81, feet=['FL', 'FR', 'RL', 'RR'], stance_posture=stance_posture)

    def test_unknown_stance_entry(self, stance_posture):
        """Stance offsets of feet the robot does not have are rejected."""
        with pytest.raises(ValueError, match="unknown"):
            RobotModel(mass=10.0, gravity=9.81, feet=['FL', 'FR', 'RL'], stance_posture=stance_posture)

    @pytest.mark.parametrize("mass, gravity", [(0.0, 9.81), (-1.0, 9.81), (10.0, 0.0)])
    def test_invalid_physical_properties(self, stance_posture, mass, gravity):
        with pytest.raises(ValueError):
            RobotModel(mass=mass, gravity=gravity, feet=list(stance_posture), stance_posture=stance_posture)

    def test_duplicated_feet(self, stance_posture):
        with pytest.raises(ValueError, match="Duplicated"):
            RobotModel(mass=10.0, gravity=9.81, feet=['FL', 'FL'], stance_posture={'FL': np.zeros(3)})

    def test_biped(self):
        """Robots with any number of feet are supported."""
        biped = RobotModel(
            mass=40.0,
            gravity=9.81,
            feet=['L', 'R'],
            stance_posture={'L': [0.0, 0.1, -0.8], 'R': [0.0, -0.1, -0.8]},
        )
        assert biped.num_feet == 2
        assert biped.foot_id('R') == 1

    def test_from_config(self):
        """The example robot of the config module is valid."""
        robot = RobotModel.from_config(cfg.robot_params)
        assert robot.feet == ['FL', 'FR', 'RL', 'RR']
        assert robot.mass == cfg.robot_params['mass']
        assert robot.joint_dof == 12


class TestFunctionTerrain:
    """Tests for the function-backed terrain map."""

    def test_elevation(self):
        terrain = FunctionTerrain(lambda x, y: 0.1 * x - 0.2 * y)
        assert terrain.has_elevation_data()
        assert np.isclose(terrain.elevation_at(np.array([1.0, 0.5])), 0.0)
        assert np.isclose(terrain.elevation_at(np.array([2.0, 0.0])), 0.2)

    def test_no_elevation_data(self):
        terrain = FunctionTerrain()
        assert not terrain.has_elevation_data()
        with pytest.raises(RuntimeError):
            terrain.elevation_at(np.zeros(2))
