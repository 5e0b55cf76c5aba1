"""Robot model accessors needed by the preview engine."""

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np


@dataclass
class RobotModel:
    """Mass and kinematic parameters of a legged robot.

    Attributes:
        mass: Total mass of the robot (kg).
        gravity: Gravity magnitude (m/s^2).
        feet: Names of the feet, in a fixed order.
        stance_posture: Dict mapping every foot name to its (3,) nominal offset from
                        the CoM in the default posture (CoM frame).
        default_com: (3,) CoM position w.r.t. the base in the default posture.
        default_posture: Default joint positions.
    """
    mass: float
    gravity: float
    feet: List[str]
    stance_posture: Dict[str, np.ndarray]
    default_com: np.ndarray = field(default_factory=lambda: np.zeros(3))
    default_posture: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self):
        """Validate the model; missing or unknown stance entries are errors."""
        if self.mass <= 0.0:
            raise ValueError(f"Robot mass must be positive, got {self.mass}")
        if self.gravity <= 0.0:
            raise ValueError(f"Gravity magnitude must be positive, got {self.gravity}")
        if len(self.feet) == 0:
            raise ValueError("Robot model requires at least one foot")
        if len(set(self.feet)) != len(self.feet):
            raise ValueError(f"Duplicated foot names: {self.feet}")

        missing = [name for name in self.feet if name not in self.stance_posture]
        if missing:
            raise ValueError(f"Stance posture is missing the feet {missing}")
        unknown = [name for name in self.stance_posture if name not in self.feet]
        if unknown:
            raise ValueError(f"Stance posture names unknown feet {unknown}")

        self.feet = list(self.feet)
        self.stance_posture = {
            name: np.asarray(self.stance_posture[name], dtype=float).reshape(3) for name in self.feet
        }
        self.default_com = np.asarray(self.default_com, dtype=float).reshape(3)
        self.default_posture = np.asarray(self.default_posture, dtype=float).ravel()
        self._foot_ids = {name: idx for idx, name in enumerate(self.feet)}

    @classmethod
    def from_config(cls, robot_params: Dict) -> 'RobotModel':
        """Build the model from a ``config.robot_params``-like dict."""
        return cls(
            mass=robot_params['mass'],
            gravity=robot_params['gravity'],
            feet=list(robot_params['feet']),
            stance_posture=robot_params['stance_posture'],
            default_com=robot_params.get('default_com', np.zeros(3)),
            default_posture=robot_params.get('default_posture', np.zeros(0)),
        )

    @property
    def num_feet(self) -> int:
        return len(self.feet)

    @property
    def joint_dof(self) -> int:
        return len(self.default_posture)

    def foot_id(self, name: str) -> int:
        """Index of a foot in ``feet``."""
        try:
            return self._foot_ids[name]
        except KeyError:
            raise ValueError(f"Unknown foot '{name}', the robot feet are {self.feet}") from None

    def get_stance(self, name: str) -> np.ndarray:
        """Nominal stance offset of a foot w.r.t. the CoM."""
        try:
            return self.stance_posture[name].copy()
        except KeyError:
            raise ValueError(f"Unknown foot '{name}', the robot feet are {self.feet}") from None
