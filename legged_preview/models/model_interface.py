"""Interface protocols of the collaborators consumed by the preview engine."""

from typing import Dict, List, Protocol, Sequence

import numpy as np


class TerrainMap(Protocol):
    """Protocol of a terrain elevation source used to place footholds."""

    def has_elevation_data(self) -> bool:
        """Return True when elevation queries can be answered."""
        ...

    def elevation_at(self, position_xy: np.ndarray) -> float:
        """Terrain height at a planar world position.

        Args:
            position_xy: (2,) world position [x, y].

        Returns:
            Terrain height (m) in the world frame.
        """
        ...


class WholeBodyKinematics(Protocol):
    """Protocol of the kinematics collaborator used by the whole-body conversions.

    Contact positions, velocities and accelerations are expressed in the base frame.
    """

    def forward_kinematics(
        self,
        base_pos: np.ndarray,
        base_rpy: np.ndarray,
        joint_pos: np.ndarray,
        foot_names: Sequence[str],
    ) -> Dict[str, np.ndarray]:
        """Feet positions w.r.t. the base frame for a joint configuration."""
        ...

    def inverse_kinematics(self, feet_pos: Dict[str, np.ndarray]) -> np.ndarray:
        """Joint positions reaching the given base-frame feet positions."""
        ...

    def joint_velocity(
        self,
        joint_pos: np.ndarray,
        contact_vel: Dict[str, np.ndarray],
        foot_names: Sequence[str],
    ) -> np.ndarray:
        """Joint velocities producing the given feet velocities."""
        ...

    def joint_acceleration(
        self,
        joint_pos: np.ndarray,
        joint_vel: np.ndarray,
        contact_acc: Dict[str, np.ndarray],
        foot_names: Sequence[str],
    ) -> np.ndarray:
        """Joint accelerations producing the given feet accelerations."""
        ...

    def system_com(self, base_pos: np.ndarray, base_rpy: np.ndarray, joint_pos: np.ndarray) -> np.ndarray:
        """CoM position of the whole system in the world frame."""
        ...

    def system_com_rate(
        self,
        base_pos: np.ndarray,
        base_rpy: np.ndarray,
        joint_pos: np.ndarray,
        base_vel: np.ndarray,
        joint_vel: np.ndarray,
    ) -> np.ndarray:
        """CoM velocity of the whole system in the world frame."""
        ...


class WholeBodyDynamics(Protocol):
    """Protocol of the dynamics collaborator used by the whole-body conversions."""

    def center_of_pressure(
        self,
        contact_eff: Dict[str, np.ndarray],
        contact_pos: Dict[str, np.ndarray],
        foot_names: Sequence[str],
    ) -> np.ndarray:
        """Center of pressure (base frame) of the measured contact efforts."""
        ...

    def active_contacts(self, contact_eff: Dict[str, np.ndarray], force_threshold: float) -> List[str]:
        """Names of the feet whose contact effort exceeds the threshold."""
        ...
