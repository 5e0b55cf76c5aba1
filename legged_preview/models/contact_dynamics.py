"""Point-foot contact dynamics: center of pressure and active contacts."""

from typing import Dict, List, Sequence

import numpy as np


def _contact_force(effort: np.ndarray) -> np.ndarray:
    """Linear force of a contact effort.

    Efforts are either (3,) forces or (6,) wrenches ordered as [moments, forces].
    """
    effort = np.asarray(effort, dtype=float).ravel()
    if effort.shape == (6,):
        return effort[3:]
    if effort.shape == (3,):
        return effort
    raise ValueError(f"Contact effort must have 3 or 6 components, got {effort.shape[0]}")


class ContactDynamics:
    """Dynamics collaborator for robots with point feet.

    The CoP is the normal-force weighted mean of the contact positions; a foot is
    active when its normal force exceeds the force threshold. Normal forces are
    the z components of the contact forces in the base frame.
    """

    def center_of_pressure(
        self,
        contact_eff: Dict[str, np.ndarray],
        contact_pos: Dict[str, np.ndarray],
        foot_names: Sequence[str],
    ) -> np.ndarray:
        """Center of pressure in the base frame.

        Returns the zero vector when no foot pushes on the ground.
        """
        weighted_sum = np.zeros(3)
        total_normal = 0.0
        for name in foot_names:
            if name not in contact_eff or name not in contact_pos:
                continue
            normal = _contact_force(contact_eff[name])[2]
            if normal <= 0.0:
                continue
            weighted_sum += normal * np.asarray(contact_pos[name], dtype=float)
            total_normal += normal

        if total_normal == 0.0:
            return np.zeros(3)
        return weighted_sum / total_normal

    def active_contacts(self, contact_eff: Dict[str, np.ndarray], force_threshold: float) -> List[str]:
        return [name for name, effort in contact_eff.items() if _contact_force(effort)[2] > force_threshold]
