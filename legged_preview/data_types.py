"""Data types of the reduced-body preview."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

import numpy as np

from legged_preview.exceptions import MalformedControlError


def _zeros3() -> np.ndarray:
    return np.zeros(3)


class PhaseType(Enum):
    """Type of a locomotion phase."""
    STANCE = 'stance'
    FLIGHT = 'flight'


@dataclass
class Phase:
    """Contact phase of a preview control sequence.

    Build it with ``Phase.stance(...)`` or ``Phase.flight(...)`` so that the
    phase type is decided once, when the control is defined.

    Attributes:
        type: STANCE or FLIGHT.
        cop_shift: (2,) planar shift of the CoP over the phase. Only for STANCE.
        foot_shifts: Dict mapping swinging foot names to their (2,) planar foothold
                     shift w.r.t. the nominal stance posture.
    """
    type: PhaseType
    cop_shift: Optional[np.ndarray] = None
    foot_shifts: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        if self.type == PhaseType.STANCE:
            if self.cop_shift is None:
                raise MalformedControlError("stance phase requires a cop_shift", field='cop_shift')
            self.cop_shift = np.asarray(self.cop_shift, dtype=float)
            if self.cop_shift.shape != (2,):
                raise MalformedControlError(
                    f"cop_shift must be a 2-vector, got shape {self.cop_shift.shape}", field='cop_shift'
                )
        elif self.cop_shift is not None:
            raise MalformedControlError("flight phase cannot carry a cop_shift", field='cop_shift')

        shifts = {}
        for name, shift in self.foot_shifts.items():
            shift = np.asarray(shift, dtype=float)
            if shift.shape != (2,):
                raise MalformedControlError(f"foot shift must be a 2-vector, got shape {shift.shape}", field=name)
            shifts[name] = shift
        self.foot_shifts = shifts

    @classmethod
    def stance(cls, cop_shift, foot_shifts: Optional[Dict[str, np.ndarray]] = None) -> 'Phase':
        return cls(PhaseType.STANCE, cop_shift, dict(foot_shifts or {}))

    @classmethod
    def flight(cls, foot_shifts: Optional[Dict[str, np.ndarray]] = None) -> 'Phase':
        return cls(PhaseType.FLIGHT, None, dict(foot_shifts or {}))

    @property
    def is_stance(self) -> bool:
        return self.type == PhaseType.STANCE

    def swing_feet(self, feet_names: Iterable[str]) -> List[str]:
        """Feet in swing during this phase, in the order of ``feet_names``.

        Every foot swings in a flight phase.
        """
        if self.type == PhaseType.FLIGHT:
            return list(feet_names)
        return [name for name in feet_names if name in self.foot_shifts]

    def get_foot_shift(self, name: str) -> np.ndarray:
        """Planar foothold shift of a foot, zero when none was given."""
        shift = self.foot_shifts.get(name)
        if shift is None:
            return np.zeros(2)
        return shift.copy()


@dataclass
class PreviewParams:
    """Parameters of one preview phase.

    Attributes:
        duration: Phase duration (s), strictly positive.
        phase: Contact phase definition.
        head_acc: Heading (yaw) acceleration applied during a stance phase (rad/s^2).
    """
    duration: float
    phase: Phase
    head_acc: float = 0.0

    def __post_init__(self):
        if not self.duration > 0.0:
            raise MalformedControlError(f"duration must be positive, got {self.duration}", field='duration')
        self.duration = float(self.duration)
        self.head_acc = float(self.head_acc)


@dataclass
class PreviewControl:
    """Ordered multi-phase preview plan."""
    params: List[PreviewParams] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.params)

    def __iter__(self):
        return iter(self.params)

    def __getitem__(self, index: int) -> PreviewParams:
        return self.params[index]


@dataclass
class ReducedBodyState:
    """CoM-and-feet centric state of the robot.

    Attributes:
        time: Time of the state (s).
        com_pos, com_vel, com_acc: (3,) CoM motion in the world frame.
        angular_pos: (3,) body orientation [roll, pitch, yaw] w.r.t. the world.
        angular_vel, angular_acc: (3,) roll-pitch-yaw rates.
        cop: (3,) center of pressure in the world frame.
        foot_pos, foot_vel, foot_acc: Dicts mapping foot names to (3,) foot motion
                                      w.r.t. the CoM frame.
        support_region: Dict mapping the names of the feet bearing load to their
                        (3,) positions in the world frame.
    """
    time: float = 0.0
    com_pos: np.ndarray = field(default_factory=_zeros3)
    com_vel: np.ndarray = field(default_factory=_zeros3)
    com_acc: np.ndarray = field(default_factory=_zeros3)
    angular_pos: np.ndarray = field(default_factory=_zeros3)
    angular_vel: np.ndarray = field(default_factory=_zeros3)
    angular_acc: np.ndarray = field(default_factory=_zeros3)
    cop: np.ndarray = field(default_factory=_zeros3)
    foot_pos: Dict[str, np.ndarray] = field(default_factory=dict)
    foot_vel: Dict[str, np.ndarray] = field(default_factory=dict)
    foot_acc: Dict[str, np.ndarray] = field(default_factory=dict)
    support_region: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        for name in ('com_pos', 'com_vel', 'com_acc', 'angular_pos', 'angular_vel', 'angular_acc', 'cop'):
            setattr(self, name, np.asarray(getattr(self, name), dtype=float).reshape(3))

    def get_rpy_w(self) -> np.ndarray:
        return self.angular_pos

    def copy(self) -> 'ReducedBodyState':
        return copy.deepcopy(self)


class ReducedBodyTrajectory(list):
    """Time-ordered list of ReducedBodyState samples."""

    def times(self) -> np.ndarray:
        return np.array([state.time for state in self])

    def com_positions(self) -> np.ndarray:
        return np.array([state.com_pos for state in self]).reshape(-1, 3)

    def foot_positions(self, name: str) -> np.ndarray:
        return np.array([state.foot_pos[name] for state in self if name in state.foot_pos]).reshape(-1, 3)


@dataclass
class StepParameters:
    """Swing definition of a single foot.

    Attributes:
        duration: Swing duration (s).
        step_height: Clearance of the swing apex (m).
    """
    duration: float
    step_height: float


@dataclass
class SwingParams:
    """Swing set of a phase.

    Attributes:
        duration: Swing duration (s), the duration of the phase.
        feet_shift: Dict mapping swinging foot names to the (3,) planar+vertical
                    shift from their stance offset to the target foothold (CoM frame).
    """
    duration: float
    feet_shift: Dict[str, np.ndarray] = field(default_factory=dict)


@dataclass
class WholeBodyState:
    """Full floating-base state of the robot.

    Attributes:
        time: Time of the state (s).
        base_pos, base_vel, base_acc: (3,) base linear motion in the world frame.
        base_rpy, base_ang_vel, base_ang_acc: (3,) base orientation and its rates.
        joint_pos, joint_vel, joint_acc, joint_eff: Joint-space vectors.
        contact_pos, contact_vel, contact_acc: Dicts mapping foot names to (3,) foot
                                               motion w.r.t. the base frame.
        contact_eff: Dict mapping foot names to (3,) contact forces (base frame).
        contact_condition: Dict mapping foot names to their active-contact flag.
    """
    time: float = 0.0
    base_pos: np.ndarray = field(default_factory=_zeros3)
    base_vel: np.ndarray = field(default_factory=_zeros3)
    base_acc: np.ndarray = field(default_factory=_zeros3)
    base_rpy: np.ndarray = field(default_factory=_zeros3)
    base_ang_vel: np.ndarray = field(default_factory=_zeros3)
    base_ang_acc: np.ndarray = field(default_factory=_zeros3)
    joint_pos: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_vel: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_acc: np.ndarray = field(default_factory=lambda: np.zeros(0))
    joint_eff: np.ndarray = field(default_factory=lambda: np.zeros(0))
    contact_pos: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_vel: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_acc: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_eff: Dict[str, np.ndarray] = field(default_factory=dict)
    contact_condition: Dict[str, bool] = field(default_factory=dict)
