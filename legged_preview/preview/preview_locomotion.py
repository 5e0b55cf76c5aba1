"""Multi-phase reduced-body preview of legged locomotion.

The preview walks a sequence of contact phases. Stance phases follow the
cart-table model, flight phases follow the projectile equations of motion, and
swinging feet follow quintic swing trajectories. Between phases the support
region is updated with the footholds of the feet that finished their swing.
"""

import warnings
from dataclasses import dataclass, field, replace
from os import PathLike
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from legged_preview import config as cfg
from legged_preview.data_types import (
    PreviewControl,
    PreviewParams,
    ReducedBodyState,
    ReducedBodyTrajectory,
    StepParameters,
    SwingParams,
    WholeBodyState,
)
from legged_preview.exceptions import MalformedControlError, UninitializedEngineError
from legged_preview.helpers.frame_transform import rotation_matrix_from_rpy, to_body, to_world
from legged_preview.helpers.swing_generators import SwingTrajectoryGenerator
from legged_preview.models.cart_table_model import CartTableControlParams, CartTableModel
from legged_preview.models.model_interface import TerrainMap, WholeBodyDynamics, WholeBodyKinematics
from legged_preview.models.robot_model import RobotModel
from legged_preview.preview.sequence_reader import read_preview_sequence


@dataclass
class PreviewContext:
    """Mutable state of a single preview call.

    Attributes:
        initial_state: State given to the call; reference of the CoM height drift.
        cart_table: Cart-table model of the call. Its pendulum height is the one of the
                    latest stance phase.
        phase_state: State at the beginning of the current phase.
        swing_params: Swing set of the current phase.
        feet_spline_generator: Swing generators of the feet swinging in the current phase.
    """
    initial_state: ReducedBodyState
    cart_table: CartTableModel
    phase_state: Optional[ReducedBodyState] = None
    swing_params: Optional[SwingParams] = None
    feet_spline_generator: Dict[str, SwingTrajectoryGenerator] = field(default_factory=dict)


class PreviewLocomotion:
    """Reduced-body preview engine.

    The engine only holds configuration: the robot model, its collaborators and the
    preview parameters. Every call builds its own PreviewContext, so one configured
    engine can serve several callers as long as the configuration is not changed
    meanwhile.
    """

    def __init__(self) -> None:
        self.robot_model: Optional[RobotModel] = None
        self.kinematics: Optional[WholeBodyKinematics] = None
        self.dynamics: Optional[WholeBodyDynamics] = None
        self.terrain: Optional[TerrainMap] = None

        self.sample_time = cfg.preview_params.get('sample_time', 0.001)
        self.step_height = cfg.preview_params.get('step_height', 0.1)
        self.force_threshold = cfg.preview_params.get('force_threshold', 0.0)
        self.min_pendulum_height = cfg.preview_params.get('min_pendulum_height', 1e-3)

    @classmethod
    def from_robot_model(
        cls,
        robot_model: RobotModel,
        kinematics: Optional[WholeBodyKinematics] = None,
        dynamics: Optional[WholeBodyDynamics] = None,
        terrain: Optional[TerrainMap] = None,
    ) -> 'PreviewLocomotion':
        """Build a ready-to-use engine."""
        engine = cls()
        engine.reset_from_robot_model(robot_model, kinematics, dynamics)
        engine.set_terrain_map(terrain)
        return engine

    def reset_from_robot_model(
        self,
        robot_model: RobotModel,
        kinematics: Optional[WholeBodyKinematics] = None,
        dynamics: Optional[WholeBodyDynamics] = None,
    ) -> None:
        """Set the robot model and the whole-body collaborators.

        With a kinematics collaborator and a default posture, the stance posture is
        recomputed as the feet positions of the default posture w.r.t. the system CoM;
        otherwise the stance posture of ``robot_model`` is used as given.

        Args:
            robot_model: Mass, gravity, feet and stance posture of the robot.
            kinematics: Kinematics collaborator, needed by the whole-body conversions.
            dynamics: Dynamics collaborator, needed by ``from_whole_body_state``.
        """
        if not isinstance(robot_model, RobotModel):
            raise TypeError(f"Expected a RobotModel, got {type(robot_model).__name__}")
        if kinematics is not None and robot_model.joint_dof > 0:
            robot_model = replace(robot_model, stance_posture=self._default_stance(robot_model, kinematics))
        self.robot_model = robot_model
        self.kinematics = kinematics
        self.dynamics = dynamics

    @staticmethod
    def _default_stance(robot_model: RobotModel, kinematics: WholeBodyKinematics) -> Dict[str, np.ndarray]:
        """Feet offsets from the system CoM in the default posture, with the base at the origin."""
        base_pos = np.zeros(3)
        base_rpy = np.zeros(3)
        feet_pos = kinematics.forward_kinematics(base_pos, base_rpy, robot_model.default_posture, robot_model.feet)
        com_pos = kinematics.system_com(base_pos, base_rpy, robot_model.default_posture)

        missing = [name for name in robot_model.feet if name not in feet_pos]
        if missing:
            raise ValueError(f"Forward kinematics returned no position for the feet {missing}")
        return {name: np.asarray(feet_pos[name], dtype=float) - com_pos for name in robot_model.feet}

    def set_terrain_map(self, terrain: Optional[TerrainMap]) -> None:
        self.terrain = terrain

    def set_sample_time(self, sample_time: float) -> None:
        if sample_time <= 0.0:
            raise ValueError(f"Sample time must be positive, got {sample_time}")
        self.sample_time = sample_time

    def get_sample_time(self) -> float:
        return self.sample_time

    def set_step_height(self, step_height: float) -> None:
        if step_height <= 0.0:
            raise ValueError(f"Step height must be positive, got {step_height}")
        self.step_height = step_height

    def set_force_threshold(self, force_threshold: float) -> None:
        if force_threshold < 0.0:
            raise ValueError(f"Force threshold must be non-negative, got {force_threshold}")
        self.force_threshold = force_threshold

    def _check_initialized(self) -> None:
        if self.robot_model is None:
            raise UninitializedEngineError("the robot model was not initialized")

    def read_preview_sequence(self, filename: Union[str, PathLike]) -> Tuple[ReducedBodyState, PreviewControl]:
        """Read the initial state and preview control from a preview-sequence file."""
        self._check_initialized()
        return read_preview_sequence(filename, self.robot_model.feet)

    # ------------------------------------------------------------------------------------------------------------
    # Multi-phase preview
    # ------------------------------------------------------------------------------------------------------------
    def multi_phase_preview(
        self,
        state: ReducedBodyState,
        control: PreviewControl,
        full: bool = True,
    ) -> ReducedBodyTrajectory:
        """
        Preview the reduced-body motion produced by a control sequence.

        Args:
            state: Initial reduced-body state
            control: Ordered sequence of preview phases
            full: If True, sample every phase at the sample time and generate the swing
                  trajectories; otherwise return only the terminal state of every phase

        Returns:
            ReducedBodyTrajectory. In full mode each phase of duration D contributes
            floor(D / sample_time) + 1 samples, the last one at the exact phase end.
            Sample times are non-decreasing: when D is a multiple of the sample time,
            the last two samples of the phase share the timestamp of the phase end.

        Raises:
            UninitializedEngineError: If no robot model was set
            MalformedControlError: If the control is empty or names unknown feet
            NumericDegeneracyError: If a stance phase starts with the CoM too close to the CoP
        """
        self._check_initialized()
        self._validate_control(control)

        context = self._new_context(state)
        trajectory = ReducedBodyTrajectory()

        for k, params in enumerate(control):
            if k == 0:
                actual_state = state.copy()
                previous_params = None
            else:
                actual_state = trajectory[-1].copy()
                previous_params = control[k - 1]
            self._update_support_region(context, actual_state, params, previous_params, k)

            if params.phase.is_stance:
                phase_traj = self._stance_preview(context, actual_state, params, full)
            else:
                phase_traj = self._flight_preview(context, actual_state, params, full)
            trajectory.extend(phase_traj)

        # Footholds of the feet that are still swinging at the end of the sequence
        end_params = control[len(control) - 1]
        final_state = trajectory[-1].copy()
        if end_params.duration > self.sample_time:
            for name in end_params.phase.swing_feet(self.robot_model.feet):
                final_state.support_region[name] = self._compute_foothold(
                    context, final_state, name, end_params.phase.get_foot_shift(name)
                )
        else:
            self._warn_short_phase(end_params, len(control) - 1)
        trajectory[-1] = final_state

        return trajectory

    def multi_phase_energy(self, state: ReducedBodyState, control: PreviewControl) -> np.ndarray:
        """
        Compute the CoM energy of a control sequence.

        Stance phases contribute the cart-table energy; flight phases contribute
        nothing since their energy is not modeled.

        Returns:
            (3,) energy integral per axis, see CartTableModel.compute_system_energy
        """
        self._check_initialized()
        self._validate_control(control)

        context = self._new_context(state)
        com_energy = np.zeros(3)

        actual_state = state.copy()
        for params in control:
            if params.phase.is_stance:
                model_params = CartTableControlParams(params.duration, params.phase.cop_shift)
                com_energy += context.cart_table.compute_system_energy(actual_state, model_params)
                actual_state = self._stance_state(context, actual_state, params, params.duration)
            else:
                actual_state = self._flight_state(actual_state, params.duration)

        return com_energy

    def _validate_control(self, control: PreviewControl) -> None:
        if len(control) == 0:
            raise MalformedControlError("the preview control has no phases", field='number_phase')
        for k, params in enumerate(control):
            if not isinstance(params, PreviewParams):
                raise MalformedControlError(f"expected PreviewParams, got {type(params).__name__}", phase=k)
            for name in params.phase.foot_shifts:
                if name not in self.robot_model.feet:
                    raise MalformedControlError(
                        f"unknown foot '{name}', the robot feet are {self.robot_model.feet}", field=name, phase=k
                    )

    def _new_context(self, state: ReducedBodyState) -> PreviewContext:
        cart_table = CartTableModel(self.min_pendulum_height)
        cart_table.set_model_properties(self.robot_model.mass, self.robot_model.gravity)
        cart_table.set_pendulum_height(state.com_pos[2] - state.cop[2])
        return PreviewContext(initial_state=state.copy(), cart_table=cart_table)

    def _warn_short_phase(self, params: PreviewParams, index: int) -> None:
        swing_feet = params.phase.swing_feet(self.robot_model.feet)
        if swing_feet:
            warnings.warn(
                f"phase_{index} lasts {params.duration} s, not longer than the sample time {self.sample_time} s; "
                f"the footholds of {swing_feet} are not added to the support region",
                UserWarning,
            )

    def _update_support_region(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        params: PreviewParams,
        previous_params: Optional[PreviewParams],
        index: int,
    ) -> None:
        """Remove the feet swinging in this phase and add the footholds of the previous swing."""
        feet = self.robot_model.feet
        swing_feet = params.phase.swing_feet(feet)
        support_region = {name: pos for name, pos in state.support_region.items() if name not in swing_feet}

        if previous_params is not None:
            if previous_params.duration > self.sample_time:
                for name in previous_params.phase.swing_feet(feet):
                    if name in swing_feet:
                        continue
                    support_region[name] = self._compute_foothold(
                        context, state, name, previous_params.phase.get_foot_shift(name)
                    )
            else:
                self._warn_short_phase(previous_params, index - 1)

        state.support_region = support_region

    def _compute_foothold(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        name: str,
        foot_shift: np.ndarray,
    ) -> np.ndarray:
        """
        Compute the world position of a foothold.

        Without terrain elevation, the height assumes flat terrain and compensates the
        drift between the actual and the default postures, and the CoM displacement in
        z since the beginning of the preview call.
        """
        stance = self.robot_model.get_stance(name)
        footshift = np.array([foot_shift[0], foot_shift[1], 0.0])

        foothold = state.com_pos + to_world(stance + footshift, state.get_rpy_w())
        if self.terrain is not None and self.terrain.has_elevation_data():
            foothold[2] = self.terrain.elevation_at(foothold[:2])
        else:
            # TODO: review whether the drift term should be referred to the phase start instead of the call start
            comz_shift = state.com_pos[2] - context.initial_state.com_pos[2]
            footshift_z = -(context.cart_table.get_pendulum_height() + stance[2])
            foothold[2] = footshift_z - comz_shift

        return foothold

    # ------------------------------------------------------------------------------------------------------------
    # Phase previews
    # ------------------------------------------------------------------------------------------------------------
    def _sample_times(self, duration: float, full: bool) -> List[float]:
        """Phase-relative sample times; the exact phase end is always the last one."""
        if not full:
            return [duration]
        num_samples = int(np.floor(duration / self.sample_time))
        times = [min(self.sample_time * (k + 1), duration) for k in range(num_samples)]
        times.append(duration)
        return times

    def _propagate_angular_motion(
        self,
        current: ReducedBodyState,
        state: ReducedBodyState,
        dt: float,
        angular_acc: np.ndarray,
    ) -> None:
        current.angular_pos = state.angular_pos + state.angular_vel * dt + 0.5 * angular_acc * dt ** 2
        current.angular_vel = state.angular_vel + angular_acc * dt
        current.angular_acc = angular_acc.copy()

    def _stance_state(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        params: PreviewParams,
        dt: float,
    ) -> ReducedBodyState:
        current = context.cart_table.compute_response(state, state.time + dt)
        self._propagate_angular_motion(current, state, dt, np.array([0.0, 0.0, params.head_acc]))
        return current

    def _flight_state(self, state: ReducedBodyState, dt: float) -> ReducedBodyState:
        gravity_vec = np.array([0.0, 0.0, -self.robot_model.gravity])

        current = state.copy()
        current.time = state.time + dt
        current.com_pos = state.com_pos + state.com_vel * dt + 0.5 * gravity_vec * dt ** 2
        current.com_vel = state.com_vel + gravity_vec * dt
        current.com_acc = gravity_vec
        self._propagate_angular_motion(current, state, dt, np.zeros(3))
        return current

    def _stance_preview(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        params: PreviewParams,
        full: bool,
    ) -> List[ReducedBodyState]:
        model_params = CartTableControlParams(params.duration, params.phase.cop_shift)
        context.cart_table.init_response(state, model_params)

        if full:
            terminal_state = self._stance_state(context, state, params, params.duration)
            self._init_swing(context, state, params, terminal_state)

        trajectory = []
        for dt in self._sample_times(params.duration, full):
            current_state = self._stance_state(context, state, params, dt)
            if full:
                self._generate_swing(context, current_state)
            trajectory.append(current_state)

        return trajectory

    def _flight_preview(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        params: PreviewParams,
        full: bool,
    ) -> List[ReducedBodyState]:
        if full:
            terminal_state = self._flight_state(state, params.duration)
            self._init_swing(context, state, params, terminal_state)

        trajectory = []
        for dt in self._sample_times(params.duration, full):
            current_state = self._flight_state(state, dt)
            if full:
                self._generate_swing(context, current_state)
            trajectory.append(current_state)

        return trajectory

    # ------------------------------------------------------------------------------------------------------------
    # Swing
    # ------------------------------------------------------------------------------------------------------------
    def _init_swing(
        self,
        context: PreviewContext,
        state: ReducedBodyState,
        params: PreviewParams,
        terminal_state: ReducedBodyState,
    ) -> None:
        """Compute the swing targets of the phase and set up the feet swing generators."""
        context.phase_state = state

        swing_shift = {}
        for name in params.phase.swing_feet(self.robot_model.feet):
            stance = self.robot_model.get_stance(name)
            foot_shift = params.phase.get_foot_shift(name)
            footshift = np.array([foot_shift[0], foot_shift[1], 0.0])

            foothold = terminal_state.com_pos + to_world(stance + footshift, terminal_state.get_rpy_w())
            if self.terrain is not None and self.terrain.has_elevation_data():
                footshift[2] = self.terrain.elevation_at(foothold[:2]) - (terminal_state.com_pos[2] + stance[2])
            else:
                comz_shift = terminal_state.com_pos[2] - context.initial_state.com_pos[2]
                footshift_z = -(context.cart_table.get_pendulum_height() + stance[2])
                footshift[2] = footshift_z - comz_shift

            swing_shift[name] = footshift

        context.swing_params = SwingParams(params.duration, swing_shift)

        context.feet_spline_generator = {}
        for name, footshift in swing_shift.items():
            actual_pos = self._phase_foot_position(context, name)
            target_pos = self.robot_model.get_stance(name) + footshift

            generator = SwingTrajectoryGenerator()
            generator.set_parameters(
                state.time, actual_pos, target_pos, StepParameters(params.duration, self.step_height)
            )
            context.feet_spline_generator[name] = generator

    def _phase_foot_position(self, context: PreviewContext, name: str) -> np.ndarray:
        """Foot position at the phase start (CoM frame), the stance posture when unknown."""
        foot_pos = context.phase_state.foot_pos.get(name)
        if foot_pos is None:
            return self.robot_model.get_stance(name)
        return np.asarray(foot_pos, dtype=float)

    def _generate_swing(self, context: PreviewContext, state: ReducedBodyState) -> None:
        """Fill the feet motion of a sample: swing generators for swinging feet, and a
        rigid transport opposite to the CoM displacement for the feet on the ground."""
        rpy = state.get_rpy_w()
        com_disp = state.com_pos - context.phase_state.com_pos

        for name in self.robot_model.feet:
            if name in context.swing_params.feet_shift:
                generator = context.feet_spline_generator[name]
                foot_pos, foot_vel, foot_acc = generator.generate_trajectory(state.time)
            else:
                foot_pos = self._phase_foot_position(context, name) - to_body(com_disp, rpy)
                foot_vel = to_body(-state.com_vel, rpy)
                foot_acc = to_body(-state.com_acc, rpy)

            state.foot_pos[name] = foot_pos
            state.foot_vel[name] = foot_vel
            state.foot_acc[name] = foot_acc

    # ------------------------------------------------------------------------------------------------------------
    # Whole-body conversions
    # ------------------------------------------------------------------------------------------------------------
    def _check_collaborators(self, need_dynamics: bool = False) -> None:
        self._check_initialized()
        if self.kinematics is None:
            raise UninitializedEngineError("the kinematics collaborator was not initialized")
        if need_dynamics and self.dynamics is None:
            raise UninitializedEngineError("the dynamics collaborator was not initialized")

    def to_whole_body_state(self, reduced_state: ReducedBodyState) -> WholeBodyState:
        """
        Convert a reduced-body state into a whole-body state.

        The joint-related components of the CoM are unknown to the reduced model, so
        the base is placed at the CoM minus the default CoM offset. Joint states come
        from the inverse kinematics of the feet; joint efforts are zero.
        """
        self._check_collaborators()
        robot = self.robot_model

        full_state = WholeBodyState(time=reduced_state.time)
        full_state.base_pos = reduced_state.com_pos - robot.default_com
        full_state.base_vel = reduced_state.com_vel.copy()
        full_state.base_acc = reduced_state.com_acc.copy()
        full_state.base_rpy = reduced_state.angular_pos.copy()
        full_state.base_ang_vel = reduced_state.angular_vel.copy()
        full_state.base_ang_acc = reduced_state.angular_acc.copy()

        for name, foot_pos in reduced_state.foot_pos.items():
            full_state.contact_pos[name] = np.asarray(foot_pos, dtype=float) + robot.default_com
        full_state.contact_vel = {name: np.array(vel, dtype=float) for name, vel in reduced_state.foot_vel.items()}
        full_state.contact_acc = {name: np.array(acc, dtype=float) for name, acc in reduced_state.foot_acc.items()}

        for name in robot.feet:
            full_state.contact_condition[name] = name in reduced_state.support_region

        full_state.joint_pos = self.kinematics.inverse_kinematics(full_state.contact_pos)
        full_state.joint_vel = self.kinematics.joint_velocity(full_state.joint_pos, full_state.contact_vel, robot.feet)
        full_state.joint_acc = self.kinematics.joint_acceleration(
            full_state.joint_pos, full_state.joint_vel, full_state.contact_acc, robot.feet
        )
        full_state.joint_eff = np.zeros(len(full_state.joint_pos))

        return full_state

    def from_whole_body_state(self, full_state: WholeBodyState) -> ReducedBodyState:
        """
        Convert a whole-body state into a reduced-body state.

        The CoP comes from the measured contact efforts, and the support region holds
        the feet whose effort exceeds the force threshold.
        """
        self._check_collaborators(need_dynamics=True)
        robot = self.robot_model

        reduced_state = ReducedBodyState(time=full_state.time)
        reduced_state.com_pos = self.kinematics.system_com(full_state.base_pos, full_state.base_rpy,
                                                           full_state.joint_pos)
        reduced_state.com_vel = self.kinematics.system_com_rate(full_state.base_pos, full_state.base_rpy,
                                                                full_state.joint_pos, full_state.base_vel,
                                                                full_state.joint_vel)
        reduced_state.com_acc = full_state.base_acc.copy()
        reduced_state.angular_pos = full_state.base_rpy.copy()
        reduced_state.angular_vel = full_state.base_ang_vel.copy()
        reduced_state.angular_acc = full_state.base_ang_acc.copy()

        base_rotation = rotation_matrix_from_rpy(full_state.base_rpy)
        cop_b = self.dynamics.center_of_pressure(full_state.contact_eff, full_state.contact_pos, robot.feet)
        reduced_state.cop = full_state.base_pos + base_rotation @ cop_b

        for name in self.dynamics.active_contacts(full_state.contact_eff, self.force_threshold):
            if name not in full_state.contact_pos:
                continue
            reduced_state.support_region[name] = full_state.base_pos + base_rotation @ full_state.contact_pos[name]

        for name, contact_pos in full_state.contact_pos.items():
            reduced_state.foot_pos[name] = np.asarray(contact_pos, dtype=float) - robot.default_com
        reduced_state.foot_vel = {name: np.array(vel, dtype=float) for name, vel in full_state.contact_vel.items()}
        reduced_state.foot_acc = {name: np.array(acc, dtype=float) for name, acc in full_state.contact_acc.items()}

        return reduced_state

    def to_whole_body_trajectory(self, reduced_traj: ReducedBodyTrajectory) -> List[WholeBodyState]:
        self._check_collaborators()
        return [self.to_whole_body_state(reduced_state) for reduced_state in reduced_traj]
