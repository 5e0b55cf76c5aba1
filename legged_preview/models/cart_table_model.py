"""
Cart-Table (Controlled Linear Inverted Pendulum) Model

Analytic stance-phase dynamics of the CoM. The robot is a point mass at constant
height h above the center of pressure (CoP), and the CoP moves linearly from its
initial position by a planar shift over the phase duration T:

    u(dt) = cop_0 + cop_shift * dt / T

For each horizontal axis the CoM obeys x'' = w^2 (x - u) with w = sqrt(g / h), whose
closed-form solution is

    x(dt) = b1 * exp(w dt) + b2 * exp(-w dt) + u(dt)

with b1, b2 chosen to match the initial CoM position and velocity:

    b1 = (x_0 - cop_0) / 2 + (v_0 T - cop_shift) / (2 w T)
    b2 = (x_0 - cop_0) / 2 - (v_0 T - cop_shift) / (2 w T)

The vertical CoM motion is frozen at the initial height during the phase.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from legged_preview import config as cfg
from legged_preview.data_types import ReducedBodyState
from legged_preview.exceptions import NumericDegeneracyError


@dataclass
class CartTableProperties:
    """Physical properties of the cart-table model.

    Attributes:
        mass: Total mass of the robot (kg).
        gravity: Gravity magnitude (m/s^2).
    """
    mass: float = 0.0
    gravity: float = 9.81


@dataclass
class CartTableControlParams:
    """Control input of one stance phase.

    Attributes:
        duration: Phase duration (s).
        cop_shift: (2,) planar CoP shift applied over the phase.
    """
    duration: float
    cop_shift: np.ndarray


class CartTableModel:
    """Closed-form response of the cart-table model over one stance phase."""

    def __init__(self, min_pendulum_height: float = None) -> None:
        self.properties = CartTableProperties(gravity=cfg.preview_params.get('gravity', 9.81))
        if min_pendulum_height is None:
            min_pendulum_height = cfg.preview_params.get('min_pendulum_height', 1e-3)
        self.min_pendulum_height = min_pendulum_height

        self.pendulum_height = 0.0
        self.omega = 0.0
        self._initial_state = None
        self._params = None
        self._beta_1 = np.zeros(2)
        self._beta_2 = np.zeros(2)

    def set_model_properties(self, mass: float, gravity: float) -> None:
        self.properties = CartTableProperties(mass=mass, gravity=gravity)

    def get_pendulum_height(self) -> float:
        return self.pendulum_height

    def set_pendulum_height(self, height: float) -> None:
        """Set the pendulum height without starting a phase (used before the first stance)."""
        self.pendulum_height = height

    def init_response(self, state: ReducedBodyState, params: CartTableControlParams) -> None:
        """
        Initialize the phase response from the phase-start state.

        Args:
            state: State at the beginning of the stance phase
            params: Duration and CoP shift of the phase

        Raises:
            NumericDegeneracyError: If the CoM is not above the CoP by at least
                ``min_pendulum_height``
        """
        height = state.com_pos[2] - state.cop[2]
        if not np.isfinite(height) or height < self.min_pendulum_height:
            raise NumericDegeneracyError(
                f"pendulum height {height:.6g} m is below the minimum of {self.min_pendulum_height:.6g} m",
                height=height,
            )

        self._initial_state = state.copy()
        self._params = CartTableControlParams(params.duration, np.asarray(params.cop_shift, dtype=float))
        self.pendulum_height = height
        self.omega = np.sqrt(self.properties.gravity / height)

        cop_0 = state.cop[:2]
        com_0 = state.com_pos[:2]
        vel_0 = state.com_vel[:2]
        drift = (vel_0 * params.duration - self._params.cop_shift) / (2 * self.omega * params.duration)
        self._beta_1 = (com_0 - cop_0) / 2 + drift
        self._beta_2 = (com_0 - cop_0) / 2 - drift

    def _check_initialized(self) -> None:
        if self._initial_state is None:
            raise RuntimeError("init_response() must be called before evaluating the cart-table response")

    def compute_com_response(self, time: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Evaluate the CoM position, velocity and acceleration at an absolute time.

        Args:
            time: Absolute time, referred to the same clock as the phase-start state

        Returns:
            Tuple of (com_pos, com_vel, com_acc), each of shape (3,)
        """
        self._check_initialized()
        dt = time - self._initial_state.time
        duration = self._params.duration
        cop_rate = self._params.cop_shift / duration

        exp_pos = np.exp(self.omega * dt)
        exp_neg = np.exp(-self.omega * dt)

        com_pos = self._initial_state.com_pos.copy()
        com_vel = np.zeros(3)
        com_acc = np.zeros(3)

        com_pos[:2] = self._beta_1 * exp_pos + self._beta_2 * exp_neg + self._initial_state.cop[:2] + cop_rate * dt
        com_vel[:2] = self.omega * (self._beta_1 * exp_pos - self._beta_2 * exp_neg) + cop_rate
        com_acc[:2] = self.omega ** 2 * (self._beta_1 * exp_pos + self._beta_2 * exp_neg)

        return com_pos, com_vel, com_acc

    def compute_cop(self, time: float) -> np.ndarray:
        """CoP position at an absolute time inside the phase."""
        self._check_initialized()
        dt = time - self._initial_state.time
        cop = self._initial_state.cop.copy()
        cop[:2] += self._params.cop_shift * dt / self._params.duration
        return cop

    def compute_response(self, state: ReducedBodyState, time: float) -> ReducedBodyState:
        """
        Compute the state reached at an absolute time.

        Args:
            state: State whose non-CoM fields (orientation, feet, support region)
                   are carried over
            time: Absolute time to evaluate

        Returns:
            Copy of ``state`` with updated time, CoM motion and CoP
        """
        com_pos, com_vel, com_acc = self.compute_com_response(time)
        response = state.copy()
        response.time = time
        response.com_pos = com_pos
        response.com_vel = com_vel
        response.com_acc = com_acc
        response.cop = self.compute_cop(time)
        return response

    def compute_system_energy(self, state: ReducedBodyState, params: CartTableControlParams) -> np.ndarray:
        """
        Compute the energy of the CoM motion integrated over a stance phase.

        The horizontal components integrate the kinetic energy plus the control
        (CoP) effort, 0.5 m (x'^2 + x''^2 / w^2). The vertical component holds
        the potential energy of the pendulum height, m g h T.

        Args:
            state: State at the beginning of the stance phase
            params: Duration and CoP shift of the phase

        Returns:
            (3,) energy integral per axis
        """
        self.init_response(state, params)

        mass = self.properties.mass
        w = self.omega
        duration = params.duration
        cop_rate = self._params.cop_shift / duration
        b1 = self._beta_1
        b2 = self._beta_2

        exp_pos = np.exp(w * duration)
        exp_neg = np.exp(-w * duration)

        integral = (
            w * b1 ** 2 * (exp_pos ** 2 - 1)
            + w * b2 ** 2 * (1 - exp_neg ** 2)
            + cop_rate ** 2 * duration
            + 2 * cop_rate * (b1 * (exp_pos - 1) - b2 * (1 - exp_neg))
        )

        energy = np.zeros(3)
        energy[:2] = 0.5 * mass * integral
        energy[2] = mass * self.properties.gravity * self.pendulum_height * duration
        return energy
