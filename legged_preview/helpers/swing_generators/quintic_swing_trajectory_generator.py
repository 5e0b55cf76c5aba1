"""
Quintic Swing Trajectory Generator

Swing foot trajectory between a lift-off and a touch-down position over a fixed
swing duration T:

- Planar axes (x, y): a single quintic polynomial from lift-off to touch-down.
- Vertical axis (z): two quintic polynomials (0 -> T/2 and T/2 -> T) joined at the
  apex z_apex = max(lift_off.z, touch_down.z) + step_height.

Boundary Constraints (per axis and per segment):
- At t=0: p=lift_off, v=0, a=0
- At t=T: p=touch_down, v=0, a=0
- At t=T/2 (z only): p=z_apex, v=0, a=0, so both segments join with C2 continuity

Outside [start_time, start_time + T] the trajectory is clamped to its end points.
"""

from typing import Optional, Tuple

import numpy as np

from legged_preview.data_types import StepParameters


class SwingTrajectoryGenerator:
    """
    Generates the swing trajectory of one foot with quintic splines.
    """

    def __init__(self) -> None:
        self.start_time = 0.0
        self.start_pos = np.zeros(3)
        self.target_pos = np.zeros(3)
        self.step_params: Optional[StepParameters] = None

        self._coeffs_xy = None
        self._coeffs_z_up = None
        self._coeffs_z_down = None

    def set_parameters(
        self,
        start_time: float,
        start_pos: np.ndarray,
        target_pos: np.ndarray,
        step_params: StepParameters
    ) -> None:
        """
        Set the swing definition and precompute the spline coefficients.

        Args:
            start_time: Absolute lift-off time
            start_pos: Lift-off position [x, y, z]
            target_pos: Touch-down position [x, y, z]
            step_params: Swing duration and apex clearance
        """
        if step_params.duration <= 0.0:
            raise ValueError(f"swing duration must be positive, got {step_params.duration}")

        self.start_time = start_time
        self.start_pos = np.asarray(start_pos, dtype=float).reshape(3).copy()
        self.target_pos = np.asarray(target_pos, dtype=float).reshape(3).copy()
        self.step_params = step_params

        duration = step_params.duration
        half_duration = duration / 2.0
        apex_z = max(self.start_pos[2], self.target_pos[2]) + step_params.step_height

        self._coeffs_xy = np.array([
            self._solve_quintic_coefficients(0.0, duration, self.start_pos[axis], self.target_pos[axis])
            for axis in range(2)
        ])
        self._coeffs_z_up = self._solve_quintic_coefficients(0.0, half_duration, self.start_pos[2], apex_z)
        self._coeffs_z_down = self._solve_quintic_coefficients(half_duration, duration, apex_z, self.target_pos[2])

    def _solve_quintic_coefficients(
        self,
        t0: float,
        tf: float,
        p0: float,
        pf: float,
        v0: float = 0.0,
        a0: float = 0.0,
        vf: float = 0.0,
        af: float = 0.0
    ) -> np.ndarray:
        """
        Solve for quintic polynomial coefficients given boundary conditions.

        Quintic polynomial: p(t) = c0 + c1*t + c2*t^2 + c3*t^3 + c4*t^4 + c5*t^5

        Returns:
            Coefficients array [c0, c1, c2, c3, c4, c5]
        """
        A = np.array([
            [1, t0, t0**2, t0**3, t0**4, t0**5],
            [1, tf, tf**2, tf**3, tf**4, tf**5],
            [0, 1, 2*t0, 3*t0**2, 4*t0**3, 5*t0**4],
            [0, 1, 2*tf, 3*tf**2, 4*tf**3, 5*tf**4],
            [0, 0, 2, 6*t0, 12*t0**2, 20*t0**3],
            [0, 0, 2, 6*tf, 12*tf**2, 20*tf**3]
        ])
        b = np.array([p0, pf, v0, vf, a0, af])

        return np.linalg.solve(A, b)

    def _evaluate_quintic(self, t: float, coeffs: np.ndarray) -> Tuple[float, float, float]:
        """
        Evaluate quintic polynomial and its derivatives at time t.

        Returns:
            Tuple of (position, velocity, acceleration)
        """
        c0, c1, c2, c3, c4, c5 = coeffs

        p = c0 + c1*t + c2*t**2 + c3*t**3 + c4*t**4 + c5*t**5
        v = c1 + 2*c2*t + 3*c3*t**2 + 4*c4*t**3 + 5*c5*t**4
        a = 2*c2 + 6*c3*t + 12*c4*t**2 + 20*c5*t**3

        return p, v, a

    def generate_trajectory(self, time: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Compute the foot position, velocity, and acceleration at an absolute time.

        Args:
            time: Absolute time, referred to the same clock as ``start_time``

        Returns:
            Tuple of (foot_position, foot_velocity, foot_acceleration), each of shape (3,)
        """
        if self.step_params is None:
            raise RuntimeError("set_parameters() must be called before generating a swing trajectory")

        duration = self.step_params.duration
        swing_time = float(np.clip(time - self.start_time, 0.0, duration))

        position = np.zeros(3)
        velocity = np.zeros(3)
        acceleration = np.zeros(3)

        for axis in range(2):
            position[axis], velocity[axis], acceleration[axis] = self._evaluate_quintic(
                swing_time, self._coeffs_xy[axis]
            )

        if swing_time <= duration / 2.0:
            coeffs_z = self._coeffs_z_up
        else:
            coeffs_z = self._coeffs_z_down
        position[2], velocity[2], acceleration[2] = self._evaluate_quintic(swing_time, coeffs_z)

        return position, velocity, acceleration
