"""Swing foot trajectory generators."""

from .quintic_swing_trajectory_generator import SwingTrajectoryGenerator

__all__ = [
    'SwingTrajectoryGenerator',
]
