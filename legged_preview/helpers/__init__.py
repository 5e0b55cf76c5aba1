"""Stateless helpers: frame transforms and swing trajectory generators."""

from .frame_transform import rotation_matrix_from_rpy, to_body, to_world
from .swing_generators import SwingTrajectoryGenerator

__all__ = [
    'rotation_matrix_from_rpy',
    'to_body',
    'to_world',
    'SwingTrajectoryGenerator',
]
