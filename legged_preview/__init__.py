"""Reduced-order preview of legged locomotion.

A cart-table stance model, quintic swing trajectories and a multi-phase preview
engine that chains stance and flight phases into reduced-body trajectories.
"""

from .data_types import (
    Phase,
    PhaseType,
    PreviewControl,
    PreviewParams,
    ReducedBodyState,
    ReducedBodyTrajectory,
    StepParameters,
    SwingParams,
    WholeBodyState,
)
from .exceptions import MalformedControlError, NumericDegeneracyError, PreviewError, UninitializedEngineError
from .models import CartTableModel, ContactDynamics, FunctionTerrain, RobotModel
from .preview import PreviewLocomotion, parse_preview_sequence, read_preview_sequence

__all__ = [
    'CartTableModel',
    'ContactDynamics',
    'FunctionTerrain',
    'MalformedControlError',
    'NumericDegeneracyError',
    'Phase',
    'PhaseType',
    'PreviewControl',
    'PreviewError',
    'PreviewLocomotion',
    'PreviewParams',
    'ReducedBodyState',
    'ReducedBodyTrajectory',
    'RobotModel',
    'StepParameters',
    'SwingParams',
    'UninitializedEngineError',
    'WholeBodyState',
    'parse_preview_sequence',
    'read_preview_sequence',
]
