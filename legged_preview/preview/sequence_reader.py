"""Reader of preview-sequence description files.

A preview sequence defines the initial reduced state and the multi-phase preview
control, nested inside the ``preview_sequence`` section:

    preview_sequence:
      state:
        com_pos: [0.0, 0.0, 0.55]
        com_vel: [0.0, 0.0, 0.0]
        cop: [0.0, 0.0, 0.0]
      preview_control:
        number_phase: 2
        phase_0:
          duration: 0.5
          cop_shift: [0.05, 0.0]   # presence marks a stance phase
          head_acc: 0.0            # required for stance phases
          FL: [0.1, 0.0]           # planar foothold shift of a swinging foot
        phase_1:
          duration: 0.2            # no cop_shift: flight phase
"""

import warnings
from os import PathLike
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import yaml

from legged_preview.data_types import Phase, PreviewControl, PreviewParams, ReducedBodyState
from legged_preview.exceptions import MalformedControlError


def _read_vector(section: Mapping, key: str, size: int, phase: Optional[int] = None) -> np.ndarray:
    if key not in section or section[key] is None:
        raise MalformedControlError(f"the {key} was not found", field=key, phase=phase)
    try:
        vector = np.asarray(section[key], dtype=float).ravel()
    except (TypeError, ValueError):
        raise MalformedControlError(f"the {key} is not numeric", field=key, phase=phase) from None
    if vector.shape != (size,):
        raise MalformedControlError(
            f"the {key} must have {size} components, got {vector.shape[0]}", field=key, phase=phase
        )
    return vector


def _read_scalar(section: Mapping, key: str, phase: Optional[int] = None) -> float:
    if key not in section or section[key] is None:
        raise MalformedControlError(f"the {key} was not found", field=key, phase=phase)
    try:
        return float(section[key])
    except (TypeError, ValueError):
        raise MalformedControlError(f"the {key} is not a number", field=key, phase=phase) from None


def _read_section(parent: Mapping, key: str, phase: Optional[int] = None) -> Mapping:
    section = parent.get(key) if isinstance(parent, Mapping) else None
    if not isinstance(section, Mapping):
        raise MalformedControlError(f"the {key} section was not found", field=key, phase=phase)
    return section


def _parse_phase(phase_ns: Mapping, index: int, foot_names: Sequence[str]) -> PreviewParams:
    duration = _read_scalar(phase_ns, 'duration', phase=index)

    foot_shifts: Dict[str, np.ndarray] = {}
    for name in foot_names:
        if name in phase_ns:
            foot_shifts[name] = _read_vector(phase_ns, name, 2, phase=index)

    unknown = [key for key in phase_ns if key not in ('duration', 'cop_shift', 'head_acc') and key not in foot_names]
    if unknown:
        raise MalformedControlError(f"unknown foot names {unknown}", field=str(unknown[0]), phase=index)

    try:
        if 'cop_shift' in phase_ns:
            cop_shift = _read_vector(phase_ns, 'cop_shift', 2, phase=index)
            head_acc = _read_scalar(phase_ns, 'head_acc', phase=index)
            return PreviewParams(duration, Phase.stance(cop_shift, foot_shifts), head_acc)

        if 'head_acc' in phase_ns:
            warnings.warn(f"phase_{index}: head_acc is ignored in flight phases", UserWarning)
        return PreviewParams(duration, Phase.flight(foot_shifts))
    except MalformedControlError as error:
        if error.phase is not None:
            raise
        raise MalformedControlError(str(error), field=error.field, phase=index) from None


def parse_preview_sequence(
    description: Mapping,
    foot_names: Sequence[str],
) -> Tuple[ReducedBodyState, PreviewControl]:
    """Build the initial state and preview control from a nested description.

    Args:
        description: Mapping holding the ``preview_sequence`` section.
        foot_names: Feet of the robot; other keys inside a phase are rejected.

    Returns:
        Tuple of (initial reduced state, preview control).

    Raises:
        MalformedControlError: If a required field is missing or invalid. The error
            names the field and, for phase fields, the phase index.
    """
    sequence_ns = _read_section(description, 'preview_sequence')
    state_ns = _read_section(sequence_ns, 'state')
    control_ns = _read_section(sequence_ns, 'preview_control')

    state = ReducedBodyState(
        com_pos=_read_vector(state_ns, 'com_pos', 3),
        com_vel=_read_vector(state_ns, 'com_vel', 3),
        cop=_read_vector(state_ns, 'cop', 3),
    )

    num_phases = _read_scalar(control_ns, 'number_phase')
    if num_phases != int(num_phases) or num_phases < 1:
        raise MalformedControlError(
            f"the number_phase must be a positive integer, got {control_ns['number_phase']}", field='number_phase'
        )

    control = PreviewControl()
    for k in range(int(num_phases)):
        phase_ns = _read_section(control_ns, f"phase_{k}", phase=k)
        control.params.append(_parse_phase(phase_ns, k, foot_names))

    return state, control


def read_preview_sequence(
    filename: Union[str, PathLike],
    foot_names: Sequence[str],
) -> Tuple[ReducedBodyState, PreviewControl]:
    """Read a preview-sequence YAML file.

    Args:
        filename: Path of the YAML file.
        foot_names: Feet of the robot.

    Returns:
        Tuple of (initial reduced state, preview control).
    """
    with open(filename, 'r') as sequence_file:
        description = yaml.safe_load(sequence_file)
    if not isinstance(description, Mapping):
        raise MalformedControlError(f"{filename} does not contain a preview_sequence section", field='preview_sequence')
    return parse_preview_sequence(description, foot_names)
