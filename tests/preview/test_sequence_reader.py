"""Unit tests for the preview-sequence reader."""

import pathlib

import numpy as np
import pytest
import yaml

from legged_preview.data_types import PhaseType
from legged_preview.exceptions import MalformedControlError
from legged_preview.preview import parse_preview_sequence, read_preview_sequence

FEET = ['FL', 'FR', 'RL', 'RR']
EXAMPLE_SEQUENCE = pathlib.Path(__file__).parents[2] / "simulation" / "example_sequence.yaml"


@pytest.fixture
def description():
    """Two-phase sequence: a stance with FL swinging, then a flight."""
    return {
        'preview_sequence': {
            'state': {
                'com_pos': [0.0, 0.0, 0.55],
                'com_vel': [0.1, 0.0, 0.0],
                'cop': [0.0, 0.0, 0.0],
            },
            'preview_control': {
                'number_phase': 2,
                'phase_0': {
                    'duration': 0.5,
                    'cop_shift': [0.05, 0.0],
                    'head_acc': 0.1,
                    'FL': [0.1, 0.0],
                },
                'phase_1': {
                    'duration': 0.2,
                },
            },
        },
    }


class TestParseSequence:
    """Tests for parsing a sequence description."""

    def test_state(self, description):
        state, _ = parse_preview_sequence(description, FEET)
        assert np.allclose(state.com_pos, [0.0, 0.0, 0.55])
        assert np.allclose(state.com_vel, [0.1, 0.0, 0.0])
        assert np.allclose(state.cop, 0.0)
        assert state.support_region == {}

    def test_phases(self, description):
        _, control = parse_preview_sequence(description, FEET)

        assert len(control) == 2
        stance = control[0]
        assert stance.phase.type == PhaseType.STANCE
        assert stance.duration == 0.5
        assert stance.head_acc == 0.1
        assert np.allclose(stance.phase.cop_shift, [0.05, 0.0])
        assert list(stance.phase.foot_shifts) == ['FL']

        flight = control[1]
        assert flight.phase.type == PhaseType.FLIGHT
        assert flight.phase.cop_shift is None
        assert flight.phase.swing_feet(FEET) == FEET

    def test_missing_duration(self, description):
        del description['preview_sequence']['preview_control']['phase_1']['duration']
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'duration'
        assert error.value.phase == 1

    def test_stance_requires_head_acc(self, description):
        del description['preview_sequence']['preview_control']['phase_0']['head_acc']
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'head_acc'
        assert error.value.phase == 0

    def test_non_positive_duration(self, description):
        description['preview_sequence']['preview_control']['phase_0']['duration'] = 0.0
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'duration'
        assert error.value.phase == 0

    def test_wrong_vector_length(self, description):
        description['preview_sequence']['preview_control']['phase_0']['cop_shift'] = [0.05, 0.0, 0.0]
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'cop_shift'

    def test_unknown_foot(self, description):
        description['preview_sequence']['preview_control']['phase_0']['LF'] = [0.1, 0.0]
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'LF'
        assert error.value.phase == 0

    def test_missing_phase(self, description):
        description['preview_sequence']['preview_control']['number_phase'] = 3
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'phase_2'

    @pytest.mark.parametrize("number_phase", [0, -1, 1.5])
    def test_invalid_number_phase(self, description, number_phase):
        description['preview_sequence']['preview_control']['number_phase'] = number_phase
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'number_phase'

    def test_missing_state(self, description):
        del description['preview_sequence']['state']
        with pytest.raises(MalformedControlError) as error:
            parse_preview_sequence(description, FEET)
        assert error.value.field == 'state'

    def test_flight_head_acc_warns(self, description):
        description['preview_sequence']['preview_control']['phase_1']['head_acc'] = 0.3
        with pytest.warns(UserWarning, match="phase_1"):
            _, control = parse_preview_sequence(description, FEET)
        assert control[1].head_acc == 0.0


class TestReadSequence:
    """Tests for reading sequence files."""

    def test_round_trip_through_yaml(self, description, tmp_path):
        sequence_file = tmp_path / "sequence.yaml"
        sequence_file.write_text(yaml.safe_dump(description))

        state, control = read_preview_sequence(sequence_file, FEET)
        assert np.allclose(state.com_pos, [0.0, 0.0, 0.55])
        assert len(control) == 2

    def test_empty_file(self, tmp_path):
        sequence_file = tmp_path / "empty.yaml"
        sequence_file.write_text("")
        with pytest.raises(MalformedControlError):
            read_preview_sequence(sequence_file, FEET)

    def test_example_sequence(self):
        """The sequence shipped with the simulation script is valid."""
        _, control = read_preview_sequence(EXAMPLE_SEQUENCE, FEET)
        assert [params.phase.type for params in control] == [
            PhaseType.STANCE, PhaseType.STANCE, PhaseType.FLIGHT, PhaseType.STANCE
        ]
