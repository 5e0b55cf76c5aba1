"""Unit tests for the point-foot contact dynamics."""

import numpy as np
import pytest

from legged_preview.models import ContactDynamics


@pytest.fixture
def contact_pos():
    return {
        'FL': np.array([0.3, 0.2, -0.5]),
        'FR': np.array([0.3, -0.2, -0.5]),
        'RL': np.array([-0.3, 0.2, -0.5]),
        'RR': np.array([-0.3, -0.2, -0.5]),
    }


class TestCenterOfPressure:
    """Tests for the center of pressure."""

    def test_even_load(self, contact_pos):
        """Evenly loaded feet put the CoP at the centroid."""
        contact_eff = {name: np.array([0.0, 0.0, 25.0]) for name in contact_pos}
        cop = ContactDynamics().center_of_pressure(contact_eff, contact_pos, list(contact_pos))
        assert np.allclose(cop, [0.0, 0.0, -0.5])

    def test_weighted_load(self, contact_pos):
        """The CoP moves towards the most loaded feet."""
        contact_eff = {
            'FL': np.array([0.0, 0.0, 30.0]),
            'FR': np.array([0.0, 0.0, 30.0]),
            'RL': np.array([0.0, 0.0, 10.0]),
            'RR': np.array([0.0, 0.0, 10.0]),
        }
        cop = ContactDynamics().center_of_pressure(contact_eff, contact_pos, list(contact_pos))
        assert np.allclose(cop, [0.15, 0.0, -0.5])

    def test_wrench_efforts(self, contact_pos):
        """Six-component wrenches use their force part."""
        contact_eff = {
            'FL': np.array([1.0, 2.0, 3.0, 0.0, 0.0, 20.0]),
            'RR': np.array([-1.0, 0.0, 0.0, 0.0, 0.0, 20.0]),
        }
        cop = ContactDynamics().center_of_pressure(contact_eff, contact_pos, list(contact_pos))
        assert np.allclose(cop, [0.0, 0.0, -0.5])

    def test_no_load(self, contact_pos):
        """Feet pulling or unloaded give a zero CoP."""
        contact_eff = {name: np.array([0.0, 0.0, -1.0]) for name in contact_pos}
        cop = ContactDynamics().center_of_pressure(contact_eff, contact_pos, list(contact_pos))
        assert np.allclose(cop, 0.0)

    def test_invalid_effort(self, contact_pos):
        with pytest.raises(ValueError):
            ContactDynamics().center_of_pressure({'FL': np.zeros(4)}, contact_pos, ['FL'])


class TestActiveContacts:
    """Tests for the active contact selection."""

    def test_threshold(self):
        """Only feet whose normal force exceeds the threshold are active."""
        contact_eff = {
            'FL': np.array([0.0, 0.0, 40.0]),
            'FR': np.array([0.0, 0.0, 5.0]),
            'RL': np.array([0.0, 0.0, 0.0]),
        }
        dynamics = ContactDynamics()
        assert dynamics.active_contacts(contact_eff, 0.0) == ['FL', 'FR']
        assert dynamics.active_contacts(contact_eff, 10.0) == ['FL']
