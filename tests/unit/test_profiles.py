"""Unit tests for column input validation."""

import numpy as np
import pytest

from tripleclouds.atmosphere import SpectralProfile
from tripleclouds.utils.constants import STEFAN_BOLTZMANN


def _gray_inputs(n_levels=3):
    return dict(
        surf_emission=400.0,
        surf_albedo=0.0,
        planck_hl=np.linspace(150.0, 390.0, n_levels + 1),
        cloud_fraction=np.zeros(n_levels),
        od_clear=np.full(n_levels, 0.1),
        od_cloud=np.zeros(n_levels),
        overlap_param=np.zeros(n_levels - 1),
    )


class TestSpectralProfile:
    """Tests for SpectralProfile construction."""

    def test_gray_inputs_promoted(self):
        profile = SpectralProfile(**_gray_inputs())
        assert profile.n_spec == 1
        assert profile.n_levels == 3
        assert profile.planck_hl.shape == (1, 4)
        assert profile.od_clear.shape == (1, 3)
        assert profile.surf_emission.shape == (1,)

    def test_optional_fields(self):
        profile = SpectralProfile(**_gray_inputs())
        assert profile.fractional_std is None
        assert not profile.has_scattering_properties

        profile = SpectralProfile(
            **_gray_inputs(), ssa_cloud=np.zeros(3), asymmetry_cloud=np.zeros(3)
        )
        assert profile.has_scattering_properties

    def test_multiple_intervals(self):
        inputs = _gray_inputs()
        inputs.update(
            surf_emission=[200.0, 200.0],
            surf_albedo=[0.0, 0.1],
            planck_hl=np.ones((2, 4)),
            od_clear=np.ones((2, 3)),
            od_cloud=np.zeros((2, 3)),
        )
        assert SpectralProfile(**inputs).n_spec == 2

    @pytest.mark.parametrize("name,value", [
        ("planck_hl", np.ones(3)),
        ("od_clear", np.ones(4)),
        ("overlap_param", np.ones(3)),
        ("surf_albedo", [0.0, 0.0]),
        ("fractional_std", np.ones(2)),
    ])
    def test_shape_mismatch(self, name, value):
        inputs = _gray_inputs()
        inputs[name] = value
        with pytest.raises(ValueError, match=name):
            SpectralProfile(**inputs)

    def test_immutable(self):
        profile = SpectralProfile(**_gray_inputs())
        with pytest.raises(AttributeError):
            profile.surf_albedo = np.array([0.5])

    def test_from_temperature(self):
        temperature_hl = np.array([220.0, 250.0, 280.0])
        profile = SpectralProfile.from_temperature(
            temperature_hl=temperature_hl,
            surface_temperature=290.0,
            cloud_fraction=[0.0, 0.5],
            od_clear=[0.1, 0.2],
            od_cloud=[0.0, 3.0],
            overlap_param=[0.5],
            surface_emissivity=0.95,
            fractional_std=[0.0, 1.0],
        )
        np.testing.assert_allclose(profile.planck_hl[0], STEFAN_BOLTZMANN * temperature_hl**4)
        assert profile.surf_emission[0] == pytest.approx(0.95 * STEFAN_BOLTZMANN * 290.0**4)
        assert profile.surf_albedo[0] == pytest.approx(0.05)
        assert profile.fractional_std.shape == (2,)
