"""Tests for region optical property mixing and cloud-free layer flags."""

import numpy as np
import pytest

from tripleclouds.clouds.optics import (
    RegionOpticalProperties,
    cloud_free_layers,
    mix_no_scattering_optical_depth,
    mix_optical_properties,
)


@pytest.fixture
def layer_inputs():
    """Two spectral intervals, two levels, three regions."""
    return dict(
        od_clear=np.array([[1.0, 0.5], [0.2, 0.0]]),
        od_cloud=np.array([[2.0, 0.0], [4.0, 0.0]]),
        ssa_cloud=np.array([[0.8, 0.0], [0.5, 0.0]]),
        asymmetry_cloud=np.array([[0.85, 0.0], [0.7, 0.0]]),
        od_scaling=np.array([[0.5, 1.0], [1.5, 1.0]]),
    )


class TestOpticalDepthMixing:
    """Tests for combining gas and cloud optical depth."""

    def test_no_scattering_optical_depth(self, layer_inputs):
        props = mix_no_scattering_optical_depth(
            layer_inputs["od_clear"], layer_inputs["od_cloud"], layer_inputs["od_scaling"]
        )
        assert props.od.shape == (2, 3, 2)
        np.testing.assert_allclose(props.od[0, :, 0], [1.0, 2.0, 4.0])
        np.testing.assert_allclose(props.od[1, :, 0], [0.2, 2.2, 6.2])
        assert not props.scattering

    def test_clear_region_unchanged(self, layer_inputs):
        props = mix_optical_properties(**layer_inputs)
        np.testing.assert_array_equal(props.od[:, 0, :], layer_inputs["od_clear"])

    def test_single_scattering_albedo_diluted(self, layer_inputs):
        props = mix_optical_properties(**layer_inputs)
        assert props.ssa.shape == (2, 2, 2)
        np.testing.assert_allclose(props.ssa[0, :, 0], [0.8 * 1.0 / 2.0, 0.8 * 3.0 / 4.0])

    def test_scattering_optical_depth_preserved(self, layer_inputs):
        props = mix_optical_properties(**layer_inputs)
        scattering_od = props.ssa * props.od[:, 1:, :]
        expected = (
            layer_inputs["ssa_cloud"][:, np.newaxis, :]
            * layer_inputs["od_cloud"][:, np.newaxis, :]
            * layer_inputs["od_scaling"][np.newaxis, :, :]
        )
        np.testing.assert_allclose(scattering_od, expected)

    def test_zero_optical_depth_has_zero_albedo(self, layer_inputs):
        props = mix_optical_properties(**layer_inputs)
        # Second interval, second level has no gas and no cloud
        np.testing.assert_array_equal(props.ssa[1, :, 1], 0.0)
        assert np.all(np.isfinite(props.ssa))

    def test_asymmetry_passed_through(self, layer_inputs):
        props = mix_optical_properties(**layer_inputs)
        g = props.region_asymmetry()
        assert g.shape == (2, 3, 2)
        for jreg in range(3):
            np.testing.assert_array_equal(g[:, jreg, :], layer_inputs["asymmetry_cloud"])

    def test_region_ssa_clear_region_zero(self, layer_inputs):
        ssa = mix_optical_properties(**layer_inputs).region_ssa()
        assert ssa.shape == (2, 3, 2)
        np.testing.assert_array_equal(ssa[:, 0, :], 0.0)

    def test_non_scattering_properties(self):
        props = RegionOpticalProperties(od=np.ones((1, 3, 4)))
        np.testing.assert_array_equal(props.region_ssa(), 0.0)
        np.testing.assert_array_equal(props.region_asymmetry(), 0.0)


class TestCloudFreeLayers:
    """Tests for the cloud-free layer flags."""

    def test_flags_include_dummy_layers(self):
        region_fracs = np.array([
            [1.0, 0.5, 1.0],
            [0.0, 0.25, 0.0],
            [0.0, 0.25, 0.0],
        ])
        flags = cloud_free_layers(region_fracs)
        np.testing.assert_array_equal(flags, [True, True, False, True, True])
        assert flags.dtype == bool

    def test_nearly_clear_is_cloudy(self):
        flags = cloud_free_layers(np.array([[1.0 - 1e-9], [1e-9]]))
        np.testing.assert_array_equal(flags, [True, False, True])
