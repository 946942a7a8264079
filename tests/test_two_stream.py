"""Tests for the Tripleclouds two-stream flux solver."""

import numpy as np
import pytest

from tripleclouds.clouds.optics import cloud_free_layers
from tripleclouds.clouds.overlap import calc_overlap_matrices
from tripleclouds.rte_solver.two_stream import TwoStreamFluxes, calc_two_stream_flux


def _solve(region_fracs, reflectance, transmittance, source_up, source_dn,
           surf_emission=(400.0,), surf_albedo=(0.0,), alpha=0.5):
    n_levels = region_fracs.shape[1]
    overlap = calc_overlap_matrices(region_fracs, np.full(n_levels - 1, alpha))
    return calc_two_stream_flux(
        np.asarray(surf_emission, dtype=float),
        np.asarray(surf_albedo, dtype=float),
        region_fracs,
        reflectance,
        transmittance,
        source_up,
        source_dn,
        cloud_free_layers(region_fracs),
        overlap.u_overlap,
        overlap.v_overlap,
    )


@pytest.fixture
def cloudy_fracs():
    return np.array([
        [1.0, 0.6, 0.5, 1.0],
        [0.0, 0.2, 0.3, 0.0],
        [0.0, 0.2, 0.2, 0.0],
    ])


class TestTwoStreamSolver:
    """Tests for the adding method."""

    def test_transparent_atmosphere(self, cloudy_fracs):
        """Surface emission reaches space unchanged and nothing comes down."""
        shape = (1,) + cloudy_fracs.shape
        zeros = np.zeros(shape)
        fluxes = _solve(cloudy_fracs, zeros, np.ones(shape), zeros, zeros)

        assert isinstance(fluxes, TwoStreamFluxes)
        flux_up, flux_dn = fluxes.half_level_fluxes()
        assert flux_up.shape == flux_dn.shape == (1, 5)
        np.testing.assert_allclose(flux_up, 400.0, rtol=1e-12)
        np.testing.assert_allclose(flux_dn, 0.0, atol=1e-12)

    def test_region_fluxes_area_weighted(self, cloudy_fracs):
        shape = (1,) + cloudy_fracs.shape
        zeros = np.zeros(shape)
        fluxes = _solve(cloudy_fracs, zeros, np.ones(shape), zeros, zeros)
        np.testing.assert_allclose(fluxes.flux_up_top[0], 400.0 * cloudy_fracs, atol=1e-10)

    def test_opaque_layer(self, cloudy_fracs):
        """A black layer hides everything below it."""
        shape = (1,) + cloudy_fracs.shape
        transmittance = np.ones(shape)
        transmittance[:, :, 1] = 0.0
        source = np.zeros(shape)
        source[:, :, 1] = 250.0 * cloudy_fracs[:, 1]
        fluxes = _solve(cloudy_fracs, np.zeros(shape), transmittance, source, source)

        flux_up, flux_dn = fluxes.half_level_fluxes()
        np.testing.assert_allclose(flux_up[0, :2], 250.0, rtol=1e-12)
        np.testing.assert_allclose(flux_dn[0, 2:], 250.0, rtol=1e-12)
        np.testing.assert_allclose(flux_dn[0, :2], 0.0, atol=1e-12)

    def test_no_downwelling_at_top(self, cloudy_fracs):
        shape = (2,) + cloudy_fracs.shape
        rng = np.random.default_rng(42)
        reflectance = 0.2 * rng.random(shape)
        transmittance = 0.5 * rng.random(shape)
        source = 50.0 * rng.random(shape) * cloudy_fracs
        fluxes = _solve(
            cloudy_fracs, reflectance, transmittance, source, source,
            surf_emission=(400.0, 300.0), surf_albedo=(0.1, 0.05),
        )
        _, flux_dn = fluxes.half_level_fluxes()
        np.testing.assert_array_equal(flux_dn[:, 0], 0.0)
        assert np.all(flux_dn[:, 1:] > 0.0)

    def test_surface_reflection(self, cloudy_fracs):
        """Upwelling surface flux is emission plus reflected downwelling."""
        shape = (1,) + cloudy_fracs.shape
        rng = np.random.default_rng(0)
        reflectance = 0.1 * rng.random(shape)
        transmittance = 0.3 + 0.5 * rng.random(shape)
        source = 80.0 * rng.random(shape) * cloudy_fracs
        fluxes = _solve(
            cloudy_fracs, reflectance, transmittance, source, source,
            surf_emission=(380.0,), surf_albedo=(0.2,),
        )
        flux_up, flux_dn = fluxes.half_level_fluxes()
        assert flux_up[0, -1] == pytest.approx(380.0 + 0.2 * flux_dn[0, -1])

    def test_cloud_free_matches_single_region(self):
        """A clear column gives the same fluxes with one, two or three regions."""
        od = np.array([0.3, 0.5, 0.2])
        transmittance = np.exp(-1.66 * od)
        source = 200.0 * (1.0 - transmittance)

        results = []
        for n_regions in (2, 3):
            fracs = np.zeros((n_regions, 3))
            fracs[0] = 1.0
            t = np.repeat(transmittance[np.newaxis, np.newaxis, :], n_regions, axis=1)
            s = np.zeros_like(t)
            s[:, 0, :] = source
            fluxes = _solve(fracs, np.zeros_like(t), t, s, s)
            results.append(fluxes.half_level_fluxes())

        np.testing.assert_allclose(results[0][0], results[1][0])
        np.testing.assert_allclose(results[0][1], results[1][1])
