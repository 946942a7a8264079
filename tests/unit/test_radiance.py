"""
Unit tests for single-angle radiance transport.

Each angle's contribution to the flux profile is computed independently,
so the contributions can be checked one at a time.
"""

import numpy as np
import pytest

from tripleclouds.clouds.overlap import calc_overlap_matrices
from tripleclouds.clouds.regions import calc_region_properties
from tripleclouds.rte_solver.flux import fold_angles
from tripleclouds.rte_solver.quadrature import select_quadrature
from tripleclouds.rte_solver.radiance import calc_radiance_dn, calc_radiance_up


@pytest.fixture
def column():
    props = calc_region_properties(
        np.array([0.0, 0.5, 0.3]), np.array([0.0, 1.0, 0.6]), distribution="lognormal"
    )
    overlap = calc_overlap_matrices(props.region_fracs, np.array([0.8, 0.8]))
    shape = (1, 3, 3)
    rng = np.random.default_rng(7)
    return dict(
        region_fracs=props.region_fracs,
        overlap=overlap,
        transmittance=0.2 + 0.7 * rng.random(shape),
        source=100.0 * rng.random(shape) * props.region_fracs,
    )


class TestRadianceDown:
    """Tests for the downward radiance accumulator."""

    def test_zero_at_top(self, column):
        flux_dn = calc_radiance_dn(
            1.0, column["transmittance"], column["source"], column["overlap"].v_overlap
        )
        assert flux_dn.shape == (1, 4)
        assert flux_dn[0, 0] == 0.0

    def test_first_layer_emission(self, column):
        flux_dn = calc_radiance_dn(
            1.0, column["transmittance"], column["source"], column["overlap"].v_overlap
        )
        assert flux_dn[0, 1] == pytest.approx(column["source"][0, :, 0].sum())

    def test_linear_in_weight(self, column):
        args = (column["transmittance"], column["source"], column["overlap"].v_overlap)
        np.testing.assert_allclose(
            calc_radiance_dn(0.3, *args), 0.3 * calc_radiance_dn(1.0, *args)
        )

    def test_transparent_column(self, column):
        """With no absorption, emission accumulates down the column."""
        transmittance = np.ones_like(column["transmittance"])
        flux_dn = calc_radiance_dn(
            1.0, transmittance, column["source"], column["overlap"].v_overlap
        )
        expected = np.concatenate([[0.0], np.cumsum(column["source"][0].sum(axis=0))])
        np.testing.assert_allclose(flux_dn[0], expected)


class TestRadianceUp:
    """Tests for the upward radiance accumulator."""

    def test_surface_value(self, column):
        surf = np.array([[300.0, 0.0, 0.0]])
        flux_up = calc_radiance_up(
            0.5, surf, column["transmittance"], column["source"], column["overlap"].u_overlap
        )
        assert flux_up.shape == (1, 4)
        assert flux_up[0, -1] == pytest.approx(150.0)

    def test_black_column_without_emission(self, column):
        zeros = np.zeros_like(column["source"])
        flux_up = calc_radiance_up(
            1.0,
            np.array([[300.0, 0.0, 0.0]]),
            np.zeros_like(column["transmittance"]),
            zeros,
            column["overlap"].u_overlap,
        )
        np.testing.assert_allclose(flux_up[0, :-1], 0.0)

    def test_transparent_column(self, column):
        surf = 350.0 * column["region_fracs"][np.newaxis, :, -1]
        flux_up = calc_radiance_up(
            1.0,
            surf,
            np.ones_like(column["transmittance"]),
            np.zeros_like(column["source"]),
            column["overlap"].u_overlap,
        )
        np.testing.assert_allclose(flux_up[0], 350.0)


class TestAngleFolding:
    """Contributions from different angles add independently."""

    def test_fold_equals_sum_of_angles(self, column):
        quadrature = select_quadrature(3)
        v = column["overlap"].v_overlap
        u = column["overlap"].u_overlap
        surf = 300.0 * column["region_fracs"][np.newaxis, :, -1]

        def contribution(mu, weight):
            transmittance = column["transmittance"] ** (0.5 / mu)
            return (
                calc_radiance_up(weight, surf, transmittance, column["source"], u),
                calc_radiance_dn(weight, transmittance, column["source"], v),
            )

        flux_up, flux_dn = fold_angles(quadrature, contribution, (1, 4))

        parts = [contribution(mu, weight) for mu, weight in quadrature]
        np.testing.assert_allclose(flux_up, sum(p[0] for p in parts))
        np.testing.assert_allclose(flux_dn, sum(p[1] for p in parts))

    def test_empty_contribution(self, column):
        flux_up, flux_dn = fold_angles(
            select_quadrature(2), lambda mu, w: (np.zeros((1, 4)), np.zeros((1, 4))), (1, 4)
        )
        np.testing.assert_array_equal(flux_up, 0.0)
        np.testing.assert_array_equal(flux_dn, 0.0)
