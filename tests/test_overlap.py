"""Tests for cloud overlap matrices and cloud cover."""

import numpy as np
import pytest

from tripleclouds.clouds.overlap import (
    OverlapMatrices,
    calc_overlap_matrices,
    cloud_cover_exp_ran,
    pair_cloud_cover,
)
from tripleclouds.clouds.regions import calc_region_properties, two_region_properties


@pytest.fixture
def three_region_column():
    cloud_fraction = np.array([0.0, 0.4, 0.7, 0.0, 0.3])
    fsd = np.array([0.0, 0.8, 1.2, 0.0, 2.5])
    return calc_region_properties(cloud_fraction, fsd, distribution="gamma")


class TestCloudCover:
    """Tests for total cloud cover under exponential-random overlap."""

    def test_pair_cover_limits(self):
        assert pair_cloud_cover(0.5, 0.3, 1.0) == pytest.approx(0.5)
        assert pair_cloud_cover(0.5, 0.3, 0.0) == pytest.approx(0.65)

    def test_random_overlap(self):
        assert cloud_cover_exp_ran([0.5, 0.5], [0.0]) == pytest.approx(0.75)

    def test_maximum_overlap(self):
        assert cloud_cover_exp_ran([0.2, 0.5, 0.3], [1.0, 1.0]) == pytest.approx(0.5)

    def test_overcast_layer(self):
        assert cloud_cover_exp_ran([0.3, 1.0, 0.2], [0.5, 0.5]) == pytest.approx(1.0)

    def test_clear_column(self):
        assert cloud_cover_exp_ran(np.zeros(4), np.zeros(3)) == 0.0

    def test_cover_between_limits(self):
        cloud_fraction = np.array([0.1, 0.4, 0.3, 0.6])
        cover = cloud_cover_exp_ran(cloud_fraction, np.full(3, 0.6))
        random_cover = 1.0 - np.prod(1.0 - cloud_fraction)
        assert cloud_fraction.max() <= cover <= random_cover

    def test_returned_when_requested(self, three_region_column):
        alpha = np.full(4, 0.5)
        without = calc_overlap_matrices(three_region_column.region_fracs, alpha)
        with_cover = calc_overlap_matrices(
            three_region_column.region_fracs, alpha, want_cloud_cover=True
        )
        assert without.cloud_cover is None
        assert with_cover.cloud_cover == pytest.approx(
            cloud_cover_exp_ran(three_region_column.cloud_fraction, alpha)
        )


class TestOverlapMatrices:
    """Tests for the upward and downward overlap matrices."""

    @pytest.mark.parametrize("alpha", [0.0, 0.5, 1.0])
    def test_shape(self, three_region_column, alpha):
        matrices = calc_overlap_matrices(three_region_column.region_fracs, np.full(4, alpha))
        assert isinstance(matrices, OverlapMatrices)
        assert matrices.u_overlap.shape == (3, 3, 6)
        assert matrices.v_overlap.shape == (3, 3, 6)

    @pytest.mark.parametrize("alpha", [0.0, 0.3, 0.9, 1.0])
    def test_columns_sum_to_one(self, three_region_column, alpha):
        """Flux leaving any region is fully distributed to the next layer."""
        matrices = calc_overlap_matrices(three_region_column.region_fracs, np.full(4, alpha))
        np.testing.assert_allclose(matrices.v_overlap.sum(axis=0), 1.0, atol=1e-12)
        np.testing.assert_allclose(matrices.u_overlap.sum(axis=0), 1.0, atol=1e-12)

    def test_non_negative(self, three_region_column):
        matrices = calc_overlap_matrices(three_region_column.region_fracs, np.full(4, 0.7))
        assert np.all(matrices.v_overlap >= 0.0)
        assert np.all(matrices.u_overlap >= 0.0)

    def test_area_conserved(self, three_region_column):
        """Mapping the upper layer's areas downward gives the lower layer's areas."""
        fracs = three_region_column.region_fracs
        matrices = calc_overlap_matrices(fracs, np.full(4, 0.4))
        for jint in range(1, fracs.shape[1]):
            np.testing.assert_allclose(
                matrices.v_overlap[:, :, jint] @ fracs[:, jint - 1], fracs[:, jint], atol=1e-12
            )
            np.testing.assert_allclose(
                matrices.u_overlap[:, :, jint] @ fracs[:, jint], fracs[:, jint - 1], atol=1e-12
            )

    def test_top_of_atmosphere_enters_clear_region(self, three_region_column):
        """The dummy layer above the column is clear."""
        matrices = calc_overlap_matrices(three_region_column.region_fracs, np.full(4, 0.5))
        np.testing.assert_allclose(matrices.u_overlap[0, :, 0], 1.0)
        np.testing.assert_allclose(matrices.u_overlap[1:, :, 0], 0.0)

    def test_maximum_overlap_two_regions(self):
        """Cloud in the upper layer falls entirely into cloud below."""
        props = two_region_properties(np.array([0.3, 0.6]))
        matrices = calc_overlap_matrices(props.region_fracs, np.array([1.0]))
        v = matrices.v_overlap[:, :, 1]
        assert v[1, 1] == pytest.approx(1.0)
        assert v[0, 1] == pytest.approx(0.0)
        # Clear air above splits between the extra cloud and clear air below
        assert v[1, 0] == pytest.approx(0.3 / 0.7)

    def test_random_overlap_two_regions(self):
        props = two_region_properties(np.array([0.3, 0.6]))
        matrices = calc_overlap_matrices(props.region_fracs, np.array([0.0]))
        v = matrices.v_overlap[:, :, 1]
        np.testing.assert_allclose(v[:, 0], [0.4, 0.6])
        np.testing.assert_allclose(v[:, 1], [0.4, 0.6])

    def test_decorrelation_affects_cloudy_regions_only(self, three_region_column):
        fracs = three_region_column.region_fracs
        alpha = np.full(4, 0.8)
        a = calc_overlap_matrices(fracs, alpha, decorrelation_scaling=0.5)
        b = calc_overlap_matrices(fracs, alpha, decorrelation_scaling=2.0)
        np.testing.assert_allclose(a.v_overlap[0, 0], b.v_overlap[0, 0])
        assert not np.allclose(a.v_overlap[1:, 1:], b.v_overlap[1:, 1:])
