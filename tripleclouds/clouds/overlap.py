"""
Overlap matrices between the regions of adjacent layers.

Uses the exponential-random overlap of Hogan and Illingworth (2000): the
overlap parameter alpha between two layers is 1 for maximum overlap and 0
for random overlap. Within the cloudy part of a pair of layers, the thin
and thick regions are overlapped with a parameter alpha^(1/s), where s is
the ratio of the decorrelation length of cloud inhomogeneities to that of
cloud boundaries (Shonk and Hogan, 2008).

The matrices are indexed by interface: interface k lies above layer k, so
interface 0 is the top of the atmosphere and interface n_levels is the
surface. A clear dummy layer is assumed above and below the column.

References
----------
Hogan, R.J. and Illingworth, A.J., 2000: Deriving cloud overlap statistics
from radar. Q. J. R. Meteorol. Soc., 126, 2903-2909.

Hogan, R.J., et al., 2016: Representing 3-D cloud radiation effects in
two-stream schemes: 2. Matrix formulation and broadband evaluation.
J. Geophys. Res., 121, 8583-8599.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from tripleclouds.utils.constants import (
    CLOUD_FRACTION_THRESHOLD,
    DEFAULT_DECORRELATION_SCALING,
    MAX_CLOUD_FRACTION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlapMatrices:
    """
    Upward and downward overlap matrices.

    Attributes
    ----------
    u_overlap : ndarray
        Shape (n_regions, n_regions, n_levels + 1). Element [i, j, k] is the
        fraction of the flux leaving region j at the top of layer k that
        enters region i at the base of layer k - 1.
    v_overlap : ndarray
        Shape (n_regions, n_regions, n_levels + 1). Element [i, j, k] is the
        fraction of the flux leaving region j at the base of layer k - 1
        that enters region i at the top of layer k.
    cloud_cover : float, optional
        Total cloud cover, if requested
    """

    u_overlap: np.ndarray
    v_overlap: np.ndarray
    cloud_cover: Optional[float] = None


def pair_cloud_cover(
    cloud_fraction_upper: np.ndarray,
    cloud_fraction_lower: np.ndarray,
    overlap_param: np.ndarray,
) -> np.ndarray:
    """Combined cloud cover of two layers under exponential-random overlap."""
    cloud_fraction_upper = np.asarray(cloud_fraction_upper, dtype=float)
    cloud_fraction_lower = np.asarray(cloud_fraction_lower, dtype=float)
    overlap_param = np.asarray(overlap_param, dtype=float)
    maximum = np.maximum(cloud_fraction_upper, cloud_fraction_lower)
    random = (
        cloud_fraction_upper
        + cloud_fraction_lower
        - cloud_fraction_upper * cloud_fraction_lower
    )
    return overlap_param * maximum + (1.0 - overlap_param) * random


def cloud_cover_exp_ran(cloud_fraction: np.ndarray, overlap_param: np.ndarray) -> float:
    """
    Total cloud cover of a column under exponential-random overlap.

    Parameters
    ----------
    cloud_fraction : array_like
        Cloud fraction of each layer, shape (n_levels,)
    overlap_param : array_like
        Overlap parameter between adjacent layers, shape (n_levels - 1,)

    Returns
    -------
    cover : float
    """
    cloud_fraction = np.asarray(cloud_fraction, dtype=float)
    overlap_param = np.asarray(overlap_param, dtype=float)
    if cloud_fraction.size == 0:
        return 0.0

    pair_cover = pair_cloud_cover(cloud_fraction[:-1], cloud_fraction[1:], overlap_param)

    cum_product = 1.0 - cloud_fraction[0]
    for jlev in range(cloud_fraction.size - 1):
        if cloud_fraction[jlev] >= MAX_CLOUD_FRACTION:
            cum_product = 0.0
        else:
            cum_product *= (1.0 - pair_cover[jlev]) / (1.0 - cloud_fraction[jlev])
    return float(1.0 - cum_product)


def _maximum_overlap(upper: np.ndarray, lower: np.ndarray) -> np.ndarray:
    """Overlap two partitions of unity, thinnest regions aligned first."""
    n = upper.size
    overlap = np.zeros((n, n))
    remaining_upper = upper.copy()
    remaining_lower = lower.copy()
    # Greedy assignment in order of increasing optical depth
    i = j = 0
    while i < n and j < n:
        amount = min(remaining_upper[i], remaining_lower[j])
        overlap[i, j] += amount
        remaining_upper[i] -= amount
        remaining_lower[j] -= amount
        if remaining_upper[i] <= remaining_lower[j]:
            i += 1
        else:
            j += 1
    return overlap


def _pair_overlap(
    upper_fracs: np.ndarray,
    lower_fracs: np.ndarray,
    overlap_param: float,
    decorrelation_scaling: float,
    cloud_fraction_threshold: float,
) -> np.ndarray:
    """
    Area of the gridbox shared by each pair of regions in two layers.

    Returns an (n_regions, n_regions) array indexed [upper, lower] whose
    row sums are the upper fractions and column sums the lower fractions.
    """
    n_regions = upper_fracs.size
    cf_upper = 1.0 - upper_fracs[0]
    cf_lower = 1.0 - lower_fracs[0]
    pair_cover = float(pair_cloud_cover(cf_upper, cf_lower, overlap_param))

    overlap = np.zeros((n_regions, n_regions))
    overlap[0, 0] = max(1.0 - pair_cover, 0.0)

    # Shape of the cloud in each layer, normalized to sum to 1
    if cf_upper >= cloud_fraction_threshold:
        upper_shape = upper_fracs[1:] / cf_upper
    else:
        upper_shape = np.zeros(n_regions - 1)
    if cf_lower >= cloud_fraction_threshold:
        lower_shape = lower_fracs[1:] / cf_lower
    else:
        lower_shape = np.zeros(n_regions - 1)

    overlap[0, 1:] = max(pair_cover - cf_upper, 0.0) * lower_shape
    overlap[1:, 0] = max(pair_cover - cf_lower, 0.0) * upper_shape

    cloud_cloud = max(cf_upper + cf_lower - pair_cover, 0.0)
    if cloud_cloud > 0.0:
        if n_regions == 2:
            overlap[1, 1] = cloud_cloud
        else:
            inhom_param = max(overlap_param, 0.0) ** (1.0 / decorrelation_scaling)
            overlap[1:, 1:] = cloud_cloud * (
                inhom_param * _maximum_overlap(upper_shape, lower_shape)
                + (1.0 - inhom_param) * np.outer(upper_shape, lower_shape)
            )
    return overlap


def _normalize_columns(overlap: np.ndarray, fracs: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """Divide each column by the area of its source region."""
    matrix = np.empty_like(overlap)
    for j in range(fracs.size):
        if fracs[j] > 0.0:
            matrix[:, j] = overlap[:, j] / fracs[j]
        else:
            # An empty region carries no flux; route it like a random overlap
            matrix[:, j] = fallback
    return matrix


def calc_overlap_matrices(
    region_fracs: np.ndarray,
    overlap_param: np.ndarray,
    decorrelation_scaling: float = DEFAULT_DECORRELATION_SCALING,
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
    want_cloud_cover: bool = False,
) -> OverlapMatrices:
    """
    Compute the upward and downward overlap matrices of a column.

    Parameters
    ----------
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)
    overlap_param : array_like
        Overlap parameter between adjacent layers, shape (n_levels - 1,)
    decorrelation_scaling : float
        Ratio of inhomogeneity to cloud-boundary decorrelation lengths
    cloud_fraction_threshold : float
        Cloud fractions below this are treated as clear
    want_cloud_cover : bool
        Also compute the total cloud cover

    Returns
    -------
    matrices : OverlapMatrices
    """
    region_fracs = np.asarray(region_fracs, dtype=float)
    overlap_param = np.asarray(overlap_param, dtype=float)
    n_regions, n_levels = region_fracs.shape

    clear_layer = np.zeros(n_regions)
    clear_layer[0] = 1.0

    u_overlap = np.zeros((n_regions, n_regions, n_levels + 1))
    v_overlap = np.zeros((n_regions, n_regions, n_levels + 1))

    for jint in range(n_levels + 1):
        upper = region_fracs[:, jint - 1] if jint > 0 else clear_layer
        lower = region_fracs[:, jint] if jint < n_levels else clear_layer
        # Overlap is irrelevant next to the dummy clear layers
        alpha = overlap_param[jint - 1] if 0 < jint < n_levels else 0.0

        overlap = _pair_overlap(
            upper, lower, alpha, decorrelation_scaling, cloud_fraction_threshold
        )
        v_overlap[:, :, jint] = _normalize_columns(overlap.T, upper, lower)
        u_overlap[:, :, jint] = _normalize_columns(overlap, lower, upper)

    cloud_cover = None
    if want_cloud_cover:
        cloud_cover = cloud_cover_exp_ran(1.0 - region_fracs[0], overlap_param)
        logger.debug(f"Cloud cover {cloud_cover:.4f}")

    return OverlapMatrices(u_overlap=u_overlap, v_overlap=v_overlap, cloud_cover=cloud_cover)
