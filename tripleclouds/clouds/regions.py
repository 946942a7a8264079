"""
Partitioning of a gridbox into clear and cloudy regions.

A cloud-fraction profile (and, for three regions, a profile of the
fractional standard deviation of in-cloud optical depth) is converted into
the area fraction of each horizontally homogeneous region and an optical
depth scaling for each cloudy region.

Region 1 (index 0 in the arrays) is always clear. In the three-region
("Tripleclouds") case region 2 is the optically thin and region 3 the
optically thick part of the cloud. Following Shonk and Hogan (2008) the
thin region takes the 16th percentile of the sub-grid optical depth
distribution, and the thick region is chosen so that the mean in-cloud
optical depth is conserved.

References
----------
Shonk, J.K.P. and Hogan, R.J., 2008: Tripleclouds: An efficient method for
representing horizontal cloud inhomogeneity in 1D radiation schemes by
using three regions at each height. J. Climate, 21, 2352-2370.

Hogan, R.J., et al., 2019: Flexible treatment of radiative transfer in
complex urban canopies for use in weather and climate models. Appendix on
the gamma distribution.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from tripleclouds.utils.constants import (
    CLOUD_FRACTION_THRESHOLD,
    DISTRIBUTIONS,
    LOWER_FRAC_FSD_GRADIENT,
    LOWER_FRAC_FSD_INTERCEPT,
    MAX_LOWER_FRAC,
    MIN_GAMMA_OD_SCALING,
    MIN_LOWER_FRAC,
    MIN_THICK_FRACTION,
    REGION_COUNTS,
)
from tripleclouds.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionProperties:
    """
    Area fractions and optical depth scalings of each region.

    Attributes
    ----------
    region_fracs : ndarray
        Area fraction of each region, shape (n_regions, n_levels); row 0 is
        the clear region
    od_scaling : ndarray
        Multiplier applied to the in-cloud optical depth in each cloudy
        region, shape (n_regions - 1, n_levels); row 0 is region 2
    """

    region_fracs: np.ndarray
    od_scaling: np.ndarray

    @property
    def num_regions(self) -> int:
        return self.region_fracs.shape[0]

    @property
    def num_levels(self) -> int:
        return self.region_fracs.shape[1]

    @property
    def cloud_fraction(self) -> np.ndarray:
        """Total cloud fraction at each level."""
        return 1.0 - self.region_fracs[0]


def _clear_levels(cloud_fraction: np.ndarray, threshold: float) -> np.ndarray:
    return cloud_fraction < threshold


def _sanitize_fsd(fractional_std: np.ndarray, is_clear: np.ndarray) -> np.ndarray:
    # FSD is undefined in clear layers and may be passed as NaN there
    return np.where(is_clear, 0.0, np.nan_to_num(fractional_std))


def lognormal_thin_scaling(fractional_std: np.ndarray) -> np.ndarray:
    """
    16th percentile of a lognormal distribution with unit mean.

    If the equivalent normal distribution has mean mu and standard
    deviation sigma, the 16th percentile of the lognormal is very close to
    exp(mu - sigma).

    Parameters
    ----------
    fractional_std : array_like
        Fractional standard deviation of the distribution

    Returns
    -------
    scaling : ndarray
        Optical depth scaling of the thin region
    """
    variance_plus_one = np.asarray(fractional_std, dtype=float) ** 2 + 1.0
    return np.exp(-np.sqrt(np.log(variance_plus_one))) / np.sqrt(variance_plus_one)


def gamma_thin_scaling(fractional_std: np.ndarray) -> np.ndarray:
    """
    Approximate 16th percentile of a gamma distribution with unit mean.

    The polynomial-exponential fit tends to zero for large fractional
    standard deviations, so it is floored at MIN_GAMMA_OD_SCALING.

    Parameters
    ----------
    fractional_std : array_like
        Fractional standard deviation of the distribution

    Returns
    -------
    scaling : ndarray
        Optical depth scaling of the thin region
    """
    fsd = np.asarray(fractional_std, dtype=float)
    return MIN_GAMMA_OD_SCALING + (1.0 - MIN_GAMMA_OD_SCALING) * np.exp(
        -fsd * (1.0 + 0.5 * fsd * (1.0 + 0.5 * fsd))
    )


def gamma_lower_fraction(fractional_std: np.ndarray) -> np.ndarray:
    """Fraction of the cloud assigned to the thin region for a gamma distribution."""
    fsd = np.asarray(fractional_std, dtype=float)
    return np.clip(
        LOWER_FRAC_FSD_INTERCEPT + fsd * LOWER_FRAC_FSD_GRADIENT,
        MIN_LOWER_FRAC,
        MAX_LOWER_FRAC,
    )


def two_region_properties(
    cloud_fraction: np.ndarray,
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
) -> RegionProperties:
    """
    Clear and cloudy regions with no in-cloud variability ("Doubleclouds").

    Parameters
    ----------
    cloud_fraction : array_like
        Cloud fraction at each level, shape (n_levels,)
    cloud_fraction_threshold : float
        Cloud fractions below this are treated as clear

    Returns
    -------
    properties : RegionProperties
        Two-region fractions and unit optical depth scaling
    """
    cloud_fraction = np.asarray(cloud_fraction, dtype=float)
    is_clear = _clear_levels(cloud_fraction, cloud_fraction_threshold)
    cloudy = np.where(is_clear, 0.0, cloud_fraction)

    region_fracs = np.stack([1.0 - cloudy, cloudy])
    od_scaling = np.ones((1, cloud_fraction.size))
    return RegionProperties(region_fracs=region_fracs, od_scaling=od_scaling)


def lognormal_region_properties(
    cloud_fraction: np.ndarray,
    fractional_std: np.ndarray,
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
) -> RegionProperties:
    """
    Three regions assuming a lognormal in-cloud optical depth distribution.

    The two cloudy regions share the cloud fraction equally; the thick
    region scaling is 2 minus the thin region scaling so that their mean
    is exactly 1.

    Parameters
    ----------
    cloud_fraction : array_like
        Cloud fraction at each level, shape (n_levels,)
    fractional_std : array_like
        Fractional standard deviation of in-cloud optical depth, shape (n_levels,)
    cloud_fraction_threshold : float
        Cloud fractions below this are treated as clear

    Returns
    -------
    properties : RegionProperties
        Three-region fractions and optical depth scalings
    """
    cloud_fraction = np.asarray(cloud_fraction, dtype=float)
    is_clear = _clear_levels(cloud_fraction, cloud_fraction_threshold)
    fsd = _sanitize_fsd(np.asarray(fractional_std, dtype=float), is_clear)

    half_cloud = np.where(is_clear, 0.0, 0.5 * cloud_fraction)
    clear = np.where(is_clear, 1.0, 1.0 - cloud_fraction)

    thin_scaling = np.where(is_clear, 1.0, lognormal_thin_scaling(fsd))
    thick_scaling = np.where(is_clear, 1.0, 2.0 - thin_scaling)

    return RegionProperties(
        region_fracs=np.stack([clear, half_cloud, half_cloud]),
        od_scaling=np.stack([thin_scaling, thick_scaling]),
    )


def gamma_region_properties(
    cloud_fraction: np.ndarray,
    fractional_std: np.ndarray,
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
) -> RegionProperties:
    """
    Three regions assuming a gamma in-cloud optical depth distribution.

    At large fractional standard deviations two equally weighted points
    cannot capture a gamma distribution, so the thin region is given more
    weight (see `gamma_lower_fraction`). The thick region takes the rest of
    the cloud, and its scaling is solved so the mean in-cloud optical depth
    is conserved.

    Parameters
    ----------
    cloud_fraction : array_like
        Cloud fraction at each level, shape (n_levels,)
    fractional_std : array_like
        Fractional standard deviation of in-cloud optical depth, shape (n_levels,)
    cloud_fraction_threshold : float
        Cloud fractions below this are treated as clear

    Returns
    -------
    properties : RegionProperties
        Three-region fractions and optical depth scalings
    """
    cloud_fraction = np.asarray(cloud_fraction, dtype=float)
    is_clear = _clear_levels(cloud_fraction, cloud_fraction_threshold)
    fsd = _sanitize_fsd(np.asarray(fractional_std, dtype=float), is_clear)

    clear = np.where(is_clear, 1.0, 1.0 - cloud_fraction)
    thin = np.where(is_clear, 0.0, cloud_fraction * gamma_lower_fraction(fsd))
    thick = np.where(is_clear, 0.0, 1.0 - clear - thin)

    degenerate = ~is_clear & (thick < MIN_THICK_FRACTION)
    if np.any(degenerate):
        logger.warning(
            f"Thick cloud fraction floored at {MIN_THICK_FRACTION} "
            f"on {int(np.count_nonzero(degenerate))} level(s)"
        )
        thick = np.where(degenerate, MIN_THICK_FRACTION, thick)

    thin_scaling = np.where(is_clear, 1.0, gamma_thin_scaling(fsd))
    safe_thick = np.where(is_clear, 1.0, thick)
    thick_scaling = np.where(
        is_clear, 1.0, (cloud_fraction - thin * thin_scaling) / safe_thick
    )

    return RegionProperties(
        region_fracs=np.stack([clear, thin, thick]),
        od_scaling=np.stack([thin_scaling, thick_scaling]),
    )


def calc_region_properties(
    cloud_fraction: np.ndarray,
    fractional_std: Optional[np.ndarray] = None,
    num_regions: int = 3,
    distribution: str = "gamma",
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
) -> RegionProperties:
    """
    Compute region fractions and optical depth scalings.

    Convenience wrapper around `get_partitioner`.
    """
    partitioner = get_partitioner(num_regions, distribution)
    return partitioner.partition(
        cloud_fraction, fractional_std, cloud_fraction_threshold
    )


class RegionPartitioner(ABC):
    """Strategy for splitting each level into homogeneous regions."""

    num_regions: int

    @abstractmethod
    def partition(
        self,
        cloud_fraction: np.ndarray,
        fractional_std: Optional[np.ndarray] = None,
        cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
    ) -> RegionProperties:
        """Return the region fractions and optical depth scalings."""


class TwoRegionPartitioner(RegionPartitioner):
    """One clear and one homogeneous cloudy region."""

    num_regions = 2

    def partition(
        self,
        cloud_fraction: np.ndarray,
        fractional_std: Optional[np.ndarray] = None,
        cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
    ) -> RegionProperties:
        # In-cloud variability cannot be represented with one cloudy region
        return two_region_properties(cloud_fraction, cloud_fraction_threshold)


class ThreeRegionPartitioner(RegionPartitioner):
    """
    One clear and two cloudy regions of differing optical depth.

    Attributes
    ----------
    distribution : str
        Assumed shape of the sub-grid optical depth distribution,
        "gamma" or "lognormal"
    """

    num_regions = 3

    def __init__(self, distribution: str = "gamma"):
        if distribution not in DISTRIBUTIONS:
            raise ConfigurationError(
                f"Unknown optical depth distribution: {distribution}. "
                f"Use one of {DISTRIBUTIONS}"
            )
        self.distribution = distribution

    def __repr__(self) -> str:
        return f"ThreeRegionPartitioner(distribution={self.distribution!r})"

    def partition(
        self,
        cloud_fraction: np.ndarray,
        fractional_std: Optional[np.ndarray] = None,
        cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD,
    ) -> RegionProperties:
        if fractional_std is None:
            raise ValueError("fractional_std is required for three regions")
        if self.distribution == "gamma":
            return gamma_region_properties(
                cloud_fraction, fractional_std, cloud_fraction_threshold
            )
        return lognormal_region_properties(
            cloud_fraction, fractional_std, cloud_fraction_threshold
        )


def get_partitioner(num_regions: int = 3, distribution: str = "gamma") -> RegionPartitioner:
    """
    Build the partitioning strategy for a given region count.

    Parameters
    ----------
    num_regions : int
        2 ("Doubleclouds") or 3 ("Tripleclouds")
    distribution : str
        Sub-grid optical depth distribution used by the three-region strategy

    Returns
    -------
    partitioner : RegionPartitioner

    Raises
    ------
    ConfigurationError
        If the region count or distribution is not supported
    """
    if num_regions not in REGION_COUNTS:
        raise ConfigurationError(
            f"Number of regions must be one of {REGION_COUNTS}, got {num_regions}"
        )
    if num_regions == 2:
        return TwoRegionPartitioner()
    return ThreeRegionPartitioner(distribution)
