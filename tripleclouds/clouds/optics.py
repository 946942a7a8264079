"""
Optical properties of each region and identification of clear layers.

Gases and aerosols are assumed to absorb only, so they add optical depth
to every region but dilute the single scattering albedo of the cloudy
regions. The asymmetry factor of the gas-cloud mixture equals that of
the cloud regardless of the optical depth scaling.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class RegionOpticalProperties:
    """
    Combined gas and cloud optical properties in each region.

    Attributes
    ----------
    od : ndarray
        Total optical depth, shape (n_spec, n_regions, n_levels)
    ssa : ndarray, optional
        Single scattering albedo of the cloudy regions only, shape
        (n_spec, n_regions - 1, n_levels); None when scattering is ignored
    asymmetry : ndarray, optional
        Cloud asymmetry factor, shape (n_spec, n_levels)
    """

    od: np.ndarray
    ssa: Optional[np.ndarray] = None
    asymmetry: Optional[np.ndarray] = None

    @property
    def scattering(self) -> bool:
        return self.ssa is not None

    def region_ssa(self) -> np.ndarray:
        """Single scattering albedo of every region, zero in the clear region."""
        n_spec, n_regions, n_levels = self.od.shape
        ssa = np.zeros((n_spec, n_regions, n_levels))
        if self.ssa is not None:
            ssa[:, 1:, :] = self.ssa
        return ssa

    def region_asymmetry(self) -> np.ndarray:
        """Asymmetry factor broadcast to every region."""
        n_spec, n_regions, n_levels = self.od.shape
        if self.asymmetry is None:
            return np.zeros((n_spec, n_regions, n_levels))
        return np.repeat(self.asymmetry[:, np.newaxis, :], n_regions, axis=1)


def mix_no_scattering_optical_depth(
    od_clear: np.ndarray,
    od_cloud: np.ndarray,
    od_scaling: np.ndarray,
) -> RegionOpticalProperties:
    """
    Optical depth of each region ignoring scattering.

    Parameters
    ----------
    od_clear : array_like
        Gas and aerosol optical depth, shape (n_spec, n_levels)
    od_cloud : array_like
        In-cloud optical depth, shape (n_spec, n_levels)
    od_scaling : array_like
        Cloudy region optical depth scaling, shape (n_regions - 1, n_levels)

    Returns
    -------
    properties : RegionOpticalProperties
        Optical depth per region, with no albedo or asymmetry
    """
    od_clear = np.asarray(od_clear, dtype=float)
    od_cloud = np.asarray(od_cloud, dtype=float)
    od_scaling = np.asarray(od_scaling, dtype=float)

    cloudy_od = od_clear[:, np.newaxis, :] + od_cloud[:, np.newaxis, :] * od_scaling[np.newaxis, :, :]
    od = np.concatenate([od_clear[:, np.newaxis, :], cloudy_od], axis=1)
    return RegionOpticalProperties(od=od)


def mix_optical_properties(
    od_clear: np.ndarray,
    od_cloud: np.ndarray,
    ssa_cloud: np.ndarray,
    asymmetry_cloud: np.ndarray,
    od_scaling: np.ndarray,
) -> RegionOpticalProperties:
    """
    Optical depth and single scattering albedo of each region.

    The scattering optical depth of the cloud is preserved exactly:
    ssa = ssa_cloud * od_cloud * scaling / (od_clear + od_cloud * scaling).

    Parameters
    ----------
    od_clear : array_like
        Gas and aerosol optical depth, shape (n_spec, n_levels)
    od_cloud : array_like
        In-cloud optical depth, shape (n_spec, n_levels)
    ssa_cloud : array_like
        Cloud single scattering albedo, shape (n_spec, n_levels)
    asymmetry_cloud : array_like
        Cloud asymmetry factor, shape (n_spec, n_levels)
    od_scaling : array_like
        Cloudy region optical depth scaling, shape (n_regions - 1, n_levels)

    Returns
    -------
    properties : RegionOpticalProperties
    """
    mixed = mix_no_scattering_optical_depth(od_clear, od_cloud, od_scaling)
    od_scaling = np.asarray(od_scaling, dtype=float)
    ssa_cloud = np.asarray(ssa_cloud, dtype=float)

    scattering_od = (
        ssa_cloud[:, np.newaxis, :]
        * np.asarray(od_cloud, dtype=float)[:, np.newaxis, :]
        * od_scaling[np.newaxis, :, :]
    )
    cloudy_od = mixed.od[:, 1:, :]
    ssa = np.divide(
        scattering_od,
        cloudy_od,
        out=np.zeros_like(scattering_od),
        where=cloudy_od > 0.0,
    )
    return RegionOpticalProperties(
        od=mixed.od,
        ssa=ssa,
        asymmetry=np.asarray(asymmetry_cloud, dtype=float),
    )


def cloud_free_layers(region_fracs: np.ndarray) -> np.ndarray:
    """
    Flag layers containing no cloud.

    Dummy cloud-free layers are added above the top of the atmosphere
    (index 0) and below the surface (index n_levels + 1).

    Parameters
    ----------
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)

    Returns
    -------
    is_cloud_free : ndarray of bool
        Shape (n_levels + 2,)
    """
    region_fracs = np.asarray(region_fracs)
    return np.concatenate([[True], region_fracs[0] == 1.0, [True]])
