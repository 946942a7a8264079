"""
Radiative properties of individual homogeneous layers.

Longwave two-stream reflectance and transmittance follow Meador and Weaver
(1980) with the diffusivity factor D = 1.66, and the emission source
terms assume the Planck function varies linearly with optical depth
through the layer. Directional sources for radiance calculations follow
Fu et al. (1997): the two-stream fluxes provide the scattering source
function for each zenith angle.

All sources are multiplied by the area fraction of their region, so that
fluxes summed over regions give the gridbox mean.

References
----------
Meador, W.E. and Weaver, W.R., 1980: Two-stream approximations to radiative
transfer in planetary atmospheres. J. Atmos. Sci., 37, 630-643.

Fu, Q., et al., 1997: Multiple scattering parameterization in thermal
infrared radiative transfer. J. Atmos. Sci., 54, 2799-2812.
"""

import logging
from typing import Tuple

import numpy as np

from tripleclouds.clouds.optics import RegionOpticalProperties
from tripleclouds.utils.constants import (
    LW_DIFFUSIVITY,
    MIN_K_SQUARED,
    MIN_OD_FOR_PLANCK_GRADIENT,
)

logger = logging.getLogger(__name__)


def _planck_top_base(planck_hl: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Planck flux at the top and base of each layer, shape (n_spec, 1, n_levels)."""
    planck_hl = np.asarray(planck_hl, dtype=float)
    return planck_hl[:, np.newaxis, :-1], planck_hl[:, np.newaxis, 1:]


def _linear_source(
    source_near: np.ndarray,
    source_far: np.ndarray,
    od: np.ndarray,
    mu: float,
    transmittance: np.ndarray,
) -> np.ndarray:
    """
    Emission leaving one face of a layer along cosine mu.

    The source function varies linearly in optical depth from
    `source_near` at the exit face to `source_far` at the opposite face.
    Thin layers use the mean source function.
    """
    is_thick = od > MIN_OD_FOR_PLANCK_GRADIENT
    safe_od = np.where(is_thick, od, 1.0)
    gradient_term = mu * (1.0 - transmittance) / safe_od - transmittance
    thick = source_near * (1.0 - transmittance) + (source_far - source_near) * gradient_term
    thin = 0.5 * (source_near + source_far) * (1.0 - transmittance)
    return np.where(is_thick, thick, thin)


def calc_reflectance_transmittance(
    planck_hl: np.ndarray,
    region_fracs: np.ndarray,
    optics: RegionOpticalProperties,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Diffuse reflectance, transmittance and emission of each layer and region.

    Parameters
    ----------
    planck_hl : array_like
        Planck flux at half levels, shape (n_spec, n_levels + 1)
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)
    optics : RegionOpticalProperties
        Optical depth, single scattering albedo and asymmetry factor

    Returns
    -------
    reflectance, transmittance : ndarray
        Shape (n_spec, n_regions, n_levels)
    source_up, source_dn : ndarray
        Area-weighted emission up from the top and down from the base of
        each layer (W/m^2), shape (n_spec, n_regions, n_levels)
    """
    od = optics.od
    ssa = optics.region_ssa()
    g = optics.region_asymmetry()

    gamma1 = LW_DIFFUSIVITY * (1.0 - 0.5 * ssa * (1.0 + g))
    gamma2 = LW_DIFFUSIVITY * 0.5 * ssa * (1.0 - g)
    k = np.sqrt(np.maximum((gamma1 - gamma2) * (gamma1 + gamma2), MIN_K_SQUARED))

    exponential = np.exp(-k * od)
    exponential2 = exponential * exponential
    factor = 1.0 / (k + gamma1 + (k - gamma1) * exponential2)
    reflectance = gamma2 * (1.0 - exponential2) * factor
    transmittance = 2.0 * k * exponential * factor

    planck_top, planck_base = _planck_top_base(planck_hl)
    is_thick = od > MIN_OD_FOR_PLANCK_GRADIENT
    coeff = np.where(
        is_thick,
        (planck_base - planck_top) / (np.where(is_thick, od, 1.0) * (gamma1 + gamma2)),
        0.0,
    )
    planck_mean = 0.5 * (planck_top + planck_base)
    coeff_up_top = np.where(is_thick, coeff + planck_top, planck_mean)
    coeff_up_base = np.where(is_thick, coeff + planck_base, planck_mean)
    coeff_dn_top = np.where(is_thick, -coeff + planck_top, planck_mean)
    coeff_dn_base = np.where(is_thick, -coeff + planck_base, planck_mean)

    weight = np.asarray(region_fracs, dtype=float)[np.newaxis, :, :]
    source_up = weight * (
        coeff_up_top - reflectance * coeff_dn_top - transmittance * coeff_up_base
    )
    source_dn = weight * (
        coeff_dn_base - reflectance * coeff_up_base - transmittance * coeff_dn_top
    )
    return reflectance, transmittance, source_up, source_dn


def calc_no_scattering_transmittance(
    planck_hl: np.ndarray,
    region_fracs: np.ndarray,
    od: np.ndarray,
    secant: float = LW_DIFFUSIVITY,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Transmittance and emission of non-scattering layers.

    Parameters
    ----------
    planck_hl : array_like
        Planck flux at half levels, shape (n_spec, n_levels + 1)
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)
    od : array_like
        Optical depth, shape (n_spec, n_regions, n_levels)
    secant : float
        Secant of the zenith angle of the path, the diffusivity factor by
        default

    Returns
    -------
    transmittance, source_up, source_dn : ndarray
        Shape (n_spec, n_regions, n_levels)
    """
    od = np.asarray(od, dtype=float)
    mu = 1.0 / secant
    transmittance = np.exp(-od * secant)
    planck_top, planck_base = _planck_top_base(planck_hl)
    weight = np.asarray(region_fracs, dtype=float)[np.newaxis, :, :]

    source_up = weight * _linear_source(planck_top, planck_base, od, mu, transmittance)
    source_dn = weight * _linear_source(planck_base, planck_top, od, mu, transmittance)
    return transmittance, source_up, source_dn


def calc_no_scattering_radiance_source(
    mu: float,
    region_fracs: np.ndarray,
    planck_hl: np.ndarray,
    od: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Transmittance and emission along a zenith angle, ignoring scattering.

    Sources are in flux units, i.e. pi times the radiance.
    """
    return calc_no_scattering_transmittance(planck_hl, region_fracs, od, secant=1.0 / mu)


def calc_radiance_source(
    mu: float,
    region_fracs: np.ndarray,
    planck_hl: np.ndarray,
    optics: RegionOpticalProperties,
    flux_up_base: np.ndarray,
    flux_dn_base: np.ndarray,
    flux_up_top: np.ndarray,
    flux_dn_top: np.ndarray,
    do_3d_effects: bool = False,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Transmittance and emission along a zenith angle, including scattering.

    The scattering source function is computed from the two-stream fluxes
    assuming each hemisphere is isotropic and the phase function is
    1 + 3 g cos(theta).

    Parameters
    ----------
    mu : float
        Cosine of the zenith angle
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)
    planck_hl : array_like
        Planck flux at half levels, shape (n_spec, n_levels + 1)
    optics : RegionOpticalProperties
        Optical properties including single scattering albedo
    flux_up_base, flux_dn_base, flux_up_top, flux_dn_top : array_like
        Two-stream fluxes in each region, shape (n_spec, n_regions, n_levels)
    do_3d_effects : bool
        Represent 3D radiative effects; not yet represented, so 1D sources
        are returned

    Returns
    -------
    transmittance, source_up, source_dn : ndarray
        Shape (n_spec, n_regions, n_levels); sources in flux units
    """
    if do_3d_effects:
        logger.debug("3D effects requested; computing 1D radiance sources")

    od = optics.od
    ssa = optics.region_ssa()
    g = optics.region_asymmetry()
    transmittance = np.exp(-od / mu)

    planck_top, planck_base = _planck_top_base(planck_hl)
    thermal = (1.0 - ssa) * np.asarray(region_fracs, dtype=float)[np.newaxis, :, :]

    def scattering_source(flux_up, flux_dn, direction):
        return ssa * (
            0.5 * (flux_up + flux_dn)
            + direction * 0.75 * g * mu * (flux_up - flux_dn)
        )

    source_fn_up_top = thermal * planck_top + scattering_source(flux_up_top, flux_dn_top, 1.0)
    source_fn_up_base = thermal * planck_base + scattering_source(flux_up_base, flux_dn_base, 1.0)
    source_fn_dn_top = thermal * planck_top + scattering_source(flux_up_top, flux_dn_top, -1.0)
    source_fn_dn_base = thermal * planck_base + scattering_source(flux_up_base, flux_dn_base, -1.0)

    source_up = _linear_source(source_fn_up_top, source_fn_up_base, od, mu, transmittance)
    source_dn = _linear_source(source_fn_dn_base, source_fn_dn_top, od, mu, transmittance)
    return transmittance, source_up, source_dn
