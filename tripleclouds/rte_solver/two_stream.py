"""
Two-stream flux solver for a column divided into regions.

Implements the Tripleclouds adding method: starting from the surface, the
albedo and upwelling source seen from the top of each layer are computed
separately in each region and passed up through the overlap matrices;
then the downwelling flux is passed down from the top of the atmosphere.

References
----------
Shonk, J.K.P. and Hogan, R.J., 2008: Tripleclouds: An efficient method for
representing horizontal cloud inhomogeneity in 1D radiation schemes by
using three regions at each height. J. Climate, 21, 2352-2370.

Hogan, R.J., et al., 2016: Representing 3-D cloud radiation effects in
two-stream schemes: 2. Matrix formulation and broadband evaluation.
J. Geophys. Res., 121, 8583-8599.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numba import jit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwoStreamFluxes:
    """
    Fluxes at the top and base of each layer in each region.

    All arrays have shape (n_spec, n_regions, n_levels) and are in W/m^2,
    weighted by region area so that a sum over regions gives the gridbox
    mean.
    """

    flux_up_base: np.ndarray
    flux_dn_base: np.ndarray
    flux_up_top: np.ndarray
    flux_dn_top: np.ndarray

    def half_level_fluxes(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Gridbox-mean fluxes at half levels.

        Returns
        -------
        flux_up, flux_dn : ndarray
            Shape (n_spec, n_levels + 1)
        """
        flux_up = np.concatenate(
            [self.flux_up_top.sum(axis=1), self.flux_up_base[:, :, -1].sum(axis=1)[:, np.newaxis]],
            axis=1,
        )
        flux_dn = np.concatenate(
            [self.flux_dn_top.sum(axis=1), self.flux_dn_base[:, :, -1].sum(axis=1)[:, np.newaxis]],
            axis=1,
        )
        return flux_up, flux_dn


@jit(nopython=True, cache=True)
def _two_stream_kernel(
    surf_emission: np.ndarray,
    surf_albedo: np.ndarray,
    surf_region_fracs: np.ndarray,
    reflectance: np.ndarray,
    transmittance: np.ndarray,
    source_up: np.ndarray,
    source_dn: np.ndarray,
    is_cloud_free_layer: np.ndarray,
    u_overlap: np.ndarray,
    v_overlap: np.ndarray,
):
    """Adding method over all spectral intervals, regions and layers."""
    n_spec, n_regions, n_levels = reflectance.shape

    albedo_base = np.zeros((n_spec, n_regions, n_levels))
    source_base = np.zeros((n_spec, n_regions, n_levels))
    albedo_top = np.zeros((n_spec, n_regions, n_levels))
    source_top = np.zeros((n_spec, n_regions, n_levels))
    inv_denom = np.zeros((n_spec, n_regions, n_levels))

    # Surface: emission is shared between the regions of the lowest layer
    for js in range(n_spec):
        for jr in range(n_regions):
            albedo_base[js, jr, n_levels - 1] = surf_albedo[js]
            source_base[js, jr, n_levels - 1] = surf_emission[js] * surf_region_fracs[jr]

    # Upward pass: albedo and source seen from the top of each layer
    for jlev in range(n_levels - 1, -1, -1):
        for js in range(n_spec):
            for jr in range(n_regions):
                r = reflectance[js, jr, jlev]
                t = transmittance[js, jr, jlev]
                a = albedo_base[js, jr, jlev]
                inv = 1.0 / (1.0 - a * r)
                inv_denom[js, jr, jlev] = inv
                albedo_top[js, jr, jlev] = r + t * t * a * inv
                source_top[js, jr, jlev] = source_up[js, jr, jlev] + t * (
                    source_base[js, jr, jlev] + a * source_dn[js, jr, jlev]
                ) * inv

        if jlev == 0:
            break

        # Interface jlev joins layer jlev-1 (above) to layer jlev (below)
        if is_cloud_free_layer[jlev] and is_cloud_free_layer[jlev + 1]:
            for js in range(n_spec):
                for jr in range(n_regions):
                    albedo_base[js, jr, jlev - 1] = albedo_top[js, 0, jlev]
                source_base[js, 0, jlev - 1] = source_top[js, 0, jlev]
        else:
            for js in range(n_spec):
                for jupper in range(n_regions):
                    albedo_sum = 0.0
                    source_sum = 0.0
                    for jlower in range(n_regions):
                        albedo_sum += v_overlap[jlower, jupper, jlev] * albedo_top[js, jlower, jlev]
                        source_sum += u_overlap[jupper, jlower, jlev] * source_top[js, jlower, jlev]
                    albedo_base[js, jupper, jlev - 1] = albedo_sum
                    source_base[js, jupper, jlev - 1] = source_sum

    flux_up_base = np.zeros((n_spec, n_regions, n_levels))
    flux_dn_base = np.zeros((n_spec, n_regions, n_levels))
    flux_up_top = np.zeros((n_spec, n_regions, n_levels))
    flux_dn_top = np.zeros((n_spec, n_regions, n_levels))

    # Downward pass; no downwelling longwave at the top of the atmosphere
    for jlev in range(n_levels):
        for js in range(n_spec):
            for jr in range(n_regions):
                dn_top = flux_dn_top[js, jr, jlev]
                dn_base = (
                    transmittance[js, jr, jlev] * dn_top
                    + reflectance[js, jr, jlev] * source_base[js, jr, jlev]
                    + source_dn[js, jr, jlev]
                ) * inv_denom[js, jr, jlev]
                flux_dn_base[js, jr, jlev] = dn_base
                flux_up_base[js, jr, jlev] = (
                    albedo_base[js, jr, jlev] * dn_base + source_base[js, jr, jlev]
                )
                flux_up_top[js, jr, jlev] = (
                    albedo_top[js, jr, jlev] * dn_top + source_top[js, jr, jlev]
                )

        if jlev == n_levels - 1:
            break

        if is_cloud_free_layer[jlev + 1] and is_cloud_free_layer[jlev + 2]:
            for js in range(n_spec):
                flux_dn_top[js, 0, jlev + 1] = flux_dn_base[js, 0, jlev]
        else:
            for js in range(n_spec):
                for jlower in range(n_regions):
                    dn_sum = 0.0
                    for jupper in range(n_regions):
                        dn_sum += v_overlap[jlower, jupper, jlev + 1] * flux_dn_base[js, jupper, jlev]
                    flux_dn_top[js, jlower, jlev + 1] = dn_sum

    return flux_up_base, flux_dn_base, flux_up_top, flux_dn_top


def calc_two_stream_flux(
    surf_emission: np.ndarray,
    surf_albedo: np.ndarray,
    region_fracs: np.ndarray,
    reflectance: np.ndarray,
    transmittance: np.ndarray,
    source_up: np.ndarray,
    source_dn: np.ndarray,
    is_cloud_free_layer: np.ndarray,
    u_overlap: np.ndarray,
    v_overlap: np.ndarray,
) -> TwoStreamFluxes:
    """
    Compute two-stream fluxes at the top and base of each layer and region.

    Parameters
    ----------
    surf_emission : array_like
        Surface upward emission in each spectral interval (W/m^2), shape (n_spec,)
    surf_albedo : array_like
        Surface albedo in each spectral interval, shape (n_spec,)
    region_fracs : array_like
        Region area fractions, shape (n_regions, n_levels)
    reflectance, transmittance : array_like
        Diffuse layer properties, shape (n_spec, n_regions, n_levels)
    source_up, source_dn : array_like
        Area-weighted layer emission, shape (n_spec, n_regions, n_levels)
    is_cloud_free_layer : array_like of bool
        Cloud-free flags including dummy layers, shape (n_levels + 2,)
    u_overlap, v_overlap : array_like
        Overlap matrices, shape (n_regions, n_regions, n_levels + 1)

    Returns
    -------
    fluxes : TwoStreamFluxes
    """
    region_fracs = np.ascontiguousarray(region_fracs, dtype=np.float64)
    flux_up_base, flux_dn_base, flux_up_top, flux_dn_top = _two_stream_kernel(
        np.ascontiguousarray(surf_emission, dtype=np.float64),
        np.ascontiguousarray(surf_albedo, dtype=np.float64),
        np.ascontiguousarray(region_fracs[:, -1]),
        np.ascontiguousarray(reflectance, dtype=np.float64),
        np.ascontiguousarray(transmittance, dtype=np.float64),
        np.ascontiguousarray(source_up, dtype=np.float64),
        np.ascontiguousarray(source_dn, dtype=np.float64),
        np.ascontiguousarray(is_cloud_free_layer, dtype=np.bool_),
        np.ascontiguousarray(u_overlap, dtype=np.float64),
        np.ascontiguousarray(v_overlap, dtype=np.float64),
    )
    logger.debug(
        f"Two-stream fluxes for {reflectance.shape[0]} intervals, "
        f"{reflectance.shape[1]} regions, {reflectance.shape[2]} levels"
    )
    return TwoStreamFluxes(
        flux_up_base=flux_up_base,
        flux_dn_base=flux_dn_base,
        flux_up_top=flux_up_top,
        flux_dn_top=flux_dn_top,
    )
