"""
Radiance transport along a single zenith angle.

Each routine passes radiances (in flux units, i.e. pi times the radiance)
through the column, region by region, using the overlap matrices at each
interface, and returns the weighted contribution of that angle to the
half-level flux profile. Contributions from different angles are
independent and are summed by the caller.
"""

import numpy as np
from numba import jit


@jit(nopython=True, cache=True)
def _radiance_dn_kernel(weight, transmittance, source_dn, v_overlap):
    n_spec, n_regions, n_levels = transmittance.shape
    flux_dn = np.zeros((n_spec, n_levels + 1))
    radiance_top = np.zeros((n_spec, n_regions))
    radiance_base = np.zeros((n_spec, n_regions))

    for jlev in range(n_levels):
        for js in range(n_spec):
            total = 0.0
            for jr in range(n_regions):
                radiance_base[js, jr] = (
                    transmittance[js, jr, jlev] * radiance_top[js, jr]
                    + source_dn[js, jr, jlev]
                )
                total += radiance_base[js, jr]
            flux_dn[js, jlev + 1] = weight * total

        if jlev < n_levels - 1:
            for js in range(n_spec):
                for jlower in range(n_regions):
                    rad_sum = 0.0
                    for jupper in range(n_regions):
                        rad_sum += v_overlap[jlower, jupper, jlev + 1] * radiance_base[js, jupper]
                    radiance_top[js, jlower] = rad_sum

    return flux_dn


@jit(nopython=True, cache=True)
def _radiance_up_kernel(weight, flux_up_surf, transmittance, source_up, u_overlap):
    n_spec, n_regions, n_levels = transmittance.shape
    flux_up = np.zeros((n_spec, n_levels + 1))
    radiance_base = flux_up_surf.copy()
    radiance_top = np.zeros((n_spec, n_regions))

    for js in range(n_spec):
        total = 0.0
        for jr in range(n_regions):
            total += radiance_base[js, jr]
        flux_up[js, n_levels] = weight * total

    for jlev in range(n_levels - 1, -1, -1):
        for js in range(n_spec):
            total = 0.0
            for jr in range(n_regions):
                radiance_top[js, jr] = (
                    transmittance[js, jr, jlev] * radiance_base[js, jr]
                    + source_up[js, jr, jlev]
                )
                total += radiance_top[js, jr]
            flux_up[js, jlev] = weight * total

        if jlev > 0:
            for js in range(n_spec):
                for jupper in range(n_regions):
                    rad_sum = 0.0
                    for jlower in range(n_regions):
                        rad_sum += u_overlap[jupper, jlower, jlev] * radiance_top[js, jlower]
                    radiance_base[js, jupper] = rad_sum

    return flux_up


def calc_radiance_dn(
    weight: float,
    transmittance: np.ndarray,
    source_dn: np.ndarray,
    v_overlap: np.ndarray,
) -> np.ndarray:
    """
    Weighted downwelling flux contribution of one zenith angle.

    Parameters
    ----------
    weight : float
        Flux weight of this angle
    transmittance : array_like
        Layer transmittance along the angle, shape (n_spec, n_regions, n_levels)
    source_dn : array_like
        Emission from the base of each layer, shape (n_spec, n_regions, n_levels)
    v_overlap : array_like
        Downward overlap matrices, shape (n_regions, n_regions, n_levels + 1)

    Returns
    -------
    flux_dn : ndarray
        Contribution to the downwelling flux, shape (n_spec, n_levels + 1)
    """
    return _radiance_dn_kernel(
        float(weight),
        np.ascontiguousarray(transmittance, dtype=np.float64),
        np.ascontiguousarray(source_dn, dtype=np.float64),
        np.ascontiguousarray(v_overlap, dtype=np.float64),
    )


def calc_radiance_up(
    weight: float,
    flux_up_surf: np.ndarray,
    transmittance: np.ndarray,
    source_up: np.ndarray,
    u_overlap: np.ndarray,
) -> np.ndarray:
    """
    Weighted upwelling flux contribution of one zenith angle.

    Parameters
    ----------
    weight : float
        Flux weight of this angle
    flux_up_surf : array_like
        Upwelling radiance at the surface in each region, in flux units,
        shape (n_spec, n_regions)
    transmittance : array_like
        Layer transmittance along the angle, shape (n_spec, n_regions, n_levels)
    source_up : array_like
        Emission from the top of each layer, shape (n_spec, n_regions, n_levels)
    u_overlap : array_like
        Upward overlap matrices, shape (n_regions, n_regions, n_levels + 1)

    Returns
    -------
    flux_up : ndarray
        Contribution to the upwelling flux, shape (n_spec, n_levels + 1)
    """
    return _radiance_up_kernel(
        float(weight),
        np.ascontiguousarray(flux_up_surf, dtype=np.float64),
        np.ascontiguousarray(transmittance, dtype=np.float64),
        np.ascontiguousarray(source_up, dtype=np.float64),
        np.ascontiguousarray(u_overlap, dtype=np.float64),
    )
