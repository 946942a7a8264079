"""
Longwave flux profiles through a partially cloudy column.

Two entry points are provided:

calc_flux
    Includes cloud scattering. The Tripleclouds two-stream solution is
    used directly, or as the scattering source for radiance calculations
    at a number of zenith angles (Fu et al., 1997).
calc_no_scattering_flux
    Absorption and emission only, computed from radiances at one or more
    zenith angles.

Both split each layer into a clear region and one or two cloudy regions,
and connect the regions of adjacent layers with overlap matrices.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Optional, Tuple

import numpy as np

from tripleclouds.atmosphere.profiles import SpectralProfile
from tripleclouds.clouds.optics import (
    cloud_free_layers,
    mix_no_scattering_optical_depth,
    mix_optical_properties,
)
from tripleclouds.clouds.overlap import OverlapMatrices, calc_overlap_matrices
from tripleclouds.clouds.regions import RegionProperties, get_partitioner
from tripleclouds.config.settings import SolverConfig
from tripleclouds.rte_solver.layer_solutions import (
    calc_no_scattering_radiance_source,
    calc_radiance_source,
    calc_reflectance_transmittance,
)
from tripleclouds.rte_solver.quadrature import (
    QuadratureSet,
    clamp_angle_count,
    select_quadrature,
)
from tripleclouds.rte_solver.radiance import calc_radiance_dn, calc_radiance_up
from tripleclouds.rte_solver.two_stream import calc_two_stream_flux

logger = logging.getLogger(__name__)

FluxPair = Tuple[np.ndarray, np.ndarray]


@dataclass(frozen=True)
class FluxResult:
    """
    Results of a longwave flux calculation.

    Attributes
    ----------
    flux_up : ndarray
        Upwelling flux at half levels (W/m^2), shape (n_spec, n_levels + 1)
    flux_dn : ndarray
        Downwelling flux at half levels (W/m^2), shape (n_spec, n_levels + 1)
    n_angles_per_hem : int
        Number of radiance angles per hemisphere actually used; 0 means the
        two-stream fluxes were used directly
    regions : RegionProperties
        Region fractions and optical depth scalings
    cloud_cover : float, optional
        Total cloud cover, if requested
    """

    flux_up: np.ndarray
    flux_dn: np.ndarray
    n_angles_per_hem: int
    regions: RegionProperties
    cloud_cover: Optional[float] = None

    @property
    def flux_net(self) -> np.ndarray:
        """Net downward flux at half levels."""
        return self.flux_dn - self.flux_up


def _prepare_regions(
    profile: SpectralProfile,
    config: SolverConfig,
) -> Tuple[RegionProperties, OverlapMatrices]:
    """Region fractions, optical depth scalings and overlap matrices."""
    partitioner = get_partitioner(config.num_regions, config.distribution)
    regions = partitioner.partition(
        profile.cloud_fraction,
        profile.fractional_std,
        config.cloud_fraction_threshold,
    )
    overlap = calc_overlap_matrices(
        regions.region_fracs,
        profile.overlap_param,
        decorrelation_scaling=config.decorrelation_scaling,
        cloud_fraction_threshold=config.cloud_fraction_threshold,
        want_cloud_cover=config.want_cloud_cover,
    )
    return regions, overlap


def fold_angles(
    quadrature: QuadratureSet,
    contribution: Callable[[float, float], FluxPair],
    shape: Tuple[int, int],
) -> FluxPair:
    """
    Sum the flux contributions of each angle in stream order.

    Parameters
    ----------
    quadrature : QuadratureSet
        Zenith angles and flux weights
    contribution : callable
        Maps (mu, weight) to the (flux_up, flux_dn) contribution of one angle
    shape : tuple of int
        Shape of the flux arrays, (n_spec, n_levels + 1)

    Returns
    -------
    flux_up, flux_dn : ndarray
    """
    def add(total: FluxPair, angle: Tuple[float, float]) -> FluxPair:
        flux_up, flux_dn = contribution(*angle)
        return total[0] + flux_up, total[1] + flux_dn

    return reduce(add, quadrature, (np.zeros(shape), np.zeros(shape)))


def calc_flux(
    profile: SpectralProfile,
    config: Optional[SolverConfig] = None,
) -> FluxResult:
    """
    Compute the flux profile including the effects of scattering.

    Parameters
    ----------
    profile : SpectralProfile
        Column properties; must include ssa_cloud and asymmetry_cloud, and
        fractional_std for three regions
    config : SolverConfig, optional
        Solver options; by default three gamma-distributed regions and the
        two-stream fluxes without radiance angles

    Returns
    -------
    result : FluxResult
    """
    config = config or SolverConfig()
    if not profile.has_scattering_properties:
        raise ValueError("ssa_cloud and asymmetry_cloud are required with scattering")

    n_angles = clamp_angle_count(config.default_angles(scattering=True))
    if config.do_3d_effects:
        logger.warning("3D effects are not represented; using 1D radiances")

    regions, overlap = _prepare_regions(profile, config)

    # Gases only absorb, so the clear region has no albedo entry and the
    # cloudy-region asymmetry factor is that of the cloud
    optics = mix_optical_properties(
        profile.od_clear,
        profile.od_cloud,
        profile.ssa_cloud,
        profile.asymmetry_cloud,
        regions.od_scaling,
    )
    is_cloud_free = cloud_free_layers(regions.region_fracs)
    logger.debug(
        f"{regions.num_regions} regions, "
        f"{int(np.count_nonzero(is_cloud_free[1:-1]))}/{profile.n_levels} cloud-free layers, "
        f"{n_angles} angles per hemisphere"
    )

    reflectance, transmittance, source_up, source_dn = calc_reflectance_transmittance(
        profile.planck_hl, regions.region_fracs, optics
    )
    fluxes = calc_two_stream_flux(
        profile.surf_emission,
        profile.surf_albedo,
        regions.region_fracs,
        reflectance,
        transmittance,
        source_up,
        source_dn,
        is_cloud_free,
        overlap.u_overlap,
        overlap.v_overlap,
    )

    if n_angles == 0:
        flux_up, flux_dn = fluxes.half_level_fluxes()
    else:
        # Pass beams through the atmosphere using the two-stream solution
        # as the scattering source function
        flux_up_surf = fluxes.flux_up_base[:, :, -1]

        def angle_contribution(mu: float, weight: float) -> FluxPair:
            trans_mu, source_up_mu, source_dn_mu = calc_radiance_source(
                mu,
                regions.region_fracs,
                profile.planck_hl,
                optics,
                fluxes.flux_up_base,
                fluxes.flux_dn_base,
                fluxes.flux_up_top,
                fluxes.flux_dn_top,
                do_3d_effects=config.do_3d_effects,
            )
            flux_dn_mu = calc_radiance_dn(weight, trans_mu, source_dn_mu, overlap.v_overlap)
            flux_up_mu = calc_radiance_up(
                weight, flux_up_surf, trans_mu, source_up_mu, overlap.u_overlap
            )
            return flux_up_mu, flux_dn_mu

        flux_up, flux_dn = fold_angles(
            select_quadrature(n_angles),
            angle_contribution,
            (profile.n_spec, profile.n_levels + 1),
        )

    return FluxResult(
        flux_up=flux_up,
        flux_dn=flux_dn,
        n_angles_per_hem=n_angles,
        regions=regions,
        cloud_cover=overlap.cloud_cover,
    )


def calc_no_scattering_flux(
    profile: SpectralProfile,
    config: Optional[SolverConfig] = None,
) -> FluxResult:
    """
    Compute the flux profile neglecting scattering, via radiances.

    The surface is treated as a black emitter shared between the regions
    of the lowest layer; surface albedo is not used.

    Parameters
    ----------
    profile : SpectralProfile
        Column properties; fractional_std is needed for three regions
    config : SolverConfig, optional
        Solver options; by default three gamma-distributed regions and a
        single radiance at the diffusivity angle

    Returns
    -------
    result : FluxResult
    """
    config = config or SolverConfig(scattering=False)

    # Without a two-stream solution there is always at least one angle
    n_angles = max(clamp_angle_count(config.default_angles(scattering=False)), 1)
    if config.do_3d_effects:
        logger.warning("3D effects are not represented; using 1D radiances")

    regions, overlap = _prepare_regions(profile, config)
    optics = mix_no_scattering_optical_depth(
        profile.od_clear, profile.od_cloud, regions.od_scaling
    )
    is_cloud_free = cloud_free_layers(regions.region_fracs)
    logger.debug(
        f"{regions.num_regions} regions, "
        f"{int(np.count_nonzero(is_cloud_free[1:-1]))}/{profile.n_levels} cloud-free layers, "
        f"{n_angles} angles per hemisphere"
    )

    flux_up_surf = profile.surf_emission[:, np.newaxis] * regions.region_fracs[np.newaxis, :, -1]

    def angle_contribution(mu: float, weight: float) -> FluxPair:
        trans_mu, source_up_mu, source_dn_mu = calc_no_scattering_radiance_source(
            mu, regions.region_fracs, profile.planck_hl, optics.od
        )
        flux_dn_mu = calc_radiance_dn(weight, trans_mu, source_dn_mu, overlap.v_overlap)
        flux_up_mu = calc_radiance_up(
            weight, flux_up_surf, trans_mu, source_up_mu, overlap.u_overlap
        )
        return flux_up_mu, flux_dn_mu

    flux_up, flux_dn = fold_angles(
        select_quadrature(n_angles),
        angle_contribution,
        (profile.n_spec, profile.n_levels + 1),
    )

    return FluxResult(
        flux_up=flux_up,
        flux_dn=flux_dn,
        n_angles_per_hem=n_angles,
        regions=regions,
        cloud_cover=overlap.cloud_cover,
    )
