"""
Column inputs for the longwave solver.

A `SpectralProfile` holds everything the flux calculation needs for one
column and one group of spectral intervals. Level-dependent arrays count
down from the top of the atmosphere.
"""

from dataclasses import dataclass, fields
from typing import Optional

import numpy as np

from tripleclouds.utils.constants import STEFAN_BOLTZMANN


@dataclass(frozen=True)
class SpectralProfile:
    """
    Gas, cloud and surface properties of a column.

    Attributes
    ----------
    surf_emission : ndarray
        Surface upward emission in each spectral interval (W/m^2), i.e.
        emissivity times the Planck flux at the skin temperature, shape (n_spec,)
    surf_albedo : ndarray
        Surface albedo in each spectral interval, shape (n_spec,)
    planck_hl : ndarray
        Planck flux at each half level (W/m^2), shape (n_spec, n_levels + 1)
    cloud_fraction : ndarray
        Cloud fraction of each layer, shape (n_levels,)
    od_clear : ndarray
        Gas and aerosol optical depth, shape (n_spec, n_levels)
    od_cloud : ndarray
        Cloud optical depth averaged over the cloudy part of the gridbox,
        shape (n_spec, n_levels)
    overlap_param : ndarray
        Overlap parameter between adjacent layers, shape (n_levels - 1,)
    fractional_std : ndarray, optional
        Fractional standard deviation of in-cloud water content, shape
        (n_levels,); needed for three regions
    ssa_cloud : ndarray, optional
        Cloud single scattering albedo, shape (n_spec, n_levels); needed
        when scattering is represented
    asymmetry_cloud : ndarray, optional
        Cloud asymmetry factor, shape (n_spec, n_levels)
    """

    surf_emission: np.ndarray
    surf_albedo: np.ndarray
    planck_hl: np.ndarray
    cloud_fraction: np.ndarray
    od_clear: np.ndarray
    od_cloud: np.ndarray
    overlap_param: np.ndarray
    fractional_std: Optional[np.ndarray] = None
    ssa_cloud: Optional[np.ndarray] = None
    asymmetry_cloud: Optional[np.ndarray] = None

    def __post_init__(self):
        spectral_fields = ("planck_hl", "od_clear", "od_cloud", "ssa_cloud", "asymmetry_cloud")
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            value = np.asarray(value, dtype=float)
            if f.name in spectral_fields:
                value = np.atleast_2d(value)
            else:
                value = np.atleast_1d(value)
            object.__setattr__(self, f.name, value)
        self._check_shapes()

    def _check_shapes(self) -> None:
        n_spec, n_levels = self.n_spec, self.n_levels
        expected = {
            "surf_emission": (n_spec,),
            "surf_albedo": (n_spec,),
            "planck_hl": (n_spec, n_levels + 1),
            "od_clear": (n_spec, n_levels),
            "od_cloud": (n_spec, n_levels),
            "overlap_param": (max(n_levels - 1, 0),),
            "fractional_std": (n_levels,),
            "ssa_cloud": (n_spec, n_levels),
            "asymmetry_cloud": (n_spec, n_levels),
        }
        for name, shape in expected.items():
            value = getattr(self, name)
            if value is not None and value.shape != shape:
                raise ValueError(
                    f"{name} has shape {value.shape}, expected {shape}"
                )

    @property
    def n_spec(self) -> int:
        """Number of spectral intervals."""
        return self.od_clear.shape[0]

    @property
    def n_levels(self) -> int:
        """Number of layers."""
        return self.cloud_fraction.size

    @property
    def has_scattering_properties(self) -> bool:
        return self.ssa_cloud is not None and self.asymmetry_cloud is not None

    @classmethod
    def from_temperature(
        cls,
        temperature_hl: np.ndarray,
        surface_temperature: float,
        cloud_fraction: np.ndarray,
        od_clear: np.ndarray,
        od_cloud: np.ndarray,
        overlap_param: np.ndarray,
        surface_emissivity: float = 1.0,
        **kwargs,
    ) -> "SpectralProfile":
        """
        Build a single broadband ("gray") interval from temperatures.

        The Planck flux is sigma*T^4 and the surface albedo is one minus
        the emissivity.

        Parameters
        ----------
        temperature_hl : array_like
            Temperature at half levels in K, shape (n_levels + 1,)
        surface_temperature : float
            Surface skin temperature in K
        cloud_fraction, od_clear, od_cloud, overlap_param : array_like
            As for the class attributes; optical depths may be 1-D
        surface_emissivity : float
            Broadband surface emissivity (default: 1.0)
        **kwargs
            fractional_std, ssa_cloud and asymmetry_cloud

        Returns
        -------
        profile : SpectralProfile
        """
        temperature_hl = np.asarray(temperature_hl, dtype=float)
        return cls(
            surf_emission=np.array([surface_emissivity * STEFAN_BOLTZMANN * surface_temperature**4]),
            surf_albedo=np.array([1.0 - surface_emissivity]),
            planck_hl=STEFAN_BOLTZMANN * temperature_hl[np.newaxis, :] ** 4,
            cloud_fraction=cloud_fraction,
            od_clear=od_clear,
            od_cloud=od_cloud,
            overlap_param=overlap_param,
            **kwargs,
        )
