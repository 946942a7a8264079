"""
Radiative transfer solvers for partially cloudy columns.

Functions
---------
calc_flux
    Flux profile including cloud scattering
calc_no_scattering_flux
    Flux profile from absorption and emission only
calc_two_stream_flux
    Tripleclouds two-stream solver
select_quadrature
    Zenith angles and weights for radiance calculations
"""

from tripleclouds.rte_solver.flux import FluxResult, calc_flux, calc_no_scattering_flux
from tripleclouds.rte_solver.two_stream import TwoStreamFluxes, calc_two_stream_flux
from tripleclouds.rte_solver.quadrature import QuadratureSet, gauss_legendre, select_quadrature

__all__ = [
    "FluxResult",
    "calc_flux",
    "calc_no_scattering_flux",
    "TwoStreamFluxes",
    "calc_two_stream_flux",
    "QuadratureSet",
    "gauss_legendre",
    "select_quadrature",
]
