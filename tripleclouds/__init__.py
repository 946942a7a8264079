"""
tripleclouds: Longwave radiative transfer through partially cloudy columns.

Each layer of a column is split into a clear region and one or two cloudy
regions ("Doubleclouds" or "Tripleclouds"), whose optical depths
represent the sub-grid variability of the cloud. Regions in adjacent
layers are connected by overlap matrices, and fluxes are computed either
with a two-stream solver or from radiances at several zenith angles.

Modules
-------
atmosphere
    Column inputs (SpectralProfile)
clouds
    Region partitioning, optical property mixing and cloud overlap
rte_solver
    Two-stream and radiance solvers and the flux pipelines
config
    Solver options and case files
utils
    Constants and exceptions
"""

__version__ = "0.1.0"
__author__ = "tripleclouds Contributors"

from tripleclouds.atmosphere import SpectralProfile
from tripleclouds.config import SolverConfig
from tripleclouds.rte_solver import FluxResult, calc_flux, calc_no_scattering_flux

__all__ = [
    "__version__",
    "SpectralProfile",
    "SolverConfig",
    "FluxResult",
    "calc_flux",
    "calc_no_scattering_flux",
]
