"""
Utility constants and exceptions.

Constants
---------
LW_DIFFUSIVITY : float
    Secant of the longwave diffusivity angle
MAX_GAUSS_LEGENDRE_POINTS : int
    Maximum number of radiance angles per hemisphere
CLOUD_FRACTION_THRESHOLD : float
    Cloud fractions below this are treated as clear sky
DEFAULT_DECORRELATION_SCALING : float
    Default ratio of inhomogeneity to cloud-boundary decorrelation lengths

Exceptions
----------
ConfigurationError
    Unsupported region count or distribution
"""

from tripleclouds.utils.constants import (
    LW_DIFFUSIVITY,
    MAX_GAUSS_LEGENDRE_POINTS,
    CLOUD_FRACTION_THRESHOLD,
    DEFAULT_DECORRELATION_SCALING,
)
from tripleclouds.utils.errors import ConfigurationError

__all__ = [
    "LW_DIFFUSIVITY",
    "MAX_GAUSS_LEGENDRE_POINTS",
    "CLOUD_FRACTION_THRESHOLD",
    "DEFAULT_DECORRELATION_SCALING",
    "ConfigurationError",
]
