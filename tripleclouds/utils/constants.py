"""
Numerical constants for the Tripleclouds longwave solver.

All fluxes are in W/m^2; optical depths are dimensionless.
"""

import numpy as np

# Secant of the longwave diffusivity angle (Elsasser, 1942; Fu et al., 1997)
LW_DIFFUSIVITY = 1.66

# Largest number of zenith angles per hemisphere for radiance quadrature
MAX_GAUSS_LEGENDRE_POINTS = 8

# Cloud fractions below this are treated as clear sky
CLOUD_FRACTION_THRESHOLD = 1.0e-6

# Ratio of the decorrelation length of cloud inhomogeneities to the
# decorrelation length of cloud boundaries
DEFAULT_DECORRELATION_SCALING = 0.5

# Layers thinner than this get a source computed from the mean Planck
# function rather than from its optical-depth gradient
MIN_OD_FOR_PLANCK_GRADIENT = 1.0e-3

# Lower bound on the squared two-stream eigenvalue
MIN_K_SQUARED = 1.0e-12

# Cloud fractions above this are treated as overcast in the cloud cover
# calculation
MAX_CLOUD_FRACTION = 1.0 - 10.0 * np.finfo(float).eps

# Gamma distribution: minimum optical-depth scaling of the thin region,
# which otherwise becomes vanishingly small for FSD >~ 2
MIN_GAMMA_OD_SCALING = 0.025

# Gamma distribution: weight of the lower ("thin") cloudy region is 0.5
# up to FSD=1.5, rising linearly to 0.9 at FSD=3.725 and capped beyond
MIN_LOWER_FRAC = 0.5
MAX_LOWER_FRAC = 0.9
FSD_AT_MIN_LOWER_FRAC = 1.5
FSD_AT_MAX_LOWER_FRAC = 3.725
LOWER_FRAC_FSD_GRADIENT = (MAX_LOWER_FRAC - MIN_LOWER_FRAC) / (
    FSD_AT_MAX_LOWER_FRAC - FSD_AT_MIN_LOWER_FRAC
)
LOWER_FRAC_FSD_INTERCEPT = MIN_LOWER_FRAC - FSD_AT_MIN_LOWER_FRAC * LOWER_FRAC_FSD_GRADIENT

# Gamma distribution: smallest fraction of the cloud assigned to the
# thick region before dividing by it
MIN_THICK_FRACTION = 1.0e-12

# Supported sub-grid optical depth distributions
DISTRIBUTIONS = ("gamma", "lognormal")

# Supported region counts: "Doubleclouds" and "Tripleclouds"
REGION_COUNTS = (2, 3)

# Stefan-Boltzmann constant, W/(m^2 K^4)
STEFAN_BOLTZMANN = 5.670374419e-8
