"""
Zenith-angle quadrature for converting radiances into fluxes.

A hemispheric flux is approximated by a weighted sum of radiances at a
small number of zenith angles. With one angle per hemisphere the
diffusivity approximation is used (cosine 1/1.66); with more, Gauss-Legendre
points on the cosine interval (0, 1].
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from tripleclouds.utils.constants import LW_DIFFUSIVITY, MAX_GAUSS_LEGENDRE_POINTS

logger = logging.getLogger(__name__)


def gauss_legendre(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gauss-Legendre points and weights on the interval (0, 1].

    Parameters
    ----------
    n : int
        Number of points

    Returns
    -------
    mu : ndarray
        Cosines of the zenith angle in increasing order, shape (n,)
    weights : ndarray
        Quadrature weights summing to 1, shape (n,)
    """
    x, w = np.polynomial.legendre.leggauss(n)
    return 0.5 * (x + 1.0), 0.5 * w


@dataclass(frozen=True)
class QuadratureSet:
    """
    Zenith angles and weights for one hemisphere.

    Attributes
    ----------
    mu : ndarray
        Cosine of the zenith angle of each stream
    weights : ndarray
        Raw quadrature weights
    """

    mu: np.ndarray
    weights: np.ndarray

    def __len__(self) -> int:
        return self.mu.size

    @property
    def flux_weights(self) -> np.ndarray:
        """
        Weights that convert radiances into a flux.

        Each weight is projected onto the horizontal by its cosine and
        normalized, so the flux weights sum to 1.
        """
        projected = self.weights * self.mu
        return projected / np.sum(projected)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        """Yield (mu, flux_weight) in increasing stream order."""
        for mu, weight in zip(self.mu, self.flux_weights):
            yield float(mu), float(weight)


def clamp_angle_count(n_angles_per_hem: int) -> int:
    """Limit the requested number of angles to what the quadrature supports."""
    if n_angles_per_hem > MAX_GAUSS_LEGENDRE_POINTS:
        logger.warning(
            f"Requested {n_angles_per_hem} angles per hemisphere; "
            f"using maximum of {MAX_GAUSS_LEGENDRE_POINTS}"
        )
        return MAX_GAUSS_LEGENDRE_POINTS
    return max(int(n_angles_per_hem), 0)


def select_quadrature(n_angles_per_hem: int) -> QuadratureSet:
    """
    Choose the zenith angles for a radiance calculation.

    Parameters
    ----------
    n_angles_per_hem : int
        Number of angles per hemisphere, at least 1 and already clamped

    Returns
    -------
    quadrature : QuadratureSet
        A single diffusivity angle with unit weight if n_angles_per_hem is
        1, otherwise Gauss-Legendre points
    """
    if n_angles_per_hem < 1:
        raise ValueError(f"At least one angle is required, got {n_angles_per_hem}")
    if n_angles_per_hem == 1:
        return QuadratureSet(
            mu=np.array([1.0 / LW_DIFFUSIVITY]),
            weights=np.array([1.0]),
        )
    mu, weights = gauss_legendre(n_angles_per_hem)
    return QuadratureSet(mu=mu, weights=weights)
