"""
Column inputs.

Classes
-------
SpectralProfile
    Gas, cloud and surface properties of one column
"""

from tripleclouds.atmosphere.profiles import SpectralProfile

__all__ = [
    "SpectralProfile",
]
