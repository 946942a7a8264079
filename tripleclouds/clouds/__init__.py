"""
Sub-grid cloud structure.

Functions
---------
calc_region_properties
    Region fractions and optical depth scalings
get_partitioner
    Two- or three-region partitioning strategy
calc_overlap_matrices
    Overlap matrices between the regions of adjacent layers
cloud_cover_exp_ran
    Total cloud cover under exponential-random overlap
mix_optical_properties
    Combined gas and cloud optical properties per region
cloud_free_layers
    Flags for layers without cloud
"""

from tripleclouds.clouds.regions import (
    RegionProperties,
    RegionPartitioner,
    TwoRegionPartitioner,
    ThreeRegionPartitioner,
    calc_region_properties,
    get_partitioner,
)
from tripleclouds.clouds.overlap import (
    OverlapMatrices,
    calc_overlap_matrices,
    cloud_cover_exp_ran,
)
from tripleclouds.clouds.optics import (
    RegionOpticalProperties,
    mix_optical_properties,
    mix_no_scattering_optical_depth,
    cloud_free_layers,
)

__all__ = [
    "RegionProperties",
    "RegionPartitioner",
    "TwoRegionPartitioner",
    "ThreeRegionPartitioner",
    "calc_region_properties",
    "get_partitioner",
    "OverlapMatrices",
    "calc_overlap_matrices",
    "cloud_cover_exp_ran",
    "RegionOpticalProperties",
    "mix_optical_properties",
    "mix_no_scattering_optical_depth",
    "cloud_free_layers",
]
