"""
Solver configuration data structures.

Defines the options of the Tripleclouds flux calculation and their
defaults, with loading from dictionaries, JSON and YAML.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any
import json
import yaml

from tripleclouds.utils.constants import (
    CLOUD_FRACTION_THRESHOLD,
    DEFAULT_DECORRELATION_SCALING,
    DISTRIBUTIONS,
    REGION_COUNTS,
)


@dataclass
class SolverConfig:
    """Options of the longwave flux calculation.

    Attributes:
        num_regions: 2 for one clear and one cloudy region, 3 for
            Tripleclouds with thin and thick cloudy regions
        distribution: Sub-grid optical depth distribution for three
            regions, "gamma" or "lognormal"
        scattering: Represent cloud scattering; if False, only absorption
            and emission are computed
        n_angles_per_hem: Number of radiance angles per hemisphere. None
            selects the default: 0 (two-stream fluxes only) with
            scattering, 1 (diffusivity angle) without. Values above the
            maximum quadrature order are clamped.
        do_3d_effects: Represent 3D effects in the radiance calculation
        want_cloud_cover: Also return the total cloud cover
        cloud_fraction_threshold: Cloud fractions below this are ignored
        decorrelation_scaling: Ratio of the decorrelation length of cloud
            inhomogeneities to that of cloud boundaries
    """
    num_regions: int = 3
    distribution: str = "gamma"
    scattering: bool = True
    n_angles_per_hem: Optional[int] = None
    do_3d_effects: bool = False
    want_cloud_cover: bool = False
    cloud_fraction_threshold: float = CLOUD_FRACTION_THRESHOLD
    decorrelation_scaling: float = DEFAULT_DECORRELATION_SCALING

    def default_angles(self, scattering: Optional[bool] = None) -> int:
        """Number of angles per hemisphere before clamping.

        Args:
            scattering: Solution mode; defaults to the `scattering` option

        Returns:
            The requested angle count, or the default for the mode
        """
        if scattering is None:
            scattering = self.scattering
        if self.n_angles_per_hem is not None:
            return self.n_angles_per_hem
        return 0 if scattering else 1

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SolverConfig":
        """Create SolverConfig from a dictionary.

        Unknown keys are ignored.

        Args:
            config_dict: Configuration dictionary

        Returns:
            SolverConfig instance
        """
        defaults = cls()
        return cls(
            num_regions=int(config_dict.get("num_regions", defaults.num_regions)),
            distribution=config_dict.get("distribution", defaults.distribution),
            scattering=bool(config_dict.get("scattering", defaults.scattering)),
            n_angles_per_hem=config_dict.get("n_angles_per_hem", defaults.n_angles_per_hem),
            do_3d_effects=bool(config_dict.get("do_3d_effects", defaults.do_3d_effects)),
            want_cloud_cover=bool(config_dict.get("want_cloud_cover", defaults.want_cloud_cover)),
            cloud_fraction_threshold=float(
                config_dict.get("cloud_fraction_threshold", defaults.cloud_fraction_threshold)
            ),
            decorrelation_scaling=float(
                config_dict.get("decorrelation_scaling", defaults.decorrelation_scaling)
            ),
        )

    @classmethod
    def from_json(cls, json_path: str) -> "SolverConfig":
        """Load configuration from a JSON file.

        Args:
            json_path: Path to JSON configuration file

        Returns:
            SolverConfig instance
        """
        with open(json_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict.get("solver", config_dict))

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "SolverConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            SolverConfig instance
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict.get("solver", config_dict))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to a YAML file."""
        with open(yaml_path, 'w') as f:
            yaml.safe_dump({"solver": self.to_dict()}, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> list:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.num_regions not in REGION_COUNTS:
            errors.append(f"num_regions must be one of {REGION_COUNTS}")

        if self.distribution not in DISTRIBUTIONS:
            errors.append(f"Invalid distribution: {self.distribution}")

        if self.n_angles_per_hem is not None and self.n_angles_per_hem < 0:
            errors.append("n_angles_per_hem must be non-negative")

        if not 0.0 <= self.cloud_fraction_threshold < 1.0:
            errors.append("cloud_fraction_threshold must be in [0, 1)")

        if self.decorrelation_scaling <= 0.0:
            errors.append("decorrelation_scaling must be positive")

        return errors
