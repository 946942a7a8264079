"""
Case file loading for tripleclouds.

A case file (JSON or YAML) describes one column and the solver options:

    name: single_layer_cloud
    solver:
      num_regions: 3
      distribution: lognormal
      scattering: false
    column:
      temperature_hl: [220.0, 250.0, 270.0, 285.0]
      surface_temperature: 288.0
      cloud_fraction: [0.0, 0.8, 0.0]
      fractional_std: [0.0, 0.5, 0.0]
      od_clear: [0.1, 0.1, 0.1]
      od_cloud: [0.0, 5.0, 0.0]
      overlap_param: [0.0, 0.0]

The column may instead give `planck_hl`, `surf_emission` and
`surf_albedo` directly for any number of spectral intervals.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Union
from dataclasses import dataclass, field

import yaml

from tripleclouds.atmosphere.profiles import SpectralProfile
from tripleclouds.config.settings import SolverConfig

logger = logging.getLogger(__name__)

_OPTIONAL_COLUMN_KEYS = ("fractional_std", "ssa_cloud", "asymmetry_cloud")


@dataclass
class LoadedCase:
    """Container for a loaded and validated case.

    Attributes:
        name: Case name
        profile: Column inputs
        solver: Solver options
        is_valid: Whether the solver options passed validation
        validation_errors: List of validation error messages
    """
    name: str
    profile: SpectralProfile
    solver: SolverConfig
    is_valid: bool = True
    validation_errors: list = field(default_factory=list)


def profile_from_dict(column: Dict[str, Any]) -> SpectralProfile:
    """Build a SpectralProfile from the `column` section of a case.

    Args:
        column: Column dictionary with either half-level temperatures or
            Planck fluxes

    Returns:
        SpectralProfile instance

    Raises:
        KeyError: If a required entry is missing
        ValueError: If array shapes are inconsistent
    """
    optional = {key: column[key] for key in _OPTIONAL_COLUMN_KEYS if key in column}

    if "planck_hl" in column:
        return SpectralProfile(
            surf_emission=column["surf_emission"],
            surf_albedo=column.get("surf_albedo", 0.0),
            planck_hl=column["planck_hl"],
            cloud_fraction=column["cloud_fraction"],
            od_clear=column["od_clear"],
            od_cloud=column["od_cloud"],
            overlap_param=column["overlap_param"],
            **optional,
        )

    return SpectralProfile.from_temperature(
        temperature_hl=column["temperature_hl"],
        surface_temperature=column["surface_temperature"],
        cloud_fraction=column["cloud_fraction"],
        od_clear=column["od_clear"],
        od_cloud=column["od_cloud"],
        overlap_param=column["overlap_param"],
        surface_emissivity=column.get("surface_emissivity", 1.0),
        **optional,
    )


def _read_case_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Case file not found: {path}")

    suffix = path.suffix.lower()
    if suffix in ('.yaml', '.yml'):
        with open(path) as f:
            return yaml.safe_load(f) or {}
    if suffix == '.json':
        with open(path) as f:
            return json.load(f)
    raise ValueError(f"Unsupported case file format: {suffix}. Use .yaml, .yml, or .json")


def load_case(source: Union[Dict[str, Any], str, Path]) -> LoadedCase:
    """Load a case from a dictionary or a JSON/YAML file.

    Args:
        source: Case dictionary or path to a case file

    Returns:
        LoadedCase with the column profile and solver options
    """
    if isinstance(source, dict):
        data = source
        default_name = "unnamed_case"
    elif isinstance(source, (str, Path)):
        path = Path(source)
        data = _read_case_file(path)
        default_name = path.stem
        logger.info(f"Loaded case file {path}")
    else:
        raise TypeError(f"Invalid case source type: {type(source)}")

    solver = SolverConfig.from_dict(data.get("solver", {}))
    validation_errors = solver.validate()

    if "column" not in data:
        raise KeyError("Case has no 'column' section")
    profile = profile_from_dict(data["column"])

    if solver.scattering and not profile.has_scattering_properties:
        validation_errors.append(
            "Scattering requested but ssa_cloud/asymmetry_cloud not given"
        )
    if solver.num_regions == 3 and profile.fractional_std is None:
        validation_errors.append("Three regions require fractional_std")

    for error in validation_errors:
        logger.warning(f"Case validation error: {error}")

    return LoadedCase(
        name=data.get("name", default_name),
        profile=profile,
        solver=solver,
        is_valid=len(validation_errors) == 0,
        validation_errors=validation_errors,
    )


def create_example_case() -> Dict[str, Any]:
    """Create an example case dictionary.

    A three-layer column with a single cloudy layer in the middle.

    Returns:
        Example case matching the case file format
    """
    return {
        "name": "single_layer_cloud",
        "solver": {
            "num_regions": 3,
            "distribution": "lognormal",
            "scattering": False,
        },
        "column": {
            "temperature_hl": [220.0, 250.0, 270.0, 285.0],
            "surface_temperature": 288.0,
            "surface_emissivity": 1.0,
            "cloud_fraction": [0.0, 0.8, 0.0],
            "fractional_std": [0.0, 0.5, 0.0],
            "od_clear": [0.1, 0.1, 0.1],
            "od_cloud": [0.0, 5.0, 0.0],
            "overlap_param": [0.0, 0.0],
        },
    }


def save_example_case(output_path: Union[str, Path]) -> None:
    """Save the example case to a JSON or YAML file.

    Args:
        output_path: Path of the file to write
    """
    output_path = Path(output_path)
    example = create_example_case()
    with open(output_path, 'w') as f:
        if output_path.suffix.lower() in ('.yaml', '.yml'):
            yaml.safe_dump(example, f, default_flow_style=None, sort_keys=False)
        else:
            json.dump(example, f, indent=2)
    logger.info(f"Saved example case to {output_path}")
