"""
Command-line interface for tripleclouds.

Provides CLI commands for:
- Running a case file through the flux solver
- Writing an example case file
"""

import argparse
import json
import logging
import sys
from pathlib import Path


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def run_case(args: argparse.Namespace) -> int:
    """Run the flux calculation for one case file."""
    from tripleclouds import calc_flux, calc_no_scattering_flux
    from tripleclouds.config import load_case

    case_path = Path(args.case)
    if not case_path.exists():
        print(f"Error: Case file not found: {args.case}")
        return 1

    case = load_case(case_path)
    solver = case.solver

    # Command-line options override the case file
    if args.regions is not None:
        solver.num_regions = args.regions
    if args.distribution is not None:
        solver.distribution = args.distribution
    if args.angles is not None:
        solver.n_angles_per_hem = args.angles
    if args.no_scattering:
        solver.scattering = False
    if args.cloud_cover:
        solver.want_cloud_cover = True

    errors = solver.validate()
    if solver.scattering and not case.profile.has_scattering_properties:
        errors.append("Scattering requested but ssa_cloud/asymmetry_cloud not given")
    if solver.num_regions == 3 and case.profile.fractional_std is None:
        errors.append("Three regions require fractional_std")
    if errors:
        for error in errors:
            print(f"Error: {error}")
        return 1

    if solver.scattering:
        result = calc_flux(case.profile, solver)
    else:
        result = calc_no_scattering_flux(case.profile, solver)

    output = {
        "name": case.name,
        "n_angles_per_hem": result.n_angles_per_hem,
        "flux_up": result.flux_up.tolist(),
        "flux_dn": result.flux_dn.tolist(),
        "region_fracs": result.regions.region_fracs.tolist(),
        "od_scaling": result.regions.od_scaling.tolist(),
    }
    if result.cloud_cover is not None:
        output["cloud_cover"] = result.cloud_cover

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(output, f, indent=2)
        print(f"Results saved to: {args.output}")
    else:
        flux_up = result.flux_up.sum(axis=0)
        flux_dn = result.flux_dn.sum(axis=0)
        print(f"\nCase: {case.name}")
        print(f"  Angles per hemisphere: {result.n_angles_per_hem}")
        if result.cloud_cover is not None:
            print(f"  Cloud cover: {result.cloud_cover:.4f}")
        print(f"  {'Level':>5} {'Up [W/m2]':>12} {'Down [W/m2]':>12}")
        for jlev, (up, dn) in enumerate(zip(flux_up, flux_dn)):
            print(f"  {jlev:>5d} {up:>12.3f} {dn:>12.3f}")

    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="tripleclouds: Longwave fluxes through partially cloudy columns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run a case file and print the flux profile
    tripleclouds --case column.yaml

    # Use four radiance angles per hemisphere and save as JSON
    tripleclouds --case column.yaml --angles 4 --output fluxes.json

    # Write an example case file
    tripleclouds --example column.yaml
        """,
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="tripleclouds 0.1.0",
    )

    parser.add_argument(
        "-c", "--case",
        type=str,
        help="Path to JSON or YAML case file",
    )
    parser.add_argument(
        "--example",
        type=str,
        metavar="PATH",
        help="Write an example case file and exit",
    )

    # Solver options
    parser.add_argument(
        "-r", "--regions",
        type=int,
        choices=[2, 3],
        help="Number of regions per layer",
    )
    parser.add_argument(
        "--distribution",
        type=str,
        choices=["gamma", "lognormal"],
        help="Sub-grid cloud optical depth distribution",
    )
    parser.add_argument(
        "-n", "--angles",
        type=int,
        help="Radiance angles per hemisphere (0 for two-stream fluxes)",
    )
    parser.add_argument(
        "--no-scattering",
        action="store_true",
        help="Neglect cloud scattering",
    )
    parser.add_argument(
        "--cloud-cover",
        action="store_true",
        help="Report total cloud cover",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output JSON file path",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.example:
        from tripleclouds.config import save_example_case

        save_example_case(args.example)
        print(f"Example case saved to: {args.example}")
        return 0

    if not args.case:
        parser.error("--case is required unless --example is given")

    try:
        return run_case(args)
    except Exception as e:
        logging.exception(f"Flux calculation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
