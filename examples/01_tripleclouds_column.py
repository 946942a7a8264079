#!/usr/bin/env python3
"""
Longwave Fluxes Through a Cloudy Column
=======================================

This example computes gray longwave flux profiles through an idealized
column with a cloud layer, comparing the solution modes of tripleclouds:

1. Two-stream Tripleclouds fluxes (scattering, 0 angles)
2. Radiances at 2 and 4 Gauss-Legendre angles per hemisphere
3. No-scattering radiances at the diffusivity angle
4. Doubleclouds (no in-cloud variability) versus Tripleclouds

References:
- Shonk & Hogan (2008). Tripleclouds.
- Fu et al. (1997). Multiple scattering parameterization in thermal
  infrared radiative transfer.

Usage:
    python 01_tripleclouds_column.py
"""

import argparse

import numpy as np

from tripleclouds import SolverConfig, SpectralProfile, calc_flux, calc_no_scattering_flux


def parse_args():
    parser = argparse.ArgumentParser(
        description="Compare tripleclouds solution modes for a cloudy column"
    )
    parser.add_argument("--no-plot", action="store_true", help="Disable plotting")
    parser.add_argument("--output", type=str, default="tripleclouds_column.png")
    parser.add_argument("--fsd", type=float, default=1.0,
                        help="Fractional standard deviation of in-cloud optical depth")
    return parser.parse_args()


def build_column(fsd):
    """Twenty-layer column with a cloud between layers 12 and 15."""
    n_levels = 20
    pressure_hl = np.linspace(100.0, 1000.0, n_levels + 1)
    temperature_hl = 288.0 - 6.5 * 7.0 * np.log(1000.0 / pressure_hl)

    cloud_fraction = np.zeros(n_levels)
    cloud_fraction[12:16] = [0.3, 0.6, 0.7, 0.4]
    od_cloud = np.zeros(n_levels)
    od_cloud[12:16] = [2.0, 6.0, 8.0, 3.0]

    return SpectralProfile.from_temperature(
        temperature_hl=temperature_hl,
        surface_temperature=290.0,
        cloud_fraction=cloud_fraction,
        od_clear=np.full(n_levels, 0.15),
        od_cloud=od_cloud,
        overlap_param=np.full(n_levels - 1, 0.7),
        surface_emissivity=0.98,
        fractional_std=np.full(n_levels, fsd),
        ssa_cloud=np.where(od_cloud > 0, 0.5, 0.0),
        asymmetry_cloud=np.where(od_cloud > 0, 0.85, 0.0),
    ), pressure_hl


def main():
    args = parse_args()

    print("=" * 70)
    print("TRIPLECLOUDS COLUMN COMPARISON")
    print("=" * 70)

    profile, pressure_hl = build_column(args.fsd)

    runs = {
        "Two-stream": calc_flux(profile, SolverConfig(want_cloud_cover=True)),
        "2 angles": calc_flux(profile, SolverConfig(n_angles_per_hem=2)),
        "4 angles": calc_flux(profile, SolverConfig(n_angles_per_hem=4)),
        "No scattering": calc_no_scattering_flux(profile),
        "Doubleclouds": calc_flux(profile, SolverConfig(num_regions=2)),
    }

    print(f"\nCloud cover: {runs['Two-stream'].cloud_cover:.3f}")
    print(f"\n{'Mode':<16} {'OLR [W/m2]':>12} {'Surface down [W/m2]':>20}")
    print("-" * 50)
    for name, result in runs.items():
        print(f"{name:<16} {result.flux_up[0, 0]:>12.2f} {result.flux_dn[0, -1]:>20.2f}")

    if not args.no_plot:
        import matplotlib.pyplot as plt

        fig, axes = plt.subplots(1, 2, figsize=(12, 6), sharey=True)
        for name, result in runs.items():
            axes[0].plot(result.flux_up[0], pressure_hl, label=name)
            axes[1].plot(result.flux_dn[0], pressure_hl, label=name)

        axes[0].set_xlabel("Upwelling flux [W/m²]")
        axes[1].set_xlabel("Downwelling flux [W/m²]")
        axes[0].set_ylabel("Pressure [hPa]")
        axes[0].invert_yaxis()
        for ax in axes:
            ax.grid(True, alpha=0.3)
        axes[1].legend()

        plt.tight_layout()
        plt.savefig(args.output, dpi=150, bbox_inches='tight')
        print(f"\nPlot saved to {args.output}")


if __name__ == "__main__":
    main()
