"""
North Sea Size-Spectrum Demonstration Script

This example demonstrates basic pymizer functionality:
1. Building model parameters from a species table
2. Projecting with constant effort per gear
3. Projecting with time-varying effort
4. Summarising and plotting the results

The species traits approximate a 12-species North Sea community.
"""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pymizer import mizer_params, project
from pymizer.core.plotting import plot_biomass, plot_sim_summary, plot_spectra
from pymizer.core.summary import get_biomass, get_yield

NORTH_SEA_SPECIES = pd.DataFrame({
    "species": ["Sprat", "Sandeel", "N.pout", "Herring", "Dab", "Whiting",
                "Sole", "Gurnard", "Plaice", "Haddock", "Cod", "Saithe"],
    "w_inf": [33, 36, 100, 334, 324, 1192, 866, 668, 2976, 4316, 39851, 39658],
    "w_mat": [13, 4, 23, 99, 21, 75, 78, 39, 105, 165, 1606, 1076],
    "beta": [51076, 398849, 22, 280540, 191, 22, 381, 283, 113, 558, 66, 40],
    "sigma": [0.8, 1.9, 1.5, 3.2, 1.9, 1.5, 1.9, 1.8, 1.6, 2.1, 1.3, 1.1],
    "r_max": [7.38e11, 4.10e11, 1.05e13, 1.05e12, 8.68e8, 5.48e11,
              3.09e10, 6.46e11, 6.13e18, 8.97e11, 1.31e12, 4.75e12],
    "gear": ["Industrial", "Industrial", "Industrial", "Pelagic", "Beam", "Otter",
             "Beam", "Otter", "Beam", "Otter", "Otter", "Otter"],
})


def demo_params():
    """Demonstrate building model parameters."""
    print("=" * 60)
    print("DEMO 1: Model Parameters")
    print("=" * 60)

    params = mizer_params(NORTH_SEA_SPECIES, no_w=100)
    print(params)
    print(f"   > Gears: {params.gear_names}")
    print(f"   > Egg size bins: {params.w_min_idx.tolist()}")
    return params


def demo_constant_effort(params):
    """Demonstrate a projection with constant effort per gear."""
    print("\n" + "=" * 60)
    print("DEMO 2: Constant Effort")
    print("=" * 60)

    effort = {"Industrial": 0.0, "Pelagic": 1.0, "Beam": 0.5, "Otter": 0.5}
    sim = project(params, effort=effort, t_max=20, dt=0.25, t_save=1,
                  progress=lambda f: print(f"\r   > {f:5.0%} done", end=""))
    print()
    print(sim)

    biomass = get_biomass(sim)
    print("\n   Biomass in the final year:")
    print(biomass.iloc[-1].to_string(float_format="{:.3g}".format))

    fig = plot_biomass(sim, title="North Sea biomass, constant effort")
    fig.savefig("north_sea_biomass.png", dpi=150, bbox_inches="tight")
    print("\n   > Saved: north_sea_biomass.png")
    plt.close(fig)
    return sim


def demo_time_varying_effort(params):
    """Demonstrate a projection with effort that changes through time."""
    print("\n" + "=" * 60)
    print("DEMO 3: Time-Varying Effort")
    print("=" * 60)

    years = np.arange(1990, 2011, 5)
    otter = np.linspace(1.0, 0.2, len(years))
    effort = pd.DataFrame({
        "Industrial": 0.5,
        "Pelagic": 0.8,
        "Beam": 0.5,
        "Otter": otter,
    }, index=years)
    print(effort)

    sim = project(params, effort=effort, dt=0.25, t_save=1)
    yields = get_yield(sim)
    print("\n   Cod and Saithe yield:")
    print(yields[["Cod", "Saithe"]].iloc[::5].to_string(float_format="{:.3g}".format))

    fig = plot_spectra(sim)
    fig.savefig("north_sea_spectra.png", dpi=150, bbox_inches="tight")
    plt.close(fig)

    fig = plot_sim_summary(sim)
    fig.savefig("north_sea_summary.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("\n   > Saved: north_sea_spectra.png, north_sea_summary.png")
    return sim


def main():
    """Run all demonstrations."""
    params = demo_params()
    demo_constant_effort(params)
    demo_time_varying_effort(params)

    print("\n" + "=" * 60)
    print("All demos complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
