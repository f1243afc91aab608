#!/usr/bin/env python
"""
Quick start example - the simplest way to run a sheared fluid.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from shearmd import setup_logging, simulate


def main():
    setup_logging()

    # 1. Isokinetic SLLOD shear flow with defaults
    result = simulate.sllod_fluid(n_atoms=256, n_blocks=5, n_steps=200)
    print(
        f"SLLOD: T(kin)={result.mean_temperature:.4f} "
        f"T(con)={result.mean_config_temperature:.4f} "
        f"P={result.mean_pressure:.4f}"
    )

    # 2. Constant-NVE multiple-timestep run over three shells
    result = simulate.mts_fluid(
        n_atoms=256,
        shell_cutoffs=(1.5, 2.0, 2.5),
        n_mts=(1, 2, 2),
        n_blocks=5,
        n_steps=100,
    )
    print(
        f"MTS: E/N={result.mean_energy:.4f} "
        f"fluctuation={result.energy_fluctuation:.2e}"
    )


if __name__ == "__main__":
    main()
