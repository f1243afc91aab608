"""Long-range (tail) corrections for the truncated Lennard-Jones potential."""

from __future__ import annotations

import numpy as np


def potential_lrc(density: float, r_cut: float) -> float:
    """
    Long-range correction to the Lennard-Jones energy per atom.

    Assumes a uniform density beyond the cutoff:

        U_lrc / N = pi * rho * [(8/9) r_c^-9 - (8/3) r_c^-3]

    Args:
        density: Number density N/V.
        r_cut: Cutoff distance (sigma units), r_cut > 0.

    Returns:
        Energy correction per atom (epsilon units).
    """
    sr3 = 1.0 / r_cut**3
    return float(np.pi * ((8.0 / 9.0) * sr3**3 - (8.0 / 3.0) * sr3) * density)


def pressure_lrc(density: float, r_cut: float) -> float:
    """
    Long-range correction to the Lennard-Jones pressure.

        P_lrc = pi * rho^2 * [(32/9) r_c^-9 - (16/3) r_c^-3]

    Args:
        density: Number density N/V.
        r_cut: Cutoff distance (sigma units), r_cut > 0.

    Returns:
        Pressure correction (epsilon / sigma^3 units).
    """
    sr3 = 1.0 / r_cut**3
    return float(np.pi * ((32.0 / 9.0) * sr3**3 - (16.0 / 3.0) * sr3) * density**2)
