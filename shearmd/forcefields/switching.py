"""
Switching function joining neighbouring cutoff shells.

A pair at distance r near a shell boundary r_c is shared between the two
shells through the smoothstep S(x) = (2x + 3) x^2 with x = (r - r_c) / width,
which runs from 1 at x = -1 to 0 at x = 0 with zero slope at both ends. The
inner shell switches out with weight S(x), the outer one switches in with
1 - S(x), so the two weights always sum to one.

Every function returns the weight together with -r * dw/dr, the form in
which the derivative enters the pair virial.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray


def smoothstep(x: ArrayLike) -> NDArray[np.floating]:
    """Return S(x) = (2x + 3) x^2 for x in [-1, 0]."""
    x = np.asarray(x, dtype=np.float64)
    return (2.0 * x + 3.0) * x**2


def smoothstep_derivative(x: ArrayLike) -> NDArray[np.floating]:
    """Return dS/dx = 6 x (x + 1)."""
    x = np.asarray(x, dtype=np.float64)
    return 6.0 * x * (x + 1.0)


def switch_off(
    r: ArrayLike, r_cut: float, width: float
) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Weight of a shell whose outer boundary is ``r_cut``.

    Valid for r in [r_cut - width, r_cut]; ramps 1 -> 0.

    Returns:
        Tuple of (weight, -r * dweight/dr).
    """
    r = np.asarray(r, dtype=np.float64)
    x = (r - r_cut) / width
    return smoothstep(x), -smoothstep_derivative(x) * r / width


def switch_on(
    r: ArrayLike, r_cut: float, width: float
) -> tuple[NDArray[np.floating], NDArray[np.floating]]:
    """
    Weight of a shell whose inner boundary is ``r_cut``.

    Valid for r in [r_cut - width, r_cut]; ramps 0 -> 1.

    Returns:
        Tuple of (weight, -r * dweight/dr).
    """
    r = np.asarray(r, dtype=np.float64)
    x = (r - r_cut) / width
    return 1.0 - smoothstep(x), smoothstep_derivative(x) * r / width
