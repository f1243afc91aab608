"""
Quick-look plots of the observable series of a run.

matplotlib is optional (``pip install shearmd[plot]``); every function here
raises ImportError when it is missing.

Example:
    >>> from shearmd import simulate, plotting
    >>> result = simulate.sllod_fluid(n_atoms=108, n_blocks=2, n_steps=200)
    >>> plotting.observables(result, show=False)
    >>> plotting.save("sllod.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None

logger = logging.getLogger(__name__)

TIME_LABEL = "t (reduced)"


def _require_matplotlib() -> None:
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "Plotting needs matplotlib; install the 'plot' extra "
            "(pip install shearmd[plot])"
        )


def _panel(ax, times, curves, ylabel: str) -> None:
    """Draw ``(values, style, label)`` curves against time on one axis."""
    for values, style, label in curves:
        ax.plot(times, values, style, label=label, lw=0.8)
    ax.set_xlabel(TIME_LABEL)
    ax.set_ylabel(ylabel)
    if any(label for _, _, label in curves):
        ax.legend()
    ax.grid(True, alpha=0.3)


def _finish(show: bool) -> None:
    plt.tight_layout()
    if show:
        plt.show()


def observables(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 8),
) -> None:
    """
    Four panels: energy, pressure, both temperatures, strain.

    Energy and pressure show the cut-and-shifted value next to the
    long-range-corrected full value.
    """
    _require_matplotlib()

    _, axes = plt.subplots(2, 2, figsize=figsize)
    t = result.times

    _panel(
        axes[0, 0],
        t,
        [(result.energy, "k-", "cut & shift"), (result.energy_full, "b--", "full")],
        "E/N",
    )
    _panel(
        axes[0, 1],
        t,
        [(result.pressure, "k-", "cut & shift"), (result.pressure_full, "b--", "full")],
        "P",
    )
    _panel(
        axes[1, 0],
        t,
        [
            (result.temperature, "r-", "kinetic"),
            (result.config_temperature, "g-", "configurational"),
        ],
        "T",
    )
    _panel(axes[1, 1], t, [(result.strain, "k-", None)], "strain")

    _finish(show)


def temperature(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Kinetic against configurational temperature.

    The kinetic temperature is pinned by the isokinetic propagators, so the
    band of one standard deviation around the mean configurational
    temperature shows how well the two agree.
    """
    _require_matplotlib()

    _, ax = plt.subplots(figsize=figsize)
    t = result.times
    tc = result.config_temperature
    mean_tc = result.mean_config_temperature

    _panel(ax, t, [(result.temperature, "b-", "kinetic"), (tc, "g-", "configurational")], "T")
    ax.axhline(mean_tc, color="r", linestyle="--", lw=1.5)
    if len(tc) > 0:
        width = float(np.std(tc))
        ax.fill_between(t, mean_tc - width, mean_tc + width, color="r", alpha=0.15)
    ax.set_title(f"<T_con> = {mean_tc:.3f}")

    _finish(show)


def save(filename: str | Path, dpi: int = 150) -> None:
    """Write the current figure; the format follows the file extension."""
    _require_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    logger.info("Saved plot to %s", filename)


def show() -> None:
    """Display figures drawn with ``show=False``."""
    _require_matplotlib()
    plt.show()
