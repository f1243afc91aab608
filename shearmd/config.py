"""Run configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None
    if not number.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(number)


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def _as_list(name: str, value: Any) -> list[Any]:
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise ConfigurationError(f"{name} must be a sequence, got {value!r}")
    return list(value)


@dataclass
class RunConfig:
    """
    Parameters of a sheared Lennard-Jones run.

    The integrator is chosen from the fields: with ``shell_cutoffs`` and
    ``n_mts`` set the run uses multiple-timestep integration over the shells,
    otherwise a single-shell isokinetic SLLOD run with cutoff ``r_cut``.

    Attributes:
        n_blocks: Number of blocks.
        n_steps: Steps per block.
        r_cut: Potential cutoff (single-shell runs).
        dt: Time step (innermost shell for multiple-timestep runs).
        strain_rate: Strain rate for SLLOD runs.
        switch_width: Switching width between shells.
        shell_cutoffs: Increasing shell cutoff radii.
        n_mts: Timestep multipliers per shell, first entry 1.
        seed: Random seed for initial velocities.
    """

    n_blocks: int = 10
    n_steps: int = 1000
    r_cut: float = 2.5
    dt: float = 0.005
    strain_rate: float = 0.01
    switch_width: float = 0.1
    shell_cutoffs: tuple[float, ...] | None = None
    n_mts: tuple[int, ...] | None = None
    seed: int = 42

    def __post_init__(self) -> None:
        for name in ("n_blocks", "n_steps", "seed"):
            setattr(self, name, _as_int(name, getattr(self, name)))
        for name in ("r_cut", "dt", "strain_rate", "switch_width"):
            setattr(self, name, _as_float(name, getattr(self, name)))
        if self.shell_cutoffs is not None:
            radii = _as_list("shell_cutoffs", self.shell_cutoffs)
            self.shell_cutoffs = tuple(_as_float("shell_cutoffs", r) for r in radii)
        if self.n_mts is not None:
            factors = _as_list("n_mts", self.n_mts)
            self.n_mts = tuple(_as_int("n_mts", n) for n in factors)

    @property
    def multiple_timestep(self) -> bool:
        """Return True if the run uses shell multiple-timestep integration."""
        return self.shell_cutoffs is not None

    def validate(self) -> None:
        """
        Check parameter values.

        Raises:
            ConfigurationError: If any value is out of range or inconsistent.
        """
        if self.n_blocks < 1:
            raise ConfigurationError(f"n_blocks must be >= 1, got {self.n_blocks}")
        if self.n_steps < 1:
            raise ConfigurationError(f"n_steps must be >= 1, got {self.n_steps}")
        if self.r_cut <= 0.0:
            raise ConfigurationError(f"r_cut must be positive, got {self.r_cut}")
        if self.dt <= 0.0:
            raise ConfigurationError(f"dt must be positive, got {self.dt}")
        if self.switch_width < 0.0:
            raise ConfigurationError(
                f"switch_width must be non-negative, got {self.switch_width}"
            )

        if (self.shell_cutoffs is None) != (self.n_mts is None):
            raise ConfigurationError(
                "shell_cutoffs and n_mts must be given together"
            )
        if self.shell_cutoffs is not None and self.n_mts is not None:
            if len(self.shell_cutoffs) != len(self.n_mts):
                raise ConfigurationError(
                    f"{len(self.shell_cutoffs)} shell cutoffs but "
                    f"{len(self.n_mts)} timestep multipliers"
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """
        Build a configuration from a mapping.

        Raises:
            ConfigurationError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )

        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> RunConfig:
        """
        Load a configuration from a YAML file.

        Raises:
            ConfigurationError: If the document is not a mapping, or on
                unknown keys or invalid values.
        """
        with Path(path).open() as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: expected a mapping of run parameters")
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path) -> None:
        """Write the configuration as YAML."""
        with Path(path).open("w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data."""
        data = asdict(self)
        for key in ("shell_cutoffs", "n_mts"):
            if data[key] is not None:
                data[key] = list(data[key])
        return data
