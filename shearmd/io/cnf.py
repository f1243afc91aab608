"""Plain-text configuration format.

Layout:
    N
    box_length
    x y z [vx vy vz]      (one line per atom)
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike

from .base import Configuration, ConfigurationReader, ConfigurationWriter


class CnfWriter(ConfigurationWriter):
    """Writer for the plain-text configuration format."""

    def __init__(self, filename: str | Path, precision: int = 10) -> None:
        """
        Initialize writer.

        Args:
            filename: Output file path.
            precision: Decimal places for coordinates.
        """
        super().__init__(filename)
        self.precision = precision

    def write(
        self,
        n_atoms: int,
        box_length: float,
        positions: ArrayLike,
        velocities: ArrayLike | None = None,
    ) -> None:
        config = Configuration(n_atoms, box_length, positions, velocities)

        columns = config.positions
        if config.velocities is not None:
            columns = np.hstack([config.positions, config.velocities])

        width = self.precision + 6
        fmt = f"{{:{width}.{self.precision}f}}"

        with self.filename.open("w") as f:
            f.write(f"{config.n_atoms}\n")
            f.write(fmt.format(config.box_length) + "\n")
            for row in columns:
                f.write(" ".join(fmt.format(value) for value in row) + "\n")


class CnfReader(ConfigurationReader):
    """Reader for the plain-text configuration format."""

    def read(self) -> Configuration:
        """
        Read the configuration.

        Returns:
            Configuration; velocities are None if the file holds positions only.

        Raises:
            ValueError: If the file is malformed.
        """
        with self.filename.open() as f:
            n_atoms = int(f.readline().split()[0])
            box_length = float(f.readline().split()[0])
            data = np.loadtxt(f, ndmin=2)

        if data.shape[0] != n_atoms:
            raise ValueError(
                f"{self.filename}: expected {n_atoms} atom lines, got {data.shape[0]}"
            )
        if data.shape[1] not in (3, 6):
            raise ValueError(
                f"{self.filename}: expected 3 or 6 columns, got {data.shape[1]}"
            )

        velocities = data[:, 3:6] if data.shape[1] == 6 else None
        return Configuration(n_atoms, box_length, data[:, :3], velocities)
