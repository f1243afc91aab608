"""Statistics collectors fed by the run loop."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np

from ..io import CnfWriter
from .observables import Observables

if TYPE_CHECKING:
    from ..system import ParticleState

logger = logging.getLogger(__name__)

# Observable field names, in the order of Observables.as_tuple()
FIELDS = ("en_s", "p_s", "en_f", "p_f", "tk", "tc", "strain")


class Reporter(ABC):
    """
    Receiver of per-step observables and block boundaries.

    The engine calls ``report`` on steps where ``should_report`` holds and
    ``block_end`` after the last step of every block. Any averaging is up to
    the reporter.
    """

    @abstractmethod
    def report(self, state: ParticleState, observables: Observables) -> None:
        """
        Take the observables of one step.

        Args:
            state: State after the step.
            observables: Observables of that state.
        """
        ...

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Steps between reports."""
        ...

    def should_report(self, step: int) -> bool:
        return step % self.frequency == 0

    def initialize(self, state: ParticleState) -> None:
        """Hook run once before the first step."""

    def block_end(self, block: int, state: ParticleState) -> None:
        """Hook run after each block; blocks are numbered from 1."""

    def finalize(self, state: ParticleState) -> None:
        """Hook run once after the last step, also when a run aborts."""


class ReporterGroup:
    """Fan-out of engine callbacks to a list of reporters."""

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        self._members: list[Reporter] = list(reporters) if reporters else []

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self):
        return iter(self._members)

    def add(self, reporter: Reporter) -> None:
        self._members.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        self._members.remove(reporter)

    def initialize(self, state: ParticleState) -> None:
        for member in self._members:
            member.initialize(state)

    def report(self, state: ParticleState, observables: Observables) -> None:
        """Forward to the members due at ``state.step``."""
        for member in self._members:
            if member.should_report(state.step):
                member.report(state, observables)

    def block_end(self, block: int, state: ParticleState) -> None:
        for member in self._members:
            member.block_end(block, state)

    def finalize(self, state: ParticleState) -> None:
        for member in self._members:
            member.finalize(state)


class StateReporter(Reporter):
    """
    Tabular text output of the observables.

    One header line with the column labels, then one row per reported step:
    step, time and the seven observables.
    """

    def __init__(
        self,
        frequency: int = 100,
        file: TextIO | None = None,
        separator: str = "\t",
    ) -> None:
        """
        Args:
            frequency: Steps between rows.
            file: Stream to write to; stdout when omitted.
            separator: Column separator.
        """
        self._every = frequency
        self._out = sys.stdout if file is None else file
        self._sep = separator
        self._started = False

    @property
    def frequency(self) -> int:
        return self._every

    def _write_row(self, columns: list[str]) -> None:
        self._out.write(self._sep.join(columns) + "\n")

    def initialize(self, state: ParticleState) -> None:
        if self._started:
            return
        self._write_row(["Step", "Time", *Observables.LABELS])
        self._started = True

    def report(self, state: ParticleState, observables: Observables) -> None:
        row = [str(state.step), f"{state.time:.4f}"]
        row.extend(f"{value:.5f}" for value in observables.as_tuple())
        self._write_row(row)
        self._out.flush()


class ObservableReporter(Reporter):
    """In-memory series of every reported step, with block boundaries."""

    def __init__(self, frequency: int = 1) -> None:
        self._every = frequency
        self._step_log: list[int] = []
        self._time_log: list[float] = []
        self._rows: list[tuple[float, ...]] = []
        self._boundaries: list[int] = []

    @property
    def frequency(self) -> int:
        return self._every

    def report(self, state: ParticleState, observables: Observables) -> None:
        self._step_log.append(state.step)
        self._time_log.append(state.time)
        self._rows.append(observables.as_tuple())

    def block_end(self, block: int, state: ParticleState) -> None:
        self._boundaries.append(len(self._rows))

    @property
    def n_records(self) -> int:
        return len(self._rows)

    @property
    def steps(self) -> np.ndarray:
        return np.asarray(self._step_log, dtype=int)

    @property
    def times(self) -> np.ndarray:
        return np.asarray(self._time_log, dtype=float)

    @property
    def block_ends(self) -> list[int]:
        """Number of records stored when each block finished."""
        return list(self._boundaries)

    def series(self, name: str) -> np.ndarray:
        """
        Time series of one observable.

        Args:
            name: Field name such as "tk", or column label such as "T (kin)".

        Raises:
            KeyError: If the name matches neither.
        """
        if name in FIELDS:
            column = FIELDS.index(name)
        elif name in Observables.LABELS:
            column = Observables.LABELS.index(name)
        else:
            raise KeyError(f"Unknown observable: {name}")

        if not self._rows:
            return np.empty(0)
        return np.asarray(self._rows)[:, column]

    def clear(self) -> None:
        for log in (self._step_log, self._time_log, self._rows, self._boundaries):
            log.clear()


class ConfigurationReporter(Reporter):
    """
    Snapshot writer called at block ends.

    Each block is saved to ``<prefix><block:03d>``; runs of 1000 blocks or
    more reuse a single ``<prefix>sav`` file. Positions are converted back to
    sigma units before writing.
    """

    def __init__(
        self,
        directory: str | Path = ".",
        prefix: str = "cnf.",
        n_blocks: int | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._prefix = prefix
        self._n_blocks = n_blocks
        self._paths: list[Path] = []

    @property
    def frequency(self) -> int:
        return 1

    def should_report(self, step: int) -> bool:
        return False

    def report(self, state: ParticleState, observables: Observables) -> None:
        pass

    def _path_for(self, block: int) -> Path:
        many = self._n_blocks is not None and self._n_blocks >= 1000
        suffix = "sav" if many else f"{block:03d}"
        return self._directory / f"{self._prefix}{suffix}"

    def block_end(self, block: int, state: ParticleState) -> None:
        path = self._path_for(block)
        CnfWriter(path).write(
            state.n_atoms,
            state.box.length,
            state.physical_positions,
            state.velocities,
        )
        self._paths.append(path)
        logger.debug("Wrote configuration %s", path)

    @property
    def written(self) -> list[Path]:
        """Files written so far, one per block."""
        return list(self._paths)
