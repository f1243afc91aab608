"""Tests for parallel infrastructure."""

import numpy as np
import pytest

from shearmd.forcefields import ShellCutoffs, ShellForceEngine
from shearmd.parallel import (
    ParallelBackend,
    SerialBackend,
    available_backends,
    get_backend,
    reset_default_backend,
    set_default_backend,
)
from shearmd.parallel.backends.multiprocessing_backend import MultiprocessingBackend
from shearmd.parallel.dispatcher import create_backend
from shearmd.simulate import lattice_state


def _square(x):
    return x * x


class TestSerialBackend:
    """Tests for serial backend."""

    def test_serial_backend_properties(self):
        """Test serial backend basic properties."""
        backend = SerialBackend()

        assert backend.name == "serial"
        assert backend.n_workers == 1

    def test_parallel_map(self):
        """Test map preserves order."""
        backend = SerialBackend()
        assert backend.parallel_map(_square, [1, 2, 3]) == [1, 4, 9]


class TestPartitionPairs:
    """Tests for pair-block partitioning."""

    def test_single_worker_single_block(self):
        assert SerialBackend().partition_pairs(100) == [(0, 100)]

    def test_max_block_size(self):
        blocks = SerialBackend().partition_pairs(100, max_block_size=30)
        assert len(blocks) == 4
        assert all(end - start <= 30 for start, end in blocks)

    def test_blocks_cover_range(self):
        backend = MultiprocessingBackend(n_workers=3)
        blocks = backend.partition_pairs(10)
        assert blocks[0][0] == 0
        assert blocks[-1][1] == 10
        for (_, end), (start, _) in zip(blocks[:-1], blocks[1:]):
            assert end == start
        assert len(blocks) == 3

    def test_empty(self):
        assert SerialBackend().partition_pairs(0) == []

    def test_more_workers_than_pairs(self):
        blocks = MultiprocessingBackend(n_workers=8).partition_pairs(3)
        assert blocks == [(0, 1), (1, 2), (2, 3)]


class TestMultiprocessingBackend:
    """Tests for multiprocessing backend."""

    def test_properties(self):
        backend = MultiprocessingBackend(n_workers=2)
        assert backend.name == "multiprocessing"
        assert backend.n_workers == 2

    def test_parallel_map(self):
        with MultiprocessingBackend(n_workers=2) as backend:
            assert backend.parallel_map(_square, [1, 2, 3, 4]) == [1, 4, 9, 16]
            assert backend.parallel_map(_square, [5, 6]) == [25, 36]

    def test_single_item_inline(self):
        backend = MultiprocessingBackend(n_workers=2)
        assert backend.parallel_map(_square, [3]) == [9]
        assert backend._executor is None

    def test_matches_serial_forces(self):
        """Pair blocks evaluated in worker processes reproduce serial results."""
        state = lattice_state(n_atoms=64, density=0.5, temperature=1.0, seed=2)
        cutoffs = ShellCutoffs((1.5, 2.5), switch_width=0.2)

        serial = ShellForceEngine(state.n_atoms, cutoffs, backend="serial")
        parallel = ShellForceEngine(
            state.n_atoms, cutoffs, backend=MultiprocessingBackend(n_workers=2)
        )

        r1 = serial.compute_all(state)
        r2 = parallel.compute_all(state)

        assert np.allclose(serial.forces, parallel.forces, atol=1e-12)
        assert r1.potential == pytest.approx(r2.potential)
        assert r1.virial == pytest.approx(r2.virial)
        assert r1.laplacian == pytest.approx(r2.laplacian)


class TestDispatcher:
    """Tests for backend selection."""

    def teardown_method(self):
        reset_default_backend()

    def test_default_is_serial(self):
        reset_default_backend()
        assert isinstance(get_backend(), SerialBackend)

    def test_instance_passthrough(self):
        backend = MultiprocessingBackend(n_workers=2)
        assert get_backend(backend) is backend

    def test_create_by_name(self):
        backend = create_backend("multiprocessing", n_workers=2)
        assert isinstance(backend, ParallelBackend)
        assert backend.n_workers == 2

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_backend("ray")

    def test_set_default(self):
        backend = set_default_backend("multiprocessing", n_workers=2)
        assert get_backend() is backend

    def test_available_backends(self):
        names = available_backends()
        assert names[:2] == ["serial", "multiprocessing"]


class TestMPI4PyBackend:
    """Tests for the MPI backend (single rank when not under mpirun)."""

    def test_parallel_map_preserves_order(self):
        pytest.importorskip("mpi4py")
        from shearmd.parallel.backends.mpi4py_backend import MPI4PyBackend

        backend = MPI4PyBackend()
        assert backend.name == "mpi4py"
        assert backend.parallel_map(_square, list(range(7))) == [
            x * x for x in range(7)
        ]

    def test_matches_serial_forces(self):
        pytest.importorskip("mpi4py")
        state = lattice_state(n_atoms=64, density=0.5, temperature=1.0, seed=2)
        cutoffs = ShellCutoffs((2.5,))

        serial = ShellForceEngine(state.n_atoms, cutoffs)
        mpi = ShellForceEngine(state.n_atoms, cutoffs, backend="mpi4py")

        serial.compute_all(state)
        mpi.compute_all(state)
        assert np.allclose(serial.forces, mpi.forces, atol=1e-12)
