"""Tests for parallel backends."""

import pytest

from mmcore.parallel import (
    ParallelBackend,
    SerialBackend,
    ThreadBackend,
    backend_names,
    get_backend,
    reset_default_backend,
    set_default_backend,
)


def square(x):
    return x * x


def chunk_sum(chunk):
    return float(sum(chunk))


class TestSerialBackend:
    """Tests for SerialBackend."""

    @pytest.fixture
    def backend(self):
        return SerialBackend()

    def test_properties(self, backend):
        assert backend.name == "serial"
        assert backend.n_workers == 1

    def test_parallel_map(self, backend):
        assert backend.parallel_map(square, [1, 2, 3]) == [1, 4, 9]

    def test_map_reduce(self, backend):
        assert backend.map_reduce(chunk_sum, list(range(10))) == 45.0

    def test_map_reduce_empty(self, backend):
        assert backend.map_reduce(chunk_sum, []) == 0.0


class TestThreadBackend:
    """Tests for ThreadBackend."""

    def test_properties(self):
        backend = ThreadBackend(n_workers=3)
        assert backend.name == "threads"
        assert backend.n_workers == 3

    def test_default_workers(self):
        assert ThreadBackend().n_workers >= 1

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            ThreadBackend(n_workers=0)

    def test_parallel_map_preserves_order(self):
        backend = ThreadBackend(n_workers=4)
        assert backend.parallel_map(square, list(range(20))) == [x * x for x in range(20)]

    def test_parallel_map_empty(self):
        assert ThreadBackend(n_workers=2).parallel_map(square, []) == []

    def test_pool_is_kept_until_close(self):
        backend = ThreadBackend(n_workers=2)
        assert not backend.is_running
        backend.parallel_map(square, [1, 2])
        pool = backend._executor
        backend.parallel_map(square, [3, 4])
        assert backend._executor is pool
        backend.close()
        assert not backend.is_running
        # reusable after close
        assert backend.parallel_map(square, [5]) == [25]
        backend.close()

    def test_map_reduce_matches_serial(self):
        items = [0.1 * i for i in range(1000)]
        assert ThreadBackend(n_workers=4).map_reduce(chunk_sum, items) == pytest.approx(
            SerialBackend().map_reduce(chunk_sum, items)
        )


class TestPartition:
    """Tests for splitting work into chunks."""

    def test_chunks_cover_items_in_order(self):
        items = list(range(10))
        chunks = ThreadBackend(n_workers=3).partition(items)
        assert len(chunks) == 3
        assert [x for chunk in chunks for x in chunk] == items
        assert [len(chunk) for chunk in chunks] == [4, 3, 3]

    def test_fewer_items_than_workers(self):
        chunks = ThreadBackend(n_workers=8).partition([1, 2])
        assert chunks == [[1], [2]]

    def test_empty(self):
        assert ThreadBackend(n_workers=4).partition([]) == []


class TestDispatcher:
    """Tests for backend selection."""

    def teardown_method(self):
        reset_default_backend()

    def test_default_is_serial(self):
        reset_default_backend()
        assert get_backend().name == "serial"

    def test_by_name(self):
        assert get_backend("serial").name == "serial"
        backend = get_backend("threads", n_workers=2)
        assert backend.name == "threads"
        assert backend.n_workers == 2

    def test_instance_passthrough(self):
        backend = ThreadBackend(n_workers=2)
        assert get_backend(backend) is backend

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend("mpi")

    def test_set_default(self):
        backend = set_default_backend("threads", n_workers=2)
        assert isinstance(backend, ParallelBackend)
        assert get_backend() is backend

    def test_names_are_case_insensitive(self):
        assert backend_names() == ["serial", "threads"]
        assert get_backend("Threads", n_workers=1).name == "threads"
