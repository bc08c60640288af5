import pytest
import gc
import tracemalloc
from lazy import LazyCollection
from sources import gen


class TestMemoryEfficiency:
    """Test memory efficiency of lazy evaluation"""

    def test_memory_scales_with_output_not_input(self):
        """Test that memory usage scales with output size, not input size"""
        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            LazyCollection(range(100000))
            .map(lambda x: x * x)
            .filter(lambda x: x % 1000 == 0)
            .take(10)
            .to_list()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline
        assert len(result) == 10, "Expected 10 results"
        assert memory_used < 50000000, f"Used too much memory: {memory_used} bytes"  # 50MB limit

    def test_no_intermediate_collection_storage(self):
        """Test that intermediate results are not stored in memory"""
        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            LazyCollection(range(100))
            .map(lambda x: [x] * 1000)
            .take(5)
            .to_list()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline
        assert len(result) == 5, f"Expected 5 results, got {len(result)}"
        assert memory_used < 10000000, f"Used too much memory: {memory_used} bytes"  # 10MB limit

    def test_windows_keep_bounded_buffer(self):
        """Test that sliding windows over a long stream hold only one window"""
        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        total = (
            LazyCollection(gen(lambda n: n))
            .take(200000)
            .windows(3)
            .map(sum)
            .sum()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline
        # each window sums to 3n + 3 for n in 0..199997
        assert total == 3 * (199997 * 199998 // 2) + 3 * 199998
        assert memory_used < 5000000, f"Used too much memory: {memory_used} bytes"  # 5MB limit

    def test_unique_over_chunked_generator(self):
        """Test streaming dedup and chunking from a generator source"""
        def generate_data():
            for i in range(100000):
                yield {"id": i % 50, "payload": [i] * 100}

        tracemalloc.start()
        baseline = tracemalloc.get_traced_memory()[0]

        result = (
            LazyCollection(generate_data())
            .pluck("id")
            .unique()
            .chunk(10)
            .take(2)
            .to_list()
        )

        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        memory_used = peak - baseline
        assert result == [list(range(10)), list(range(10, 20))], f"Unexpected result: {result}"
        assert memory_used < 20000000, f"Used too much memory: {memory_used} bytes"  # 20MB limit

    def test_garbage_collection_of_processed_items(self):
        """Test that processed items can be garbage collected"""
        gc.collect()
        initial_objects = len(gc.get_objects())

        result = (
            LazyCollection(range(20))
            .map(lambda x: {"data": [x] * 10000, "value": x})
            .pluck("value")
            .take(5)
            .to_list()
        )

        gc.collect()
        final_objects = len(gc.get_objects())

        assert result == [0, 1, 2, 3, 4], f"Unexpected result: {result}"
        object_growth = final_objects - initial_objects
        assert object_growth < 1000, f"Too many objects accumulated: {object_growth}"
