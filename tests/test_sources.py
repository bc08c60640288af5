import asyncio
from dataclasses import dataclass

import pytest
from errors import SequenceTypeError
from lazy import LazyCollection
from sources import all_entries, collect_async, entries, from_entries, gen, range


@dataclass
class User:
    name: str
    age: int


class TestRange:
    """Test inclusive numeric ranges"""

    def test_range_from_zero(self):
        """Test the single-argument form"""
        assert list(range(5)) == [0, 1, 2, 3, 4, 5]

    def test_range_descending(self):
        """Test that the direction follows stop - start"""
        assert list(range(3, 5)) == [5, 4, 3]
        assert list(range(-2)) == [0, -1, -2]

    def test_range_step_sign_is_ignored(self):
        """Test that only the magnitude of step is used"""
        assert list(range(10, 0, 2)) == [0, 2, 4, 6, 8, 10]
        assert list(range(10, 0, -2)) == [0, 2, 4, 6, 8, 10]
        assert list(range(0, 10, 3)) == [10, 7, 4, 1]

    def test_range_single_point(self):
        """Test start == stop and a zero step"""
        assert list(range(4, 4)) == [4]
        assert list(range(5, 1, 0)) == [1]

    def test_range_floats(self):
        """Test fractional steps"""
        assert list(range(1, 0, 0.25)) == [0, 0.25, 0.5, 0.75, 1.0]

    def test_range_is_reiterable(self):
        """Test that a range can be consumed repeatedly"""
        r = range(2)
        assert list(r) == list(r) == [0, 1, 2]
        assert LazyCollection.from_range(3, 1).to_list() == [1, 2, 3]


class TestGen:
    """Test index-driven infinite sequences"""

    def test_gen_restarts(self):
        """Test that each iteration starts from index 0"""
        squares = gen(lambda n: n * n)
        first = iter(squares)
        assert [next(first) for _ in [0, 1, 2]] == [0, 1, 4]
        assert next(iter(squares)) == 0

    def test_gen_is_lazy(self):
        """Test that fn runs only for pulled indexes"""
        calls = []
        col = LazyCollection.from_gen(lambda n: calls.append(n) or n).take(2)
        assert calls == []
        col.to_list()
        assert calls == [0, 1]


class TestEntries:
    """Test key/value pair extraction"""

    def test_entries_of_mapping(self):
        """Test mapping items"""
        assert list(entries({"a": 1, "b": 2})) == [("a", 1), ("b", 2)]

    def test_entries_of_object(self):
        """Test own attributes of a plain object"""
        assert list(entries(User("ann", 30))) == [("name", "ann"), ("age", 30)]

    def test_entries_of_sequence(self):
        """Test index pairs of a sequence"""
        assert list(entries(["x", "y"])) == [(0, "x"), (1, "y")]

    @pytest.mark.parametrize("value", [1, "abc", None, User])
    def test_entries_rejects_non_records(self, value):
        """Test that scalars, strings and classes are rejected"""
        with pytest.raises(SequenceTypeError):
            entries(value)

    def test_all_entries(self):
        """Test the permissive variant"""
        class Settings:
            def items(self):
                return [("debug", True)]

        assert list(all_entries(Settings())) == [("debug", True)]
        assert list(all_entries([("k", "v")])) == [("k", "v")], "Pairs pass through"
        assert list(all_entries(User("bo", 4))) == [("name", "bo"), ("age", 4)]
        with pytest.raises(SequenceTypeError):
            all_entries(7)

    def test_from_entries_round_trip(self):
        """Test rebuilding a dict from pairs"""
        data = {"a": 1, "b": 2}
        assert from_entries(entries(data)) == data
        assert from_entries(LazyCollection.from_entries(data).map(lambda kv: (kv[0], kv[1] * 10))) == {"a": 10, "b": 20}

    def test_from_entries_collection_validates(self):
        """Test that the collection constructor rejects non-records eagerly"""
        with pytest.raises(SequenceTypeError):
            LazyCollection.from_entries(3)


async def _ticker(n):
    for i in [0, 1, 2][:n]:
        await asyncio.sleep(0)
        yield i


class TestAsyncSources:
    """Test collection from async sources"""

    @pytest.mark.asyncio
    async def test_collect_async_iterable(self):
        """Test draining an async generator"""
        assert await collect_async(_ticker(3)) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_collect_awaitables_in_order(self):
        """Test that awaitables are awaited one after another"""
        order = []

        async def job(name, delay):
            order.append(f"start {name}")
            await asyncio.sleep(delay)
            order.append(f"end {name}")
            return name

        result = await collect_async([job("a", 0.01), "plain", job("b", 0)])

        assert result == ["a", "plain", "b"]
        assert order == ["start a", "end a", "start b", "end b"], f"Jobs overlapped: {order}"

    @pytest.mark.asyncio
    async def test_collect_async_rejects_non_iterables(self):
        """Test the error for a source that is neither"""
        with pytest.raises(SequenceTypeError):
            await collect_async(5)

    @pytest.mark.asyncio
    async def test_from_async_collection(self):
        """Test the LazyCollection async constructor"""
        col = await LazyCollection.from_async(_ticker(3))
        assert col.map(lambda x: x + 1).to_list() == [1, 2, 3]
        assert col.sum() == 3, "The collected items can be consumed again"
