import pytest
from errors import PeekUnsupportedError
from lazy import LazyCollection
from peekable import Peekable


class TestPeekable:
    """Test one-item lookahead"""

    def test_peek_does_not_consume(self):
        """Test that repeated peeks return the same item"""
        p = Peekable([1, 2, 3])

        assert p.peek() == 1
        assert p.peek() == 1, "A second peek should not advance"
        assert list(p) == [1, 2, 3]

    def test_peek_pulls_source_once(self):
        """Test that peek then next pulls exactly one item from the source"""
        pulled = []

        def source():
            for item in "abc":
                pulled.append(item)
                yield item

        p = Peekable(source())
        assert p.peek() == "a"
        assert next(p) == "a"
        assert pulled == ["a"], f"Source pulled too far: {pulled}"

    def test_peek_exhausted_returns_default(self):
        """Test lookahead past the end"""
        p = Peekable([7])
        assert next(p) == 7
        assert p.peek() is None
        assert p.peek("end") == "end"
        with pytest.raises(StopIteration):
            next(p)

    def test_exhaustion_is_remembered(self):
        """Test that an exhausted source is not pulled again"""
        calls = []

        class Flaky:
            def __iter__(self):
                return self

            def __next__(self):
                calls.append(1)
                if len(calls) == 1:
                    raise StopIteration
                return "late"

        p = Peekable(Flaky())
        assert p.peek("done") == "done"
        assert list(p) == []
        assert len(calls) == 1, f"Source pulled after exhaustion: {len(calls)} pulls"

    def test_none_items_are_peekable(self):
        """Test that a None item is distinguished from exhaustion by iteration"""
        p = Peekable([None, 1])
        assert p.peek("missing") is None
        assert list(p) == [None, 1]

    def test_repr(self):
        """Test the buffer state in repr"""
        p = Peekable([1])
        assert repr(p) == "<Peekable empty buffer>"
        p.peek()
        assert repr(p) == "<Peekable buffered=1>"
        list(p)
        p.peek()
        assert repr(p) == "<Peekable exhausted>"


class TestPeekableCollection:
    """Test lookahead on LazyCollection"""

    def test_peek_requires_capability(self):
        """Test that peek() on a plain collection raises"""
        col = LazyCollection([1, 2])
        assert not col.supports_peek
        with pytest.raises(PeekUnsupportedError):
            col.peek()

    def test_peekable_collection(self):
        """Test peek then consume through the wrapper"""
        col = LazyCollection(range(5)).map(lambda x: x * 2).peekable()

        assert col.supports_peek
        assert col.peek() == 0
        assert col.take(2).to_list() == [0, 2]
        assert col.peek() == 4
        assert col.to_list() == [4, 6, 8]
        assert col.peek("empty") == "empty"

    def test_peekable_is_idempotent(self):
        """Test that wrapping twice returns the same instance"""
        col = LazyCollection("abc").peekable()
        assert col.peekable() is col

    def test_chaining_drops_capability(self):
        """Test that a further transformation needs peekable() again"""
        col = LazyCollection([1, 2, 3]).peekable().map(lambda x: x + 1)
        assert not col.supports_peek
        assert col.peekable().peek() == 2

    def test_lookahead_parser(self):
        """Test grouping runs of equal items with peek"""
        col = LazyCollection("aaabccdd").peekable()
        runs = []
        for item in col:
            length = 1
            while col.peek() == item:
                next(iter(col))
                length += 1
            runs.append(f"{item}{length}")

        assert runs == ["a3", "b1", "c2", "d2"], f"Unexpected runs: {runs}"
