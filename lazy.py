"""The chainable LazyCollection wrapper."""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import combinators
import reducers
import search as structural_search
import sources
import zipping
from dispatch import MISSING, Reiterable
from errors import PeekUnsupportedError
from peekable import Peekable

logger = logging.getLogger(__name__)


class LazyCollection:
    """
    A chainable, lazy collection. Transformations are stored and applied
    only when you iterate. Optionally supports caching of realized results.

    Each transformation returns a new LazyCollection sharing the same source;
    the pipeline is rebuilt from the source on every iteration. A collection
    over a restartable source (list, range, from_range(), from_gen()) can
    therefore be consumed repeatedly, while one over a generator is
    single-pass: iterating two collections that share a generator makes them
    compete for its items.
    """
    def __init__(self, source: Iterable, ops: Optional[List[Callable]] = None,
                 cache_enabled: bool = False):
        self._source = source
        self._ops = list(ops or [])    # curried transformers, applied in order
        self._cache_enabled = cache_enabled
        self._cache: List[Any] = []    # realized items (post-ops)
        self._exhausted = False        # whether a full pass has filled the cache

    # --------- constructors ----------
    @classmethod
    def from_iterable(cls, iterable: Iterable) -> "LazyCollection":
        return cls(iterable)

    @classmethod
    def from_entries(cls, obj: Any) -> "LazyCollection":
        """(key, value) pairs of a mapping or plain object"""
        sources.entries(obj)  # raises SequenceTypeError for non-records
        return cls(Reiterable(lambda: sources.entries(obj), "entries"))

    @classmethod
    async def from_async(cls, source: Any) -> "LazyCollection":
        """Await an async iterable (or iterable of awaitables) in order, then wrap the items"""
        return cls(await sources.collect_async(source))

    @classmethod
    def from_range(cls, stop: float, start: float = 0, step: float = 1) -> "LazyCollection":
        return cls(sources.range(stop, start, step))

    @classmethod
    def from_gen(cls, fn: Callable[[int], Any]) -> "LazyCollection":
        """Infinite fn(0), fn(1), ...; bound it before draining"""
        return cls(sources.gen(fn))

    @classmethod
    def from_zip(cls, iterables: List[Iterable], stop_on_min: bool = False,
                 fill_value: Any = None) -> "LazyCollection":
        return cls(Reiterable(
            lambda: zipping.zip(iterables, stop_on_min, fill_value), "zip"
        ))

    @classmethod
    def from_search(cls, value: Any, predicate: Callable[[List[Any], Any], Any],
                    skip_after_yield: bool = False) -> "LazyCollection":
        """(path, value) matches of a structural search over value"""
        structural_search.search(value, predicate, skip_after_yield)  # validates value
        return cls(Reiterable(
            lambda: structural_search.search(value, predicate, skip_after_yield), "search"
        ))

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._with_op(combinators.map.curry(fn))

    def filter(self, pred):
        return self._with_op(combinators.filter.curry(pred))

    def filter_none(self):
        return self._with_op(combinators.filter_none.curry())

    def tap(self, fn):
        return self._with_op(combinators.tap.curry(fn))

    def skip(self, n):
        return self._with_op(combinators.skip.curry(int(n)))

    def take(self, n):
        return self._with_op(combinators.take.curry(int(n)))

    def take_while(self, pred):
        return self._with_op(combinators.take_while.curry(pred))

    def skip_while(self, pred):
        return self._with_op(combinators.skip_while.curry(pred))

    def until(self, pred):
        return self._with_op(combinators.until.curry(pred))

    def chunk(self, size):
        """Group elements into lists of `size` (last one may be shorter)"""
        # curry() defers the combinator call to iteration; validate while chaining
        size = combinators.check_chunk_size(int(size))
        return self._with_op(combinators.chunk.curry(size))

    def batch(self, size):
        """Alias for chunk()"""
        return self.chunk(size)

    def windows(self, size):
        return self._with_op(combinators.windows.curry(int(size)))

    def scan(self, fn, seed=MISSING):
        return self._with_op(combinators.scan.curry(fn, seed))

    def flat(self, depth=1):
        return self._with_op(combinators.flat.curry(depth))

    def flat_map(self, fn):
        return self._with_op(combinators.flat_map.curry(fn))

    def unique(self):
        return self._with_op(combinators.unique.curry())

    def unique_by(self, fn):
        return self._with_op(combinators.unique_by.curry(fn))

    def enumerate(self):
        return self._with_op(combinators.enumerate.curry())

    def pluck(self, key):
        return self._with_op(combinators.pluck.curry(key))

    def cycle(self):
        """Replay forever; buffers the whole upstream on first pull"""
        return self._with_op(combinators.cycle.curry())

    def repeat(self, times):
        """Replay `times` times; buffers the whole upstream on first pull"""
        return self._with_op(combinators.repeat.curry(int(times)))

    def apply(self, fn: Callable[[Iterable], Iterable]):
        """Append any iterable -> iterable function to the chain"""
        return self._with_op(fn)

    def group_by_iter(self, key):
        """Lazy (key, items) pairs; grouping drains upstream on first pull"""
        def grouped(iterable):
            return iter(reducers.group_by(iterable, key).items())
        return self._with_op(grouped)

    def page(self, page_number, page_size):
        """Get a specific page of results (1-indexed)"""
        if page_number < 1:
            raise ValueError("Page number must be >= 1")
        if page_size < 1:
            raise ValueError("Page size must be >= 1")
        offset = (page_number - 1) * page_size
        return self.skip(offset).take(page_size)

    def paginate(self, page_size) -> Iterator[List[Any]]:
        """Return an iterator of pages, each containing up to page_size elements"""
        return iter(self.chunk(page_size))

    def cache(self, enabled=True):
        c = self._clone()
        c._cache_enabled = enabled
        return c

    # --------- lookahead ----------
    @property
    def supports_peek(self) -> bool:
        """True when this collection iterates straight out of a lookahead buffer"""
        return isinstance(self._source, Peekable) and not self._ops

    def peekable(self) -> "LazyCollection":
        """
        Return a collection whose next item can be inspected with peek().

        Calling this on a collection that already supports peek returns it
        unchanged. The result is single-pass.
        """
        if self.supports_peek:
            return self
        logger.debug("wrapping %r in a lookahead buffer", self)
        return LazyCollection(Peekable(self))

    def peek(self, default=None):
        """Return the next item without consuming it, or default when exhausted"""
        if not self.supports_peek:
            raise PeekUnsupportedError("Call peekable() before peek()")
        return self._source.peek(default)

    # --------- forcing evaluation ----------
    def to_list(self):
        return list(self)

    def to_set(self):
        return set(self)

    def to_dict(self):
        """Collect (key, value) pairs into a dict"""
        return dict(self)

    def collect(self, collector: Optional[Callable[[Iterable], Any]] = None):
        """Hand the realized iterable to collector (list by default)"""
        if collector is None:
            return self.to_list()
        return collector(iter(self))

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn, initial=MISSING):
        """Apply a function of two arguments cumulatively to items, from left to right"""
        return reducers.reduce(self, fn, initial)

    def sum(self, start=0):
        """Return the sum of all elements"""
        return start + reducers.sum(self)

    def product(self):
        return reducers.product(self)

    def average(self):
        return reducers.average(self)

    def count(self):
        """Return the count of elements"""
        return reducers.count(self)

    def min(self, default=MISSING):
        """Return the minimum element"""
        return reducers.min(self, default)

    def max(self, default=MISSING):
        """Return the maximum element"""
        return reducers.max(self, default)

    def first(self, default=None):
        """Return the first element, or default if empty"""
        return reducers.first(self, default)

    def last(self, default=None):
        """Return the last element, or default if empty"""
        return reducers.last(self, default)

    def is_empty(self):
        return reducers.is_empty(self)

    def any(self, pred=None):
        """Return True if any element is truthy (or satisfies predicate)"""
        return reducers.some(self, pred or bool)

    def all(self, pred=None):
        """Return True if all elements are truthy (or satisfy predicate)"""
        return reducers.every(self, pred or bool)

    def find(self, pred, default=None):
        """Return the first element that satisfies the predicate, or default"""
        return reducers.find(self, pred, default)

    def find_index(self, pred):
        return reducers.find_index(self, pred)

    def includes(self, value):
        return reducers.includes(self, value)

    def join(self, delimiter=","):
        return reducers.join(self, delimiter)

    def group_by(self, key) -> Dict[Any, List[Any]]:
        """Group elements by key (a callable or a field name)"""
        return reducers.group_by(self, key)

    def partition(self, pred):
        return reducers.partition(self, pred)

    def unzip(self):
        return zipping.unzip(self)

    # --------- iterator protocol ----------
    def __iter__(self):
        if self._cache_enabled and self._exhausted:
            yield from self._cache
            return

        # Build the pipeline starting from the (possibly once-iterable) source
        it = self._source
        for op in self._ops:
            it = op(it)

        if not self._cache_enabled:
            yield from it
            return

        realized = []
        for item in it:
            realized.append(item)
            yield item
        self._cache = realized
        self._exhausted = True
        logger.debug("cached %d realized items", len(realized))

    # --------- helpers ----------
    @property
    def operations(self) -> List[str]:
        """Names of the pending operations, in order"""
        return [getattr(op, "name", getattr(op, "__name__", repr(op))) for op in self._ops]

    def _with_op(self, op):
        return LazyCollection(self._source, self._ops + [op], self._cache_enabled)

    def _clone(self):
        # cache is not shared when cloning via .cache(); each pipeline keeps its own
        return LazyCollection(self._source, list(self._ops), self._cache_enabled)

    def __repr__(self):
        chain = " -> ".join(self.operations) or "source"
        return f"<LazyCollection {chain}>"
