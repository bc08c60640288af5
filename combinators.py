"""
Lazy sequence combinators.

Every function here takes the subject iterable first and returns a generator,
so nothing is pulled from the source until the result is iterated, and no
more than one item is pulled per item requested. The exceptions are cycle()
and repeat(), which buffer the whole source on the first pull.

Callbacks may take the item's index as an extra trailing argument; the index
counts positions within that combinator's own input.
"""

import builtins
import logging
from collections import deque
from typing import Any, Callable, Hashable, Iterable, Iterator, List

from dispatch import MISSING, combinator, index_aware, is_non_string_iterable

logger = logging.getLogger(__name__)


# --------- one-to-one ----------

@combinator
def map(iterable: Iterable, fn: Callable) -> Iterator:
    fn = index_aware(fn)
    for index, item in builtins.enumerate(iterable):
        yield fn(item, index)


@combinator
def filter(iterable: Iterable, predicate: Callable) -> Iterator:
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if predicate(item, index):
            yield item


@combinator
def filter_none(iterable: Iterable) -> Iterator:
    """Drop None items"""
    return (item for item in iterable if item is not None)


@combinator
def tap(iterable: Iterable, fn: Callable) -> Iterator:
    """Call fn for its side effect on every item pulled through, yielding items unchanged"""
    fn = index_aware(fn)
    for index, item in builtins.enumerate(iterable):
        fn(item, index)
        yield item


@combinator
def enumerate(iterable: Iterable) -> Iterator:
    """Pair each item with its index as (index, item)"""
    return builtins.enumerate(iterable)


@combinator
def pluck(iterable: Iterable, key: Any) -> Iterator:
    """Extract one field per item; a missing field yields None"""
    for item in iterable:
        yield get_field(item, key)


def get_field(item: Any, key: Any) -> Any:
    """Read item[key], falling back to attribute access, or None when absent"""
    try:
        return item[key]
    except (KeyError, IndexError):
        return None
    except TypeError:
        if isinstance(key, str):
            return getattr(item, key, None)
        return None


# --------- slicing ----------

@combinator
def take(iterable: Iterable, n: int) -> Iterator:
    """Yield the first n items; n <= 0 yields nothing"""
    if n <= 0:
        return
    taken = 0
    for item in iterable:
        yield item
        taken += 1
        if taken >= n:
            return


@combinator
def skip(iterable: Iterable, n: int) -> Iterator:
    """Yield everything after the first n items; negative n counts as 0"""
    skipped = 0
    for item in iterable:
        if skipped < n:
            skipped += 1
            continue
        yield item


@combinator
def take_while(iterable: Iterable, predicate: Callable) -> Iterator:
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if not predicate(item, index):
            return
        yield item


@combinator
def skip_while(iterable: Iterable, predicate: Callable) -> Iterator:
    predicate = index_aware(predicate)
    dropping = True
    for index, item in builtins.enumerate(iterable):
        if dropping and predicate(item, index):
            continue
        dropping = False
        yield item


@combinator
def until(iterable: Iterable, predicate: Callable) -> Iterator:
    """Yield items until the predicate first holds (that item is not yielded)"""
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if predicate(item, index):
            return
        yield item


# --------- grouping ----------

def check_chunk_size(size: int) -> int:
    """Return size, or raise ValueError if it is below 1"""
    if size < 1:
        raise ValueError("Chunk size must be >= 1")
    return size


@combinator
def chunk(iterable: Iterable, size: int) -> Iterator[List]:
    """
    Split into non-overlapping lists of `size` items.

    The final list may be shorter. Raises ValueError right away if size < 1.
    """
    return _chunk(iterable, check_chunk_size(size))


def _chunk(iterable, size):
    bucket = []
    for item in iterable:
        bucket.append(item)
        if len(bucket) == size:
            yield bucket
            bucket = []
    if bucket:
        yield bucket


@combinator
def windows(iterable: Iterable, size: int) -> Iterator[List]:
    """
    Yield every run of `size` consecutive items as a list.

    A source shorter than `size` yields nothing, as does size <= 0.
    """
    if size <= 0:
        return
    window = deque(maxlen=size)
    for item in iterable:
        window.append(item)
        if len(window) == size:
            yield list(window)


# --------- folding ----------

@combinator
def scan(iterable: Iterable, fn: Callable, seed: Any = MISSING) -> Iterator:
    """
    Running fold, one output per input.

    fn is called as fn(acc, item[, index]). Without a seed the first item is
    emitted unchanged and becomes the accumulator.
    """
    fn = index_aware(fn, arity=2)
    acc = seed
    for index, item in builtins.enumerate(iterable):
        if index == 0 and seed is MISSING:
            acc = item
        else:
            acc = fn(acc, item, index)
        yield acc


# --------- flattening ----------

@combinator
def flat(iterable: Iterable, depth: int = 1) -> Iterator:
    """Flatten nested non-string iterables up to `depth` levels (0 is a no-op)"""
    for item in iterable:
        if depth > 0 and is_non_string_iterable(item):
            yield from flat(item, depth - 1)
        else:
            yield item


@combinator
def flat_map(iterable: Iterable, fn: Callable) -> Iterator:
    return flat(map(iterable, fn), 1)


# --------- deduplication ----------

class _SeenSet:
    """Membership by value; unhashable values fall back to an equality scan"""

    def __init__(self):
        self._hashable = set()
        self._unhashable = []

    def add(self, value: Any) -> bool:
        """Record value and return True if it had not been seen before"""
        if isinstance(value, Hashable):
            try:
                if value in self._hashable:
                    return False
                self._hashable.add(value)
                return True
            except TypeError:
                # e.g. a tuple holding a list
                pass
        if value in self._unhashable:
            return False
        self._unhashable.append(value)
        return True


@combinator
def unique(iterable: Iterable) -> Iterator:
    """Drop repeated items by value equality; the first occurrence wins"""
    seen = _SeenSet()
    for item in iterable:
        if seen.add(item):
            yield item


@combinator
def unique_by(iterable: Iterable, fn: Callable) -> Iterator:
    """Drop items whose derived key has already been seen"""
    fn = index_aware(fn)
    seen = _SeenSet()
    for index, item in builtins.enumerate(iterable):
        if seen.add(fn(item, index)):
            yield item


# --------- replay (materializing) ----------

@combinator
def cycle(iterable: Iterable) -> Iterator:
    """
    Replay the source forever.

    The whole source is buffered on the first pull, so it must be finite.
    An empty source yields nothing.
    """
    buffer = list(iterable)
    logger.debug("cycle buffered %d items", len(buffer))
    if not buffer:
        return
    while True:
        yield from buffer


@combinator
def repeat(iterable: Iterable, times: int) -> Iterator:
    """Replay the (buffered) source `times` times"""
    if times <= 0:
        return
    buffer = list(iterable)
    logger.debug("repeat buffered %d items for %d passes", len(buffer), times)
    for _ in builtins.range(times):
        yield from buffer
