"""
Sequence producers: numeric ranges, index generators, record entries and
async collection.
"""

import inspect
import itertools
import logging
import types
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from dispatch import Reiterable, is_async_iterable, is_iterable, is_non_string_iterable
from errors import SequenceTypeError

logger = logging.getLogger(__name__)

_NOT_RECORDS = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
)


def own_attributes(value: Any) -> Optional[Dict[str, Any]]:
    """
    Return the instance attributes of a plain object, or None.

    Class attributes are not included; classes, modules and functions are
    not treated as records.
    """
    if isinstance(value, _NOT_RECORDS):
        return None
    try:
        return vars(value)
    except TypeError:
        return None


def range(stop: float, start: float = 0, step: float = 1) -> Reiterable:
    """
    Inclusive numeric range from start to stop.

    The direction follows the sign of stop - start and the sign of step is
    ignored. When start == stop (or step is 0) the range is just [start].

        list(range(5))        -> [0, 1, 2, 3, 4, 5]
        list(range(3, 5))     -> [5, 4, 3]
        list(range(10, 0, 2)) -> [0, 2, 4, 6, 8, 10]
    """
    direction = (stop > start) - (stop < start)
    stride = abs(step) * direction

    def produce():
        if stride == 0:
            yield start
            return
        value = start
        if stride > 0:
            while value <= stop:
                yield value
                value += stride
        else:
            while value >= stop:
                yield value
                value += stride

    return Reiterable(produce, f"range stop={stop} start={start} step={stride}")


def gen(fn: Callable[[int], Any]) -> Reiterable:
    """
    Infinite sequence fn(0), fn(1), fn(2), ...

    Bound it with take(), take_while() or until() before draining it. Each
    iteration starts again from index 0.
    """
    def produce():
        for index in itertools.count():
            yield fn(index)

    return Reiterable(produce, f"gen {getattr(fn, '__name__', fn)!r}")


def entries(obj: Any) -> Iterator[Tuple[Any, Any]]:
    """
    (key, value) pairs of a mapping, an object's own attributes, or
    (index, item) pairs of a non-string iterable.
    """
    if isinstance(obj, Mapping):
        return iter(obj.items())
    if is_non_string_iterable(obj):
        return enumerate(obj)
    attributes = own_attributes(obj)
    if attributes is None:
        raise SequenceTypeError(
            f"Cannot read entries from {type(obj).__name__}: "
            "expected a mapping, an iterable or a plain object"
        )
    return iter(attributes.items())


def all_entries(obj: Any) -> Iterator[Tuple[Any, Any]]:
    """
    Entries from anything that has them.

    Mappings and objects with an items() method give their items; other
    non-string iterables are assumed to already hold pairs and are passed
    through; plain objects give their own attributes.
    """
    if isinstance(obj, Mapping):
        return iter(obj.items())
    items = getattr(obj, "items", None)
    if callable(items) and not isinstance(obj, type):
        return iter(items())
    if is_non_string_iterable(obj):
        return iter(obj)
    attributes = own_attributes(obj)
    if attributes is None:
        raise SequenceTypeError(
            f"{type(obj).__name__} is not an iterable or a plain object"
        )
    return iter(attributes.items())


def from_entries(pairs: Iterable[Tuple[Any, Any]]) -> Dict[Any, Any]:
    return dict(pairs)


async def collect_async(source: Any) -> List[Any]:
    """
    Drain an async source into a list, strictly in source order.

    `source` is either an async iterable or a plain iterable whose items may
    be awaitables; each awaitable is awaited before the next item is looked
    at, so nothing runs concurrently.
    """
    if is_async_iterable(source):
        return [item async for item in source]
    if not is_iterable(source):
        raise SequenceTypeError(
            f"{type(source).__name__} is neither an async iterable nor an iterable"
        )

    result = []
    for item in source:
        if inspect.isawaitable(item):
            item = await item
        result.append(item)
    logger.debug("collected %d items from %s", len(result), type(source).__name__)
    return result
