"""
Terminal operations: consume an iterable and return a single value.

These pull from the source until they have an answer; short-circuiting ones
(find, some, every, first, includes, is_empty) stop pulling as soon as the
answer is known, which also makes them safe on infinite sources that
eventually satisfy them.
"""

import builtins
import logging
import math
import numbers
from typing import Any, Callable, Dict, Iterable, List, Tuple

from combinators import get_field
from dispatch import MISSING, combinator, index_aware
from errors import EmptySequenceError, SequenceTypeError

logger = logging.getLogger(__name__)


@combinator
def reduce(iterable: Iterable, fn: Callable, seed: Any = MISSING) -> Any:
    """
    Fold the iterable into one value with fn(acc, item[, index]).

    Without a seed the first item seeds the accumulator; reducing an empty
    iterable without a seed raises EmptySequenceError.
    """
    fn = index_aware(fn, arity=2)
    acc = seed
    empty = True
    for index, item in builtins.enumerate(iterable):
        if empty and seed is MISSING:
            acc = item
        else:
            acc = fn(acc, item, index)
        empty = False
    if empty and seed is MISSING:
        raise EmptySequenceError("reduce() of empty sequence with no seed value")
    return acc


# --------- numeric folds ----------

def _to_number(item: Any, identity):
    """Coerce item to a number, or return identity when it has no numeric value"""
    if isinstance(item, numbers.Number):
        if isinstance(item, float) and math.isnan(item):
            return identity
        return item
    if isinstance(item, (str, bytes)):
        for parse in (int, float):
            try:
                value = parse(item)
            except ValueError:
                continue
            return identity if value != value else value
    return identity


@combinator
def sum(iterable: Iterable) -> Any:
    """Sum numeric items; non-numeric items count as 0"""
    total = 0
    for item in iterable:
        total += _to_number(item, 0)
    return total


@combinator
def product(iterable: Iterable) -> Any:
    """Multiply numeric items; non-numeric items count as 1"""
    total = 1
    for item in iterable:
        total *= _to_number(item, 1)
    return total


@combinator
def average(iterable: Iterable) -> float:
    """
    Arithmetic mean of the items.

    Non-numeric items add 0 to the total but still count towards the
    divisor, so mixed input pulls the mean towards zero. An empty iterable
    gives nan.
    """
    total = 0
    count = 0
    for item in iterable:
        total += _to_number(item, 0)
        count += 1
    if count == 0:
        return math.nan
    return total / count


@combinator
def min(iterable: Iterable, default: Any = MISSING) -> Any:
    try:
        return builtins.min(iterable)
    except ValueError:
        if default is not MISSING:
            return default
        raise EmptySequenceError("min() of empty sequence") from None


@combinator
def max(iterable: Iterable, default: Any = MISSING) -> Any:
    try:
        return builtins.max(iterable)
    except ValueError:
        if default is not MISSING:
            return default
        raise EmptySequenceError("max() of empty sequence") from None


# --------- counting and access ----------

@combinator
def count(iterable: Iterable) -> int:
    return builtins.sum(1 for _ in iterable)


@combinator
def is_empty(iterable: Iterable) -> bool:
    for _ in iterable:
        return False
    return True


@combinator
def first(iterable: Iterable, default: Any = None) -> Any:
    for item in iterable:
        return item
    return default


@combinator
def last(iterable: Iterable, default: Any = None) -> Any:
    result = default
    for item in iterable:
        result = item
    return result


@combinator
def find(iterable: Iterable, predicate: Callable, default: Any = None) -> Any:
    """Return the first item satisfying the predicate, or default"""
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if predicate(item, index):
            return item
    return default


@combinator
def find_index(iterable: Iterable, predicate: Callable) -> int:
    """Return the index of the first item satisfying the predicate, or -1"""
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if predicate(item, index):
            return index
    return -1


@combinator
def includes(iterable: Iterable, value: Any) -> bool:
    for item in iterable:
        if item is value or item == value:
            return True
    return False


@combinator
def every(iterable: Iterable, predicate: Callable) -> bool:
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if not predicate(item, index):
            return False
    return True


@combinator
def some(iterable: Iterable, predicate: Callable) -> bool:
    predicate = index_aware(predicate)
    for index, item in builtins.enumerate(iterable):
        if predicate(item, index):
            return True
    return False


# --------- collecting ----------

@combinator
def join(iterable: Iterable, delimiter: str = ",") -> str:
    """Join items as strings; None renders as an empty string"""
    return delimiter.join("" if item is None else str(item) for item in iterable)


@combinator
def group_by(iterable: Iterable, key: Any) -> Dict[Any, List]:
    """
    Group items by a derived key.

    `key` is either a callable (item[, index]) -> key or a field name read
    from each item. Keys keep first-seen order and each group keeps source
    order. Drains the whole source.

    Keys must be hashable; an unhashable key such as a list raises
    SequenceTypeError (derive a tuple instead).
    """
    if callable(key):
        key_fn = index_aware(key)
    else:
        def key_fn(item, index):
            return get_field(item, key)

    groups: Dict[Any, List] = {}
    for index, item in builtins.enumerate(iterable):
        group_key = key_fn(item, index)
        try:
            group = groups.setdefault(group_key, [])
        except TypeError:
            raise SequenceTypeError(
                f"group_by key of type {type(group_key).__name__} is not hashable: {group_key!r}"
            ) from None
        group.append(item)
    logger.debug("group_by drained source into %d groups", len(groups))
    return groups


@combinator
def partition(iterable: Iterable, predicate: Callable) -> Tuple[List, List]:
    """Split into (passed, failed) lists"""
    predicate = index_aware(predicate)
    passed, failed = [], []
    for index, item in builtins.enumerate(iterable):
        (passed if predicate(item, index) else failed).append(item)
    return passed, failed
