"""
Recursive structural search over nested containers.

search() walks mappings (by key), list-like sequences such as lists and
tuples (by position) and plain objects (by own attribute name), yielding
(path, value) for every node the predicate accepts:

    list(search({"a": {"b": 1}}, lambda path, value: isinstance(value, int)))
    -> [(["a", "b"], 1)]

Every other value is a leaf, including strings, sets, ranges, iterators and
generators, so a search never consumes anything inside the searched data.
"""

import logging
from collections import abc
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Iterator, List, Optional, Set, Tuple

from dispatch import combinator
from errors import SequenceTypeError
from sources import own_attributes

logger = logging.getLogger(__name__)

Match = Tuple[List[Any], Any]

_NOT_BRANCHES = (str, bytes, bytearray, range, memoryview)


def _is_branch_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _NOT_BRANCHES)


def _children(value: Any) -> Optional[Iterator[Tuple[Any, Any]]]:
    """(key, child) pairs of a container, or None for leaf values"""
    if isinstance(value, Mapping):
        return iter(value.items())
    if _is_branch_sequence(value):
        return enumerate(value)
    if isinstance(value, abc.Iterator):
        # one-shot; walking it would drain the caller's data
        return None
    attributes = own_attributes(value)
    if attributes is not None:
        return iter(attributes.items())
    return None


def is_searchable(value: Any) -> bool:
    return _children(value) is not None


@combinator
def search(value: Any, predicate: Callable[[List[Any], Any], Any],
           skip_after_yield: bool = False) -> Iterator[Match]:
    """
    Lazily yield every (path, value) pair in `value` accepted by predicate.

    With skip_after_yield a matching node's children are not visited. A
    container that is one of its own ancestors is skipped, so
    self-referential structures terminate.

    Raises SequenceTypeError right away if `value` is not a container.
    """
    if not is_searchable(value):
        raise SequenceTypeError(
            f"Cannot search {type(value).__name__}: "
            "expected a mapping, a list-like sequence or a plain object"
        )
    return _walk(value, [], predicate, skip_after_yield, set())


def _walk(value: Any, path: List[Any], predicate: Callable, skip_after_yield: bool,
          ancestors: Set[int]) -> Iterator[Match]:
    if predicate(path, value):
        yield path, value
        if skip_after_yield:
            return

    children = _children(value)
    if children is None:
        return

    ancestors.add(id(value))
    try:
        for key, child in children:
            if id(child) in ancestors:
                logger.debug("search skipped cyclic reference at %r", path + [key])
                continue
            yield from _walk(child, path + [key], predicate, skip_after_yield, ancestors)
    finally:
        ancestors.discard(id(value))
