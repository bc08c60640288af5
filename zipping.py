"""Lockstep zipping of several iterables, and its inverse."""

from typing import Any, Iterable, Iterator, List, Sequence, Tuple

from dispatch import combinator

_DONE = object()


@combinator
def zip(iterables: Sequence[Iterable], stop_on_min: bool = False,
        fill_value: Any = None) -> Iterator[Tuple]:
    """
    Advance every iterable once per round and yield the round as a tuple.

    With stop_on_min the zip ends as soon as any iterable is exhausted.
    Otherwise it runs until all are exhausted, putting fill_value in the
    slots of those that already ran out.

        list(zip([[1, 2], "abc"]))         -> [(1, "a"), (2, "b"), (None, "c")]
        list(zip([[1, 2], "abc"], True))   -> [(1, "a"), (2, "b")]
    """
    iterators = [iter(iterable) for iterable in iterables]
    if not iterators:
        return

    while True:
        row = [next(iterator, _DONE) for iterator in iterators]
        exhausted = [item is _DONE for item in row]
        if stop_on_min and any(exhausted):
            return
        if all(exhausted):
            return
        yield tuple(fill_value if item is _DONE else item for item in row)


@combinator
def unzip(iterable: Iterable[Sequence]) -> List[List]:
    """
    Split a sequence of tuples into one list per tuple position.

    Drains the source. The number of lists is the length of the first
    tuple; positions past it in later tuples are ignored.

        unzip([("a", 1), ("b", 2)]) -> [["a", "b"], [1, 2]]
    """
    iterator = iter(iterable)
    head = next(iterator, _DONE)
    if head is _DONE:
        return []

    head = tuple(head)
    columns: List[List] = [[] for _ in head]
    _spread(head, columns)
    for row in iterator:
        _spread(row, columns)
    return columns


def _spread(row: Sequence, columns: List[List]) -> None:
    for position, value in enumerate(row):
        if position >= len(columns):
            break
        columns[position].append(value)
