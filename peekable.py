"""One-item lookahead over any iterable."""

from typing import Any, Iterable, Iterator

_EMPTY = object()


class Peekable:
    """
    Iterator that can look at its next item without consuming it.

    At most one item is buffered. peek() pulls from the underlying iterator
    only when nothing is buffered, so repeated peeks return the same value
    and normal iteration sees exactly the items the source would produce.
    Exhaustion is buffered too: once the source is done it is not pulled
    again.
    """

    def __init__(self, iterable: Iterable):
        self._iterator: Iterator = iter(iterable)
        self._buffered: Any = _EMPTY
        self._done = False

    def peek(self, default: Any = None) -> Any:
        """Return the next item without consuming it, or default when exhausted"""
        if self._buffered is _EMPTY and not self._done:
            try:
                self._buffered = next(self._iterator)
            except StopIteration:
                self._done = True
        if self._buffered is _EMPTY:
            return default
        return self._buffered

    def __iter__(self) -> "Peekable":
        return self

    def __next__(self) -> Any:
        if self._buffered is not _EMPTY:
            item, self._buffered = self._buffered, _EMPTY
            return item
        if self._done:
            raise StopIteration
        try:
            return next(self._iterator)
        except StopIteration:
            self._done = True
            raise

    def __repr__(self):
        state = "exhausted" if self._done and self._buffered is _EMPTY else (
            "empty buffer" if self._buffered is _EMPTY else f"buffered={self._buffered!r}"
        )
        return f"<Peekable {state}>"
