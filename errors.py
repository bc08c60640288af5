"""Exception types raised by the lazy sequence toolkit."""


class LazySequenceError(Exception):
    """Base class for errors raised by the toolkit itself."""
    pass


class SequenceTypeError(LazySequenceError, TypeError):
    """Raised when a value is neither iterable nor a searchable container."""
    pass


class EmptySequenceError(LazySequenceError, ValueError):
    """Raised when an operation needs at least one item and got none."""
    pass


class PeekUnsupportedError(LazySequenceError, TypeError):
    """Raised when peek() is called on a collection without a lookahead buffer."""
    pass
