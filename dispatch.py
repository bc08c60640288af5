"""
Calling conventions shared by every combinator.

Each free combinator can be used two ways:

    take(range(10), 3)          # direct form, applied to an iterable now
    take.curry(3)(range(10))    # point-free form, a reusable transformer

The two forms are separate entry points, so the subject iterable is never
guessed from the runtime type of the first argument.
"""

import functools
import inspect
from typing import Any, Callable, Iterable, Iterator


class _Missing:
    """Marker for an omitted optional argument (where None is a valid value)."""

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()

_STRING_TYPES = (str, bytes, bytearray)


def is_iterable(value: Any) -> bool:
    """Return True if value supports the iterator protocol"""
    try:
        iter(value)
    except TypeError:
        return False
    return True


def is_non_string_iterable(value: Any) -> bool:
    """Return True for iterables other than str/bytes (which iterate into themselves)"""
    return not isinstance(value, _STRING_TYPES) and is_iterable(value)


def is_async_iterable(value: Any) -> bool:
    return hasattr(value, "__aiter__")


def _required_positional(fn: Callable) -> int:
    """Number of positional parameters fn needs, or 0 if it cannot be inspected"""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        # builtins such as str or int have no introspectable signature
        return 0
    return len([
        param for param in params
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY,
                          inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and param.default is inspect.Parameter.empty
    ])


def index_aware(fn: Callable, arity: int = 1) -> Callable:
    """
    Adapt a user callback to the (*args, index) calling shape.

    Callbacks that require one positional parameter more than `arity`
    receive the zero-based index of the item within the combinator's input;
    the others (including ones where that parameter is optional, such as
    the builtin sum) are called with the first `arity` arguments only.
    """
    if _required_positional(fn) > arity:
        return fn

    @functools.wraps(fn)
    def without_index(*args):
        return fn(*args[:arity])

    return without_index


class Transformer:
    """A combinator with its configuration bound, waiting for an iterable."""

    def __init__(self, combinator: "Combinator", args: tuple, kwargs: dict):
        self.combinator = combinator
        self.args = args
        self.kwargs = kwargs

    @property
    def name(self) -> str:
        return self.combinator.name

    def __call__(self, iterable: Iterable) -> Any:
        return self.combinator(iterable, *self.args, **self.kwargs)

    def __or__(self, other: Callable) -> "Pipeline":
        """Compose left-to-right: (a | b)(xs) == b(a(xs))"""
        return pipe(self, other)

    def __repr__(self):
        params = [repr(a) for a in self.args]
        params += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"{self.name}.curry({', '.join(params)})"


class Combinator:
    """
    Wrap a function whose first parameter is the subject iterable.

    Calling the wrapper applies the function directly; `curry()` binds every
    other argument and returns a `Transformer`.
    """

    def __init__(self, fn: Callable):
        self._fn = fn
        self.name = fn.__name__
        functools.update_wrapper(self, fn)

    def __call__(self, iterable: Iterable, *args, **kwargs) -> Any:
        return self._fn(iterable, *args, **kwargs)

    def curry(self, *args, **kwargs) -> Transformer:
        return Transformer(self, args, kwargs)

    def __repr__(self):
        return f"<combinator {self.name}>"


def combinator(fn: Callable) -> Combinator:
    """Decorator turning `fn(iterable, ...)` into a dual-form combinator"""
    return Combinator(fn)


def apply(value: Any, *fns: Callable) -> Any:
    """Feed value through fns from left to right"""
    return functools.reduce(lambda acc, fn: fn(acc), fns, value)


class Pipeline:
    """Left-to-right composition of callables, extendable with |"""

    def __init__(self, *fns: Callable):
        self.fns = fns

    def __call__(self, value: Any) -> Any:
        return apply(value, *self.fns)

    def __or__(self, other: Callable) -> "Pipeline":
        return Pipeline(*self.fns, other)

    def __repr__(self):
        return " | ".join(repr(fn) for fn in self.fns) or "Pipeline()"


def pipe(*fns: Callable) -> Pipeline:
    """Compose fns left-to-right into a single callable"""
    return Pipeline(*fns)


class Reiterable:
    """
    An iterable that calls a generator factory on every iteration.

    Lets producers such as range() and gen() be consumed more than once.
    """

    def __init__(self, factory: Callable[[], Iterator], label: str = "reiterable"):
        self._factory = factory
        self._label = label

    def __iter__(self) -> Iterator:
        return self._factory()

    def __repr__(self):
        return f"<{self._label}>"
