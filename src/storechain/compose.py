"""Right-to-left function composition.

compose(f, g, h)(x) is equivalent to f(g(h(x))). Used to chain middleware
handlers, but has no knowledge of stores and works for any unary functions.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import reduce
from typing import Any

AnyFn = Callable[..., Any]


def _identity(arg: Any, *_: Any, **__: Any) -> Any:
    return arg


def _pair(outer: AnyFn, inner: AnyFn) -> AnyFn:
    def composed(*args: Any, **kwargs: Any) -> Any:
        return outer(inner(*args, **kwargs))

    return composed


def compose(*funcs: AnyFn) -> AnyFn:
    """Compose functions from right to left.

    The rightmost function may take any arguments; every other function
    receives the single return value of the one to its right.

    Args:
        *funcs: Functions to compose. The first one is the outermost wrapper.

    Returns:
        The identity function when called with no functions, the function
        itself when called with one, otherwise the composed function.

    Raises:
        TypeError: If any argument is not callable

    Example:
        >>> compose(str, abs)(-3)
        '3'
    """
    for index, fn in enumerate(funcs):
        if not callable(fn):
            raise TypeError(f"compose() argument {index} is not callable: {fn!r}")

    if not funcs:
        return _identity

    if len(funcs) == 1:
        return funcs[0]

    return reduce(_pair, funcs)
