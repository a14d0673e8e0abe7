from __future__ import annotations

from typing import Any, Callable, Optional

from handler_chain.dispatch import FunctionHandler

__all__ = ["handler"]


def handler(predicate: Callable[[Any], bool], name: Optional[str] = None) -> Callable[[Callable[[Any], Any]], FunctionHandler]:
    """
    Turns an action function into a `FunctionHandler`.

    Usage:
        @handler(lambda t: t.tier == 1)
        def basic(ticket):
            ...

    :param predicate: Callable `(request) -> bool`.
    :param name: Handler name; defaults to the function's name.
    :return: Decorator producing a FunctionHandler.
    """
    def wrap(func: Callable[[Any], Any]) -> FunctionHandler:
        return FunctionHandler(name or func.__name__, predicate, func)
    return wrap
