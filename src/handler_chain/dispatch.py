"""
Chain of Responsibility (Behavioral)

Intent:
    Pass a request along an ordered chain of handlers; the first handler that
    can process the request does so and no later handler is consulted.

Participants:
    - Handler: a predicate (`can_handle`) plus an action (`process`).
    - FunctionHandler: the same capability built from two plain callables.
    - HandlerChain: owns the order of handlers and walks it on `dispatch`.
    - Outcome: Handled(result) or Unhandled, returned to the caller.

Notes:
    - Handlers never see their successor; the chain owns ordering.
    - "Unhandled" is a value, not an exception. Callers branch on it.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

__all__ = [
    "ChainError",
    "ConstructionError",
    "UnhandledRequestError",
    "Handler",
    "FunctionHandler",
    "Outcome",
    "HandlerChain",
]

logger = logging.getLogger(__name__)


# ---------- Errors ----------

class ChainError(RuntimeError):
    """
    Base class for failures raised by the chain mechanism itself.
    """


class ConstructionError(ChainError):
    """
    Raised when building or rewiring a chain would introduce a cycle,
    or when linking from a handler that is not part of the chain.
    """


class UnhandledRequestError(ChainError):
    """
    Raised by `Outcome.expect()` when a caller treats "unhandled" as fatal.

    :param message: Human-readable description of the failure.
    :param visited: Names of the handlers that declined the request.
    """

    def __init__(self, message: str, visited: Tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.visited = visited


# ---------- Handlers ----------

class Handler(ABC):
    """
    One handler, one rule.

    Subclasses implement the predicate and the action. A handler holds no
    reference to other handlers, so the same instance may be reused in
    several chains.

    :param name: Label used in outcomes and logs; defaults to the class name.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self._name = name or type(self).__name__

    @property
    def name(self) -> str:
        """
        :return: Handler name.
        """
        return self._name

    @abstractmethod
    def can_handle(self, request: Any) -> bool:
        """
        Decides whether this handler is responsible for the request.

        Must not mutate the request.

        :param request: The incoming request.
        :return: True to consume the request; False to pass it on.
        """
        raise NotImplementedError

    @abstractmethod
    def process(self, request: Any) -> Any:
        """
        Processes a request this handler accepted.

        :param request: The incoming request.
        :return: Arbitrary result; becomes `Outcome.result`.
        :raises Exception: Propagates unchanged to the caller of dispatch.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r}>"


class FunctionHandler(Handler):
    """
    Handler assembled from a predicate and an action callable.

    :param name: Handler name.
    :param predicate: Callable `(request) -> bool`.
    :param action: Callable `(request) -> Any`.
    """

    def __init__(
        self,
        name: str,
        predicate: Callable[[Any], bool],
        action: Callable[[Any], Any],
    ) -> None:
        super().__init__(name)
        self._predicate = predicate
        self._action = action

    def can_handle(self, request: Any) -> bool:
        return bool(self._predicate(request))

    def process(self, request: Any) -> Any:
        return self._action(request)


# ---------- Outcome ----------

@dataclass(frozen=True, slots=True)
class Outcome:
    """
    Result of a single dispatch.

    :ivar handled: Whether some handler consumed the request.
    :ivar result: Value produced by the consuming handler (None when unhandled;
                  may also be None when handled).
    :ivar handler_name: Name of the consuming handler, or None.
    :ivar visited: Names of handlers whose predicate was evaluated, in order.
    """
    handled: bool
    result: Any = None
    handler_name: Optional[str] = None
    visited: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.handled and (self.result is not None or self.handler_name is not None):
            raise ValueError("An unhandled outcome carries neither a result nor a handler name")

    @classmethod
    def handled_by(cls, handler_name: str, result: Any, visited: Tuple[str, ...] = ()) -> "Outcome":
        return cls(True, result, handler_name, visited)

    @classmethod
    def unhandled(cls, visited: Tuple[str, ...] = ()) -> "Outcome":
        return cls(False, None, None, visited)

    def expect(self, message: str = "Request was not handled by any handler") -> Any:
        """
        Returns the result, treating "unhandled" as an error at the call site.

        :param message: Message for the raised error.
        :return: The handler's result.
        :raises UnhandledRequestError: If no handler consumed the request.
        """
        if not self.handled:
            raise UnhandledRequestError(message, self.visited)
        return self.result

    def result_or(self, default: Any) -> Any:
        """
        :param default: Value to return when unhandled.
        :return: The handler's result, or `default`.
        """
        return self.result if self.handled else default


# ---------- Chain ----------

class HandlerChain:
    """
    Ordered, acyclic sequence of handlers with first-match dispatch.

    The handler sequence is stored as a tuple and replaced as a whole on
    `append`/`link`, so a dispatch always walks the snapshot it started with.

    :param handlers: Handlers in chain order. May be empty.
    :param name: Chain label used in logs.
    :raises ConstructionError: If a handler instance appears more than once.
    """

    def __init__(self, handlers: Iterable[Handler] = (), name: str = "chain") -> None:
        self._name = name
        self._lock = threading.Lock()
        handlers = tuple(handlers)
        _reject_repeats(handlers)
        self._handlers: Tuple[Handler, ...] = handlers

    @property
    def name(self) -> str:
        return self._name

    @property
    def head(self) -> Optional[Handler]:
        """
        :return: First handler, or None for an empty chain.
        """
        handlers = self._handlers
        return handlers[0] if handlers else None

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(h.name for h in self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[Handler]:
        return iter(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return any(h is handler for h in self._handlers)

    def __repr__(self) -> str:
        return f"HandlerChain({self._name!r}, {list(self.names)!r})"

    def successor_of(self, handler: Handler) -> Optional[Handler]:
        """
        :param handler: A member of this chain.
        :return: The handler after it, or None if it is the tail.
        :raises ConstructionError: If `handler` is not in the chain.
        """
        handlers = self._handlers
        idx = _index_of(handlers, handler)
        if idx is None:
            raise ConstructionError(f"{handler!r} is not part of chain {self._name!r}")
        return handlers[idx + 1] if idx + 1 < len(handlers) else None

    def append(self, handler: Handler) -> "HandlerChain":
        """
        Adds a handler to the end of the chain.

        :param handler: Handler to add.
        :return: This chain, for fluent building.
        :raises ConstructionError: If the handler is already in the chain.
        """
        with self._lock:
            if _index_of(self._handlers, handler) is not None:
                raise ConstructionError(
                    f"Appending {handler!r} to chain {self._name!r} would create a cycle"
                )
            self._handlers = self._handlers + (handler,)
        logger.debug("Chain %s: appended %s", self._name, handler.name)
        return self

    def link(self, handler: Handler, successor: Handler) -> Handler:
        """
        Sets the successor of `handler`.

        A successor already further down the chain keeps its own successors;
        only the handlers between the two are dropped. A new successor
        replaces everything that followed `handler`.

        :param handler: A handler already in the chain.
        :param successor: Handler to place right after it.
        :return: `successor`, so links can be written one after another.
        :raises ConstructionError: If `handler` is not in the chain, or
                                   `successor` is `handler` or one of its predecessors.
        """
        with self._lock:
            handlers = self._handlers
            idx = _index_of(handlers, handler)
            if idx is None:
                raise ConstructionError(f"{handler!r} is not part of chain {self._name!r}")
            prefix = handlers[: idx + 1]
            if _index_of(prefix, successor) is not None:
                raise ConstructionError(
                    f"Linking {handler!r} -> {successor!r} in chain {self._name!r} would create a cycle"
                )
            j = _index_of(handlers, successor)
            if j is None:
                dropped = handlers[idx + 1:]
                self._handlers = prefix + (successor,)
            else:
                # successor keeps its own successors; only the handlers in between go
                dropped = handlers[idx + 1:j]
                self._handlers = prefix + handlers[j:]
        if dropped:
            logger.debug(
                "Chain %s: %s -> %s dropped %s",
                self._name, handler.name, successor.name, [h.name for h in dropped],
            )
        else:
            logger.debug("Chain %s: linked %s -> %s", self._name, handler.name, successor.name)
        return successor

    def dispatch(self, request: Any) -> Outcome:
        """
        Walks the chain until a handler accepts the request or the chain ends.

        :param request: Caller-defined request; not interpreted by the chain.
        :return: `Outcome.handled_by(...)` from the first accepting handler,
                 otherwise `Outcome.unhandled(...)`.
        :raises Exception: Whatever the accepting handler's action raises.
        """
        visited = []
        for handler in self._handlers:
            visited.append(handler.name)
            if not handler.can_handle(request):
                logger.debug("Chain %s: %s passed", self._name, handler.name)
                continue
            logger.debug("Chain %s: %s accepted", self._name, handler.name)
            try:
                result = handler.process(request)
            except Exception as exc:
                logger.debug("Chain %s: %s failed: %r", self._name, handler.name, exc)
                raise
            return Outcome.handled_by(handler.name, result, tuple(visited))
        logger.debug("Chain %s: unhandled after %d handler(s)", self._name, len(visited))
        return Outcome.unhandled(tuple(visited))

    __call__ = dispatch


def _index_of(handlers: Tuple[Handler, ...], handler: object) -> Optional[int]:
    # identity, not equality: two equal handlers are still distinct links
    for i, h in enumerate(handlers):
        if h is handler:
            return i
    return None


def _reject_repeats(handlers: Tuple[Handler, ...]) -> None:
    seen = set()
    for h in handlers:
        if id(h) in seen:
            raise ConstructionError(f"{h!r} appears more than once; a chain must be acyclic")
        seen.add(id(h))
