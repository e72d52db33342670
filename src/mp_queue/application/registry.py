"""Application – explicit name → dispatcher registry populated at startup."""
from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping

from mp_queue.kernel.errors import NoSubscriberError
from mp_queue.kernel.messaging import DEAD_LETTER, Dispatcher, DispatcherRegistry

type DispatcherLike = Dispatcher | Callable[..., Any]


class FunctionDispatcher:
    """Adapts a plain (sync or async) callable to the :class:`Dispatcher` protocol."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self._func = func

    async def invoke(self, *args: Any) -> Any:
        result = self._func(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"FunctionDispatcher({getattr(self._func, '__qualname__', self._func)!r})"


class InMemoryDispatcherRegistry(DispatcherRegistry):
    """Dict-backed registry.

    Usage::

        registry = InMemoryDispatcherRegistry()

        @registry.subscriber("email.send")
        async def send_email(message):
            ...
            return Ok()
    """

    def __init__(self, dispatchers: Mapping[str, DispatcherLike] | None = None) -> None:
        self._dispatchers: dict[str, Dispatcher] = {}
        for name, dispatcher in (dispatchers or {}).items():
            self.register(name, dispatcher)

    def register(self, name: str, dispatcher: DispatcherLike) -> None:
        if not name:
            raise ValueError("dispatcher name must be a non-empty string")
        if not isinstance(dispatcher, Dispatcher):
            if not callable(dispatcher):
                raise TypeError(f"{dispatcher!r} is neither a Dispatcher nor callable")
            dispatcher = FunctionDispatcher(dispatcher)
        self._dispatchers[name] = dispatcher

    def unregister(self, name: str) -> None:
        self._dispatchers.pop(name, None)

    def subscriber(self, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of :meth:`register`."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name, func)
            return func

        return decorator

    def with_default_dead_letter(self) -> "InMemoryDispatcherRegistry":
        """Register the logging dead-letter dispatcher unless one already exists."""
        from mp_queue.application.dead_letter import LoggingDeadLetterDispatcher

        if DEAD_LETTER not in self._dispatchers:
            self.register(DEAD_LETTER, LoggingDeadLetterDispatcher())
        return self

    def names(self) -> list[str]:
        return sorted(self._dispatchers)

    def has_handler(self, name: str) -> bool:
        return name in self._dispatchers

    async def invoke(self, name: str, *args: Any) -> Any:
        dispatcher = self._dispatchers.get(name)
        if dispatcher is None:
            raise NoSubscriberError(name)
        return await dispatcher.invoke(*args)


__all__ = ["DispatcherLike", "FunctionDispatcher", "InMemoryDispatcherRegistry"]
