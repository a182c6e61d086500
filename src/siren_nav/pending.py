"""Lazily started, memoized awaitables.

A ``Pending`` stands in for a value that has not been computed yet: a
navigation's starting state, the fetch of a resource, a response. Building
a navigation chain only ever creates ``Pending`` objects; nothing runs
until something awaits one.

Once started, the underlying coroutine runs exactly once. Every awaiter
(including concurrent ones) receives the same value, or the same
exception. Cancelling one awaiter leaves the computation running for
the others.

Usage::

    start = Pending(lambda: load_state())
    state = await start   # runs load_state()
    again = await start   # reuses the result
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_UNSET: Any = object()


class Pending(Generic[T]):
    """A deferred value computed at most once, on first await."""

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory: Callable[[], Awaitable[T]] | None = factory
        self._task: asyncio.Future[T] | None = None
        self._value: T = _UNSET

    @classmethod
    def resolved(cls, value: T) -> Pending[T]:
        """Create a handle that is already resolved to *value*."""
        pending: Pending[T] = cls.__new__(cls)
        pending._factory = None
        pending._task = None
        pending._value = value
        return pending

    @property
    def done(self) -> bool:
        """Whether a value (or failure) is available without waiting."""
        if self._value is not _UNSET:
            return True
        return self._task is not None and self._task.done()

    @property
    def failed(self) -> bool:
        """Whether the computation finished with an exception or was cancelled."""
        task = self._task
        if task is None or not task.done():
            return False
        if task.cancelled():
            return True
        return task.exception() is not None

    def then(self, fn: Callable[[T], Awaitable[U]]) -> Pending[U]:
        """Derive a new pending value without evaluating this one."""

        async def chained() -> U:
            return await fn(await self)

        return Pending(chained)

    async def _resolve(self) -> T:
        if self._value is not _UNSET:
            return self._value
        if self._task is None:
            assert self._factory is not None
            self._task = asyncio.ensure_future(self._factory())
        # One awaiter giving up must not cancel the work other awaiters share
        value = await asyncio.shield(self._task)
        self._value = value
        self._factory = None
        return value

    def __await__(self) -> Generator[Any, None, T]:
        return self._resolve().__await__()

    def __repr__(self) -> str:
        if self._value is not _UNSET:
            return f"Pending(resolved={self._value!r})"
        if self.failed:
            return "Pending(failed)"
        return "Pending(running)" if self._task is not None else "Pending(idle)"
