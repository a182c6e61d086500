"""Result wrappers returned by terminal navigation operations.

Both wrappers are awaitable and lazy: the chain behind them is resolved
the first time one is awaited (directly or through ``json()`` /
``siren()``), and only once.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from typing import TYPE_CHECKING, Any

import httpx

from siren_nav.pending import Pending
from siren_nav.siren import Entity, parse_entity

if TYPE_CHECKING:
    from siren_nav.navigation import Navigator


class NavResponse:
    """The outcome of ``Navigator.get`` or an action.

    Usage::

        resp = nav.follow("widgets").get()
        raw = await resp            # httpx.Response
        doc = await resp.siren()    # parsed Entity
    """

    def __init__(
        self,
        response: Pending[httpx.Response],
        navigator: Navigator | None = None,
    ) -> None:
        self._response = response
        self._navigator = navigator

    @classmethod
    def create(
        cls,
        factory: Callable[[], Awaitable[httpx.Response]],
        navigator: Navigator | None = None,
    ) -> NavResponse:
        return cls(Pending(factory), navigator)

    @property
    def navigator(self) -> Navigator | None:
        """The navigator whose chain produced this response."""
        return self._navigator

    def __await__(self) -> Generator[Any, None, httpx.Response]:
        return self._response.__await__()

    async def json(self) -> Any:
        """Decoded JSON body."""
        return (await self._response).json()

    async def siren(self) -> Entity:
        """Body parsed as a Siren entity."""
        return parse_entity(await self.json())


class MultiResponse:
    """The outcome of ``MultiNavigator.get``: one response per resource, in order."""

    def __init__(self, responses: Pending[list[httpx.Response]]) -> None:
        self._responses = responses

    @classmethod
    def create(cls, factory: Callable[[], Awaitable[list[httpx.Response]]]) -> MultiResponse:
        return cls(Pending(factory))

    def __await__(self) -> Generator[Any, None, list[httpx.Response]]:
        return self._responses.__await__()

    async def json(self) -> list[Any]:
        return [r.json() for r in await self._responses]

    async def siren(self) -> list[Entity]:
        return [parse_entity(body) for body in await self.json()]
