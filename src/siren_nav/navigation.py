"""Declarative navigation of Siren hypermedia APIs.

A ``Navigator`` records where to go ("follow ``widgets``, then the
``item`` relation, accepting JSON") without issuing any request. The
chain is resolved only when a terminal operation needs a result:
``get_url``, ``get``, ``perform_action`` or ``perform_hyper_action``.

Every chain-building call returns a new navigator and leaves the
receiver untouched, so partial chains can be shared and branched
freely::

    async with Navigator.connect("https://api.example.com/") as api:
        widgets = api.follow("widgets")
        first = widgets.follow("item", first=True)
        doc = await first.get().siren()
        created = await widgets.perform_action("create", {"name": "gear"})

Each terminal call resolves its chain from scratch. ``squash`` turns a
chain into a new memoized starting point so that repeated calls do not
repeat the requests behind it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from siren_nav.cache import Cache, ResourceCache
from siren_nav.multi.multinav import MultiNavigator
from siren_nav.multi.multistep import MultiStep, follow_each, to_multi
from siren_nav.pending import Pending
from siren_nav.response import NavResponse
from siren_nav.siren import Entity
from siren_nav.state import NavState, RequestConfig
from siren_nav.steps import Step, StepList, accept, follow, reduce
from siren_nav.trace import Debug, Jumped, emit
from siren_nav.transport import HttpTransport, Transport, TransportConfig


class Navigator:
    """Immutable builder for a single navigation path.

    Instances are normally obtained from ``create`` or ``connect``; the
    constructor takes the internal pieces as they are.
    """

    def __init__(
        self,
        start: Pending[NavState],
        steps: StepList[Step],
        cache: Cache,
        transport: Transport,
    ) -> None:
        self._start = start
        self._steps = steps
        self._cache = cache
        self._transport = transport

    @classmethod
    def create(
        cls,
        url: str,
        base: str,
        cache: Cache,
        *,
        transport: Transport,
    ) -> Navigator:
        """Start navigating at *url* for an API anchored at *base*.

        *cache* and *transport* are used as given; the caller owns both
        and closes the transport. Use ``connect`` to have them created.
        """
        state = NavState.at(url, base, RequestConfig(base_url=base), cache)
        return cls(Pending.resolved(state), StepList(), cache, transport)

    @classmethod
    def connect(
        cls,
        url: str,
        base: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        config: TransportConfig | None = None,
    ) -> Navigator:
        """Start navigating at *url* over HTTP with a fresh cache.

        *base* defaults to *url*. The navigator owns the transport it
        creates here; close it with ``aclose`` or ``async with``::

            async with Navigator.connect(API) as api:
                doc = await api.follow("widgets").get().siren()
        """
        base = base or url
        transport = HttpTransport(client, config or TransportConfig(base_url=base))
        cache = ResourceCache(transport.fetch_document)
        return cls.create(url, base, cache, transport=transport)

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def steps(self) -> tuple[Step, ...]:
        """Steps recorded since the starting state."""
        return tuple(self._steps)

    async def __aenter__(self) -> Navigator:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport.

        Navigators derived from this one share the transport and stop
        working too.
        """
        await self._transport.aclose()

    # ------------------------------------------------------------------ #
    # Chain building
    # ------------------------------------------------------------------ #

    def do(self, step: Step) -> Navigator:
        """Append an arbitrary step.

        This is the extension point: any coroutine function with the
        ``Step`` signature can take part in a navigation.
        """
        return Navigator(self._start, self._steps.append(step), self._cache, self._transport)

    def follow(
        self,
        rel: str,
        first: bool = False,
        *,
        parameters: Mapping[str, Any] | None = None,
    ) -> Navigator:
        """Follow the relation *rel*.

        Anything but exactly one match is an error unless *first* is
        set, in which case the first match (sub-entities before links,
        document order within each) is used.
        """
        return self.do(follow(rel, first, parameters))

    def accept(self, ctype: str) -> Navigator:
        """Add *ctype* to the Accept header. Earlier calls take precedence."""
        return self.do(accept(ctype))

    def goto(self, url: str, debug: Debug = False) -> Navigator:
        """Jump to *url*, keeping the root and accumulated configuration.

        The current chain is resolved (on first use of the new navigator)
        to obtain that configuration, then discarded.
        """

        async def jump() -> NavState:
            state = await self._resolve(debug)
            emit(debug, Jumped(state.current, url))
            return NavState.at(url, state.root, state.config.with_seed(None), self._cache)

        return Navigator(Pending(jump), StepList(), self._cache, self._transport)

    def squash(self, debug: Debug = False) -> Navigator:
        """Collapse the chain into a memoized starting point.

        The returned navigator resolves the current chain once and
        reuses that state for every later terminal call. Only squash
        chains whose steps always produce the same result (no side
        effects, stable documents): nothing checks this.
        """
        start = Pending(lambda: self._resolve(debug))
        return Navigator(start, StepList(), self._cache, self._transport)

    def follow_each(self, rel: str, parameters: Mapping[str, Any] | None = None) -> MultiNavigator:
        """Fan out: navigate every match of *rel* independently."""
        start = self._start.then(_as_list)
        steps: StepList[MultiStep] = StepList.of(to_multi(step) for step in self._steps)
        return MultiNavigator(
            start,
            steps.append(follow_each(rel, parameters)),
            (),
            self._cache,
            self._transport,
        )

    # ------------------------------------------------------------------ #
    # Terminal operations
    # ------------------------------------------------------------------ #

    async def _resolve(self, debug: Debug) -> NavState:
        return await reduce(self._start, self._steps, self._cache, debug)

    async def get_url(self, debug: Debug = False) -> str:
        """URI of the resource at the end of the chain."""
        return (await self._resolve(debug)).current

    def get(self, debug: Debug = False) -> NavResponse:
        """Request the resource at the end of the chain."""

        async def fetch() -> httpx.Response:
            state = await self._resolve(debug)
            return await self._transport.get_request(state, debug)

        return NavResponse.create(fetch, self)

    def perform_action(self, name: str, body: Any, debug: Debug = False) -> NavResponse:
        """Submit *body* to the action *name* of the resource at the end of the chain."""

        async def submit() -> httpx.Response:
            state = await self._resolve(debug)
            return await self._transport.perform_action(state, name, body, debug)

        return NavResponse.create(submit, self)

    def perform_hyper_action(self, name: str, body: Entity, debug: Debug = False) -> NavResponse:
        """Like ``perform_action`` with a Siren entity as the payload."""
        return self.perform_action(name, body, debug)

    def __repr__(self) -> str:
        return f"Navigator(steps={len(self._steps)})"


async def _as_list(state: NavState) -> list[NavState]:
    return [state]
