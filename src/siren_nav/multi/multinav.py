"""The fan-out counterpart of ``Navigator``.

A ``MultiNavigator`` is not something callers usually build themselves.
It appears when a chain fans out, typically through
``Navigator.follow_each``, and from then on every step applies to each
resource independently.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx

from siren_nav.cache import Cache
from siren_nav.multi.multistep import MultiStep, follow_each, reduce_each, to_multi
from siren_nav.pending import Pending
from siren_nav.response import MultiResponse
from siren_nav.state import NavState
from siren_nav.steps import Chooser, Step, StepList, accept, follow
from siren_nav.trace import Debug
from siren_nav.transport import Transport


class MultiNavigator:
    """Immutable builder for navigations over several resources.

    Args:
        start: Pending list of starting states.
        steps: Multi-steps applied in order.
        omni: Ordinary steps applied to every resulting state once all
            multi-steps have run.
        cache: Shared resource cache.
        transport: Used by ``get`` to request each final resource.
    """

    def __init__(
        self,
        start: Pending[list[NavState]],
        steps: StepList[MultiStep],
        omni: tuple[Step, ...],
        cache: Cache,
        transport: Transport,
    ) -> None:
        self._start = start
        self._steps = steps
        self._omni = omni
        self._cache = cache
        self._transport = transport

    def _with(self, steps: StepList[MultiStep], omni: tuple[Step, ...]) -> MultiNavigator:
        return MultiNavigator(self._start, steps, omni, self._cache, self._transport)

    def do(self, step: Step) -> MultiNavigator:
        """Apply an ordinary step to every resource."""
        return self._with(self._steps.append(to_multi(step)), self._omni)

    def do_multi(self, step: MultiStep) -> MultiNavigator:
        return self._with(self._steps.append(step), self._omni)

    def follow(
        self,
        rel: str,
        parameters: Mapping[str, Any] | None = None,
        which: Chooser | None = None,
    ) -> MultiNavigator:
        """Follow *rel* from every resource, expecting one match each."""
        return self.do(follow(rel, False, parameters, which))

    def follow_each(self, rel: str, parameters: Mapping[str, Any] | None = None) -> MultiNavigator:
        """Fan out further: every match of *rel* becomes its own resource."""
        return self.do_multi(follow_each(rel, parameters))

    def accept(self, ctype: str) -> MultiNavigator:
        """Accept *ctype* when the final resources are requested."""
        return self._with(self._steps, (*self._omni, accept(ctype)))

    async def _resolve(self, debug: Debug) -> list[NavState]:
        steps = [*self._steps, *(to_multi(step) for step in self._omni)]
        return await reduce_each(self._start, steps, self._cache, debug)

    async def get_urls(self, debug: Debug = False) -> list[str]:
        """URIs of every resource at the end of the chain, in order."""
        return [state.current for state in await self._resolve(debug)]

    def get(self, debug: Debug = False) -> MultiResponse:
        """Request every resource at the end of the chain."""

        async def fetch() -> list[httpx.Response]:
            states = await self._resolve(debug)
            return list(
                await asyncio.gather(*(self._transport.get_request(s, debug) for s in states))
            )

        return MultiResponse.create(fetch)

    def __repr__(self) -> str:
        return f"MultiNavigator(steps={len(self._steps)}, omni={len(self._omni)})"
