"""Steps over several navigation states at once.

A ``MultiStep`` maps a list of states to a new list. ``to_multi`` lifts
an ordinary step so it runs on every element independently;
``follow_each`` expands every element into all of its matches for a
relation. Elements are processed concurrently, each element's own steps
stay strictly ordered, and output order follows input order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from siren_nav.cache import Cache
from siren_nav.pending import Pending
from siren_nav.state import NavState
from siren_nav.steps import Step, find_candidates, get_siren
from siren_nav.trace import Debug, FannedOut, FollowStarted, emit

MultiStep = Callable[[list[NavState], Cache, Debug], Awaitable[list[NavState]]]


def to_multi(step: Step) -> MultiStep:
    """Apply *step* to every state, independently."""

    async def each(states: list[NavState], cache: Cache, debug: Debug) -> list[NavState]:
        return list(await asyncio.gather(*(step(s, cache, debug) for s in states)))

    return each


def follow_each(rel: str, parameters: Mapping[str, Any] | None = None) -> MultiStep:
    """Replace every state by all resources reachable via *rel*.

    Zero matches for a state is not an error; that state simply
    contributes nothing.
    """

    async def expand(state: NavState, cache: Cache, debug: Debug) -> list[NavState]:
        siren = await get_siren(state)
        emit(debug, FollowStarted(rel, state.current))
        return find_candidates(state, siren, rel, cache, debug, parameters)

    async def follow_each_step(
        states: list[NavState], cache: Cache, debug: Debug
    ) -> list[NavState]:
        groups = await asyncio.gather(*(expand(s, cache, debug) for s in states))
        result = [s for group in groups for s in group]
        emit(debug, FannedOut(rel, len(states), len(result)))
        return result

    return follow_each_step


async def reduce_each(
    start: Pending[list[NavState]],
    steps: Iterable[MultiStep],
    cache: Cache,
    debug: Debug,
) -> list[NavState]:
    """Apply *steps* to the starting states, left to right."""
    states = await start
    for step in steps:
        states = await step(states, cache, debug)
    return states
