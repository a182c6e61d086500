"""Navigation steps and the reduction that applies them.

A ``Step`` is an async function ``(state, cache, debug) -> state``. The
navigator records steps without running them; ``reduce`` applies them in
order once a terminal operation needs the final state.

Built-in steps:

- ``follow(rel)``: move to the single resource reachable via ``rel``.
- ``accept(ctype)``: append a content type to the Accept header.

Anything with the same signature can be passed to ``Navigator.do``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

import httpx

from siren_nav.cache import Cache
from siren_nav.errors import AmbiguousMatchError, NoMatchError
from siren_nav.pending import Pending
from siren_nav.siren import EmbeddedEntity, EmbeddedLink, Entity
from siren_nav.state import NavState
from siren_nav.trace import (
    AcceptAdded,
    CandidateFound,
    Debug,
    FollowFailed,
    FollowResolved,
    FollowStarted,
    emit,
)

logger = logging.getLogger(__name__)

Step = Callable[[NavState, Cache, Debug], Awaitable[NavState]]
Chooser = Callable[[list[NavState]], NavState]

S = TypeVar("S")


class StepList(Generic[S]):
    """Persistent append-only sequence.

    ``append`` returns a new list sharing every existing cell with the
    receiver, so branching a navigator never copies its steps.
    """

    __slots__ = ("_prev", "_item", "_size")

    def __init__(self, prev: StepList[S] | None = None, item: Any = None, size: int = 0) -> None:
        self._prev = prev
        self._item = item
        self._size = size

    @classmethod
    def of(cls, items: Iterable[S]) -> StepList[S]:
        result: StepList[S] = cls()
        for item in items:
            result = result.append(item)
        return result

    def append(self, item: S) -> StepList[S]:
        return StepList(self, item, self._size + 1)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[S]:
        items: list[S] = []
        cell: StepList[S] | None = self
        while cell is not None and cell._size:
            items.append(cell._item)
            cell = cell._prev
        return reversed(items)

    def __repr__(self) -> str:
        return f"StepList({list(self)!r})"


# ------------------------------------------------------------------ #
# Reduction
# ------------------------------------------------------------------ #


async def reduce(
    start: Pending[NavState],
    steps: Iterable[Step],
    cache: Cache,
    debug: Debug,
) -> NavState:
    """Apply *steps* to the starting state, left to right.

    Each step waits for the previous one's result. The first failure
    stops the fold and propagates; later steps never run.
    """
    state = await start
    for step in steps:
        state = await step(state, cache, debug)
    return state


async def get_siren(state: NavState) -> Entity:
    """The document of the state's current resource."""
    return await state.cache_entry


# ------------------------------------------------------------------ #
# Built-in steps
# ------------------------------------------------------------------ #


def accept(ctype: str) -> Step:
    """Append *ctype* to the Accept header of subsequent requests."""

    async def accept_step(state: NavState, cache: Cache, debug: Debug) -> NavState:
        config = state.config.with_accept(ctype)
        emit(debug, AcceptAdded(ctype, state.current, config.headers["Accept"]))
        return state.moved_to(state.current, cache, config)

    return accept_step


def find_candidates(
    state: NavState,
    siren: Entity,
    rel: str,
    cache: Cache,
    debug: Debug,
    parameters: Mapping[str, Any] | None = None,
) -> list[NavState]:
    """Every state reachable from *siren* through *rel*.

    Sub-entities come first, then top-level links, each in declaration
    order. Embedded entities without a self link are not addressable and
    are skipped.
    """
    possible: list[NavState] = []
    plain = state.config.with_seed(None) if state.config.seed is not None else state.config

    for entity in siren.entities:
        if rel not in entity.rel:
            continue
        if isinstance(entity, EmbeddedLink):
            href = _with_parameters(entity.href, parameters)
            emit(debug, CandidateFound(rel, "subentity link", href))
            possible.append(state.moved_to(href, cache, plain))
        elif isinstance(entity, EmbeddedEntity) and entity.self_href:
            href = _with_parameters(entity.self_href, parameters)
            emit(debug, CandidateFound(rel, "subentity resource", href))
            possible.append(state.moved_to(href, cache, state.config.with_seed(entity)))

    for link in siren.links_for(rel):
        href = _with_parameters(link.href, parameters)
        emit(debug, CandidateFound(rel, "links", href))
        possible.append(state.moved_to(href, cache, plain))

    return possible


def follow(
    rel: str,
    first: bool = False,
    parameters: Mapping[str, Any] | None = None,
    which: Chooser | None = None,
) -> Step:
    """Move to the resource reachable via *rel*.

    Exactly one candidate is expected. With several candidates, *which*
    picks one when given; otherwise ``first=True`` takes the first in
    scan order and anything else raises ``AmbiguousMatchError``.
    """

    async def follow_step(state: NavState, cache: Cache, debug: Debug) -> NavState:
        siren = await get_siren(state)
        emit(debug, FollowStarted(rel, state.current))
        possible = find_candidates(state, siren, rel, cache, debug, parameters)

        if not possible:
            emit(debug, FollowFailed(rel, state.current, 0))
            logger.error(
                "Cannot follow relation '%s', no links with that relation in %s",
                rel,
                state.current,
            )
            raise NoMatchError(rel, siren)

        chosen = possible[0]
        if len(possible) > 1:
            if which is not None:
                chosen = which(possible)
            elif not first:
                emit(debug, FollowFailed(rel, state.current, len(possible)))
                logger.error(
                    "Multiple links with relation '%s' found in %s when only one was expected",
                    rel,
                    state.current,
                )
                raise AmbiguousMatchError(rel, siren, len(possible))

        emit(debug, FollowResolved(rel, chosen.current, len(possible)))
        return chosen

    return follow_step


def _with_parameters(href: str, parameters: Mapping[str, Any] | None) -> str:
    if not parameters:
        return href
    return str(httpx.URL(href).copy_merge_params(dict(parameters)))
