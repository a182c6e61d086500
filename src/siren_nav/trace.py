"""Navigation trace events (the debug channel).

Typed, frozen dataclasses describing what the engine does while it
resolves a chain: relation lookups, candidate matches, header changes,
requests. Each exposes a human-readable ``description``.

Events are always written to the ``siren_nav.trace`` logger: at INFO when
the caller passed ``debug=True`` to a terminal operation, at DEBUG
otherwise. Passing a ``TraceEmitter`` as ``debug`` enables INFO logging
and additionally hands every event to the emitter's callback. None of
this affects control flow.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NavigationEvent:
    """Base class for all trace events."""

    @property
    def description(self) -> str:
        """Human-readable one-line summary of this event."""
        return self.__class__.__name__


# ---------------------------------------------------------------------------
# Relation resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FollowStarted(NavigationEvent):
    """Emitted before the current document is scanned for a relation."""

    rel: str
    uri: str

    @property
    def description(self) -> str:
        return f"Follow '{self.rel}' from {self.uri}"


@dataclass(frozen=True)
class CandidateFound(NavigationEvent):
    """Emitted for every sub-entity or link carrying the relation."""

    rel: str
    source: str  # "subentity link", "subentity resource" or "links"
    uri: str

    @property
    def description(self) -> str:
        return f"  Found possible match in {self.source}: {self.uri}"


@dataclass(frozen=True)
class FollowResolved(NavigationEvent):
    """Emitted when a relation resolved to a single next resource."""

    rel: str
    uri: str
    candidates: int

    @property
    def description(self) -> str:
        return f"  Found match for '{self.rel}' ({self.candidates} candidates): {self.uri}"


@dataclass(frozen=True)
class FollowFailed(NavigationEvent):
    """Emitted when a relation did not resolve to exactly one resource."""

    rel: str
    uri: str
    candidates: int

    @property
    def description(self) -> str:
        if self.candidates == 0:
            return f"  No links with relation '{self.rel}' in {self.uri}"
        return (
            f"  {self.candidates} links with relation '{self.rel}' in {self.uri} "
            "when only one was expected"
        )


@dataclass(frozen=True)
class FannedOut(NavigationEvent):
    """Emitted when a relation was expanded into every match."""

    rel: str
    sources: int
    results: int

    @property
    def description(self) -> str:
        return f"Follow each '{self.rel}': {self.sources} resources -> {self.results} matches"


# ---------------------------------------------------------------------------
# Configuration and position
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AcceptAdded(NavigationEvent):
    """Emitted when a content type is appended to the Accept header."""

    content_type: str
    uri: str
    header: str

    @property
    def description(self) -> str:
        return (
            f"Fetching data accepting '{self.content_type}' as content type "
            f"(Accept: {self.header}) for {self.uri}"
        )


@dataclass(frozen=True)
class Jumped(NavigationEvent):
    """Emitted when a navigator jumps to an explicit URI."""

    source: str
    target: str

    @property
    def description(self) -> str:
        return f"Goto {self.target} (from {self.source})"


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequestIssued(NavigationEvent):
    """Emitted when the transport requests the current resource."""

    method: str
    url: str

    @property
    def description(self) -> str:
        return f"{self.method} {self.url}"


@dataclass(frozen=True)
class ActionSubmitted(NavigationEvent):
    """Emitted when the transport submits a named action."""

    name: str
    method: str
    url: str
    content_type: str

    @property
    def description(self) -> str:
        return f"Action '{self.name}': {self.method} {self.url} ({self.content_type})"


# ------------------------------------------------------------------ #
# Emission
# ------------------------------------------------------------------ #


class TraceEmitter:
    """Delivers trace events to a callback.

    Pass an instance wherever a terminal operation takes ``debug``. Each
    emitter has its own callback, so concurrent navigations can be traced
    separately::

        events = []
        await nav.follow("widgets").get_url(debug=TraceEmitter(events.append))
    """

    def __init__(self, on_event: Callable[[NavigationEvent], None] | None = None) -> None:
        self._on_event = on_event

    def emit(self, event: NavigationEvent) -> None:
        if self._on_event is None:
            return
        try:
            self._on_event(event)
        except Exception:  # noqa: BLE001
            logger.exception("Trace callback %r failed", self._on_event)


# False: log at DEBUG. True: log at INFO. An emitter: log at INFO and deliver.
Debug = bool | TraceEmitter


def emit(debug: Debug, event: NavigationEvent) -> None:
    """Write *event* to the trace channel."""
    if not debug:
        logger.debug(event.description)
        return
    logger.info(event.description)
    if isinstance(debug, TraceEmitter):
        debug.emit(event)
