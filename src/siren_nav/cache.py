"""Resource cache consumed by the navigation engine.

The engine only ever calls ``get_or(uri)``: it asks for a handle on the
fetch of a resource and awaits it when it needs the document. Writes
happen inside the cache, as a side effect of its own loader.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from siren_nav.pending import Pending
from siren_nav.siren import Entity

logger = logging.getLogger(__name__)

CacheHandle = Pending[Entity]
"""A (possibly pending) fetch of one resource's document."""

Loader = Callable[[str], Awaitable[Entity]]


class Cache(Protocol):
    """Anything that can hand out a document handle for a URI."""

    def get_or(self, uri: str) -> CacheHandle:
        """Return the handle for *uri*, reusing an existing fetch if any."""
        ...


class ResourceCache:
    """In-memory cache of document fetches keyed by URI.

    Handles are lazy: ``get_or`` never performs I/O, the loader runs the
    first time somebody awaits the handle. A handle whose fetch failed is
    replaced on the next lookup so a later navigation can try again.

    Usage::

        transport = HttpTransport(config=TransportConfig(base_url=API))
        cache = ResourceCache(transport.fetch_document)
        doc = await cache.get_or(f"{API}/widgets")
    """

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._entries: dict[str, CacheHandle] = {}

    def get_or(self, uri: str) -> CacheHandle:
        handle = self._entries.get(uri)
        if handle is None or handle.failed:
            if handle is not None:
                logger.debug("Discarding failed fetch of %s", uri)
            handle = Pending(lambda: self._loader(uri))
            self._entries[uri] = handle
        return handle

    def invalidate(self, uri: str) -> bool:
        """Forget *uri*. Returns whether an entry was present."""
        return self._entries.pop(uri, None) is not None

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)
