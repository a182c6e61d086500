"""Navigation state: where a chain currently points.

Both types here are immutable. Steps never modify a state or its
configuration; they build new ones with the ``with_*`` / ``moved_to``
helpers, so a state shared by several navigators can never change
underneath any of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from siren_nav.cache import Cache, CacheHandle
    from siren_nav.siren import EmbeddedEntity


@dataclass(frozen=True)
class RequestConfig:
    """Request options carried from state to state.

    ``headers`` is a read-only mapping; ``seed`` is the embedded entity
    the state was reached through, when the relation matched an inline
    representation rather than a link.

    The engine and ``HttpTransport`` never read ``seed``: the resource
    is still fetched through the cache. It is informational, for custom
    steps and transports that want the inline representation.
    """

    base_url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    seed: EmbeddedEntity | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def with_header(self, name: str, value: str) -> RequestConfig:
        """Copy with *name* set to *value*."""
        return replace(self, headers={**self.headers, name: value})

    def with_accept(self, content_type: str) -> RequestConfig:
        """Copy with *content_type* appended to the Accept header.

        Earlier entries keep precedence: ``a`` then ``b`` yields ``"a, b"``.
        """
        current = self.headers.get("Accept")
        value = f"{current}, {content_type}" if current else content_type
        return self.with_header("Accept", value)

    def with_seed(self, seed: EmbeddedEntity | None) -> RequestConfig:
        """Copy carrying *seed* as the embedded representation."""
        return replace(self, seed=seed)


@dataclass(frozen=True)
class NavState:
    """An immutable position in an API.

    Attributes:
        current: URI of the resource currently pointed to.
        root: The API's anchor URI, unchanged for a navigator's lifetime.
        config: Request options for the current resource.
        cache_entry: Handle on the (possibly not yet started) fetch of
            ``current``. Always acquired for ``current`` itself.
    """

    current: str
    root: str
    config: RequestConfig
    cache_entry: CacheHandle = field(repr=False, compare=False)

    @classmethod
    def at(cls, uri: str, root: str, config: RequestConfig, cache: Cache) -> NavState:
        """Build a state for *uri*, acquiring its cache handle."""
        return cls(uri, root, config, cache.get_or(uri))

    def moved_to(
        self,
        uri: str,
        cache: Cache,
        config: RequestConfig | None = None,
    ) -> NavState:
        """A state at *uri* under the same root, with a fresh handle."""
        return NavState.at(uri, self.root, config if config is not None else self.config, cache)

    def with_config(self, config: RequestConfig) -> NavState:
        """Same resource, different request options."""
        return replace(self, config=config)
