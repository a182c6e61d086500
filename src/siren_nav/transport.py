"""HTTP transport: the only part of the package that talks to the network.

The navigation engine hands a resolved ``NavState`` to a ``Transport``
to fetch the current resource or submit one of its actions. The cache
uses ``fetch_document`` as its loader.

``HttpTransport`` implements the protocol on top of ``httpx.AsyncClient``.
Relative URIs are joined onto the state's ``base_url`` (or the
transport's own). Non-2xx responses raise ``httpx.HTTPStatusError``.

Usage::

    async with HttpTransport(config=TransportConfig(base_url=API)) as transport:
        cache = ResourceCache(transport.fetch_document)
        nav = Navigator.create(API, API, cache, transport=transport)
        widgets = await nav.follow("widgets").get().json()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

from siren_nav.errors import ActionNotFoundError
from siren_nav.siren import JSON_MEDIA_TYPE, SIREN_MEDIA_TYPE, Entity, parse_entity
from siren_nav.state import NavState
from siren_nav.trace import ActionSubmitted, Debug, RequestIssued, emit

logger = logging.getLogger(__name__)


@dataclass
class TransportConfig:
    """Settings for the underlying HTTP client."""

    base_url: str = ""
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)
    siren_media_type: str = SIREN_MEDIA_TYPE
    follow_redirects: bool = True


class Transport(Protocol):
    """Interface the navigator uses to reach the network."""

    async def fetch_document(self, uri: str) -> Entity:
        """Fetch and parse the hypermedia document at *uri*."""
        ...

    async def get_request(self, state: NavState, debug: Debug = False) -> httpx.Response:
        """Request the state's current resource."""
        ...

    async def perform_action(
        self,
        state: NavState,
        name: str,
        body: Any,
        debug: Debug = False,
    ) -> httpx.Response:
        """Submit *body* to the current resource's action *name*."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


class HttpTransport:
    """``Transport`` backed by an ``httpx.AsyncClient``.

    A client passed in is borrowed and left open by ``aclose``; one
    created here is owned and closed.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: TransportConfig | None = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            headers=self._config.headers,
            follow_redirects=self._config.follow_redirects,
        )

    @property
    def config(self) -> TransportConfig:
        return self._config

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Transport protocol
    # ------------------------------------------------------------------ #

    async def fetch_document(self, uri: str) -> Entity:
        url = self._resolve(uri, None)
        logger.debug("Fetching document %s", url)
        response = await self._client.get(url, headers={"Accept": self._config.siren_media_type})
        response.raise_for_status()
        return parse_entity(response.json())

    async def get_request(self, state: NavState, debug: Debug = False) -> httpx.Response:
        url = self._resolve(state.current, state.config.base_url)
        emit(debug, RequestIssued("GET", str(url)))
        response = await self._client.get(url, headers=dict(state.config.headers))
        response.raise_for_status()
        return response

    async def perform_action(
        self,
        state: NavState,
        name: str,
        body: Any,
        debug: Debug = False,
    ) -> httpx.Response:
        siren = await state.cache_entry
        action = siren.action(name)
        if action is None:
            raise ActionNotFoundError(name, [a.name for a in siren.actions], state.current)

        url = self._resolve(action.href, state.config.base_url)
        method = action.method.upper()
        headers = dict(state.config.headers)
        kwargs: dict[str, Any] = {}

        # Hypermedia bodies always travel as Siren; the rest follow the action
        if isinstance(body, BaseModel):
            content_type = self._config.siren_media_type
            headers["Content-Type"] = content_type
            kwargs["content"] = body.model_dump_json(by_alias=True, exclude_none=True)
        elif method == "GET":
            content_type = "query"
            kwargs["params"] = body
        elif action.type == JSON_MEDIA_TYPE:
            content_type = JSON_MEDIA_TYPE
            kwargs["json"] = body
        else:
            content_type = action.type
            kwargs["data"] = body

        emit(debug, ActionSubmitted(name, method, str(url), content_type))
        response = await self._client.request(method, url, headers=headers, **kwargs)
        response.raise_for_status()
        return response

    def _resolve(self, uri: str, base_url: str | None) -> httpx.URL:
        url = httpx.URL(uri)
        if url.is_absolute_url:
            return url
        base = base_url or self._config.base_url
        if base:
            return httpx.URL(base).join(url)
        # Left relative: the client's own base_url applies
        return url
