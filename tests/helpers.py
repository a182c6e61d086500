"""Shared test fixtures: FakeApi, Siren document builders, a test server.

FakeApi is an in-memory transport serving scripted Siren documents. It
records every fetch, request and action so tests can check what the
engine actually asked for, without any network.
"""

from __future__ import annotations

from typing import Any

import httpx
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from siren_nav import Navigator, ResourceCache
from siren_nav.siren import SIREN_MEDIA_TYPE, Entity, parse_entity
from siren_nav.state import NavState
from siren_nav.trace import Debug

API = "http://api.test"


class FakeApi:
    """Scripted hypermedia API implementing the Transport protocol.

    Usage::

        api = FakeApi({
            "/api": document(links=[link("widgets", "/widgets")]),
            "/widgets": document(properties={"count": 0}),
        })
        nav = api.navigator("/api")
        assert await nav.follow("widgets").get_url() == "/widgets"
    """

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = dict(documents or {})
        self.fetches: list[str] = []
        self.requests: list[NavState] = []
        self.actions: list[tuple[str, str, Any]] = []
        self.closed = False
        self.cache = ResourceCache(self.fetch_document)

    def navigator(self, url: str = "/api", base: str = "/api") -> Navigator:
        return Navigator.create(url, base, self.cache, transport=self)

    def fetch_count(self, uri: str) -> int:
        return self.fetches.count(uri)

    async def fetch_document(self, uri: str) -> Entity:
        self.fetches.append(uri)
        if uri not in self.documents:
            raise httpx.HTTPStatusError(
                f"404 Not Found: {uri}",
                request=httpx.Request("GET", f"{API}{uri}"),
                response=httpx.Response(404),
            )
        return parse_entity(self.documents[uri])

    async def get_request(self, state: NavState, debug: Debug = False) -> httpx.Response:
        self.requests.append(state)
        return httpx.Response(
            200,
            json=self.documents.get(state.current, {}),
            headers={"Content-Type": SIREN_MEDIA_TYPE},
            request=httpx.Request(
                "GET", f"{API}{state.current}", headers=dict(state.config.headers)
            ),
        )

    async def perform_action(
        self,
        state: NavState,
        name: str,
        body: Any,
        debug: Debug = False,
    ) -> httpx.Response:
        self.actions.append((state.current, name, body))
        return httpx.Response(201, json={"action": name, "uri": state.current})

    async def aclose(self) -> None:
        self.closed = True


# ------------------------------------------------------------------ #
# Document builders (convenience for tests)
# ------------------------------------------------------------------ #


def link(rel: str | list[str], href: str) -> dict[str, Any]:
    """A top-level link."""
    return {"rel": [rel] if isinstance(rel, str) else rel, "href": href}


def sub_link(rel: str | list[str], href: str) -> dict[str, Any]:
    """An embedded link sub-entity."""
    return link(rel, href)


def sub_entity(
    rel: str | list[str],
    self_href: str | None = None,
    **properties: Any,
) -> dict[str, Any]:
    """An embedded representation, optionally with a self link."""
    entity: dict[str, Any] = {
        "rel": [rel] if isinstance(rel, str) else rel,
        "properties": properties,
    }
    if self_href is not None:
        entity["links"] = [link("self", self_href)]
    return entity


def document(
    *,
    entities: list[dict[str, Any]] | None = None,
    links: list[dict[str, Any]] | None = None,
    actions: list[dict[str, Any]] | None = None,
    **properties: Any,
) -> dict[str, Any]:
    """A top-level Siren document."""
    doc: dict[str, Any] = {"properties": properties}
    if entities is not None:
        doc["entities"] = entities
    if links is not None:
        doc["links"] = links
    if actions is not None:
        doc["actions"] = actions
    return doc


# ------------------------------------------------------------------ #
# In-process HTTP server
# ------------------------------------------------------------------ #


def make_siren_app(documents: dict[str, dict[str, Any]]) -> Starlette:
    """Starlette app serving *documents* by path, plus an echo endpoint.

    ``/echo`` answers any method with what it received, which lets tests
    inspect how actions were encoded.
    """

    async def echo(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "method": request.method,
                "content_type": request.headers.get("content-type"),
                "accept": request.headers.get("accept"),
                "query": dict(request.query_params),
                "body": (await request.body()).decode(),
            }
        )

    async def resource(request: Request) -> JSONResponse:
        path = "/" + request.path_params["path"]
        doc = documents.get(path)
        if doc is None:
            return JSONResponse({"error": f"{path} not found"}, status_code=404)
        return JSONResponse(doc, media_type=SIREN_MEDIA_TYPE)

    return Starlette(
        routes=[
            Route("/echo", echo, methods=["GET", "POST", "PUT", "PATCH", "DELETE"]),
            Route("/{path:path}", resource),
        ]
    )
